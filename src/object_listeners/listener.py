from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union


@dataclass(frozen=True)
class NoArgCallback:
    """Listener callback invoked without data; any payload is ignored."""

    fn: Callable[[], Any]

    def invoke(self, payload: Any = None) -> None:
        self.fn()


@dataclass(frozen=True)
class ArgCallback:
    """Listener callback invoked with the trigger payload (``None`` when absent)."""

    fn: Callable[[Any], Any]

    def invoke(self, payload: Any = None) -> None:
        self.fn(payload)


Callback = Union[NoArgCallback, ArgCallback]

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _accepts_positional(fn: Callable[..., Any]) -> bool:
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        # Some builtins expose no signature; they get the payload.
        return True
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        # Defaulted positionals (the `lambda i=i:` loop idiom) keep their default.
        if param.kind in _POSITIONAL and param.default is inspect.Parameter.empty:
            return True
    return False


def as_callback(fn: Union[Callable[..., Any], Callback], expects_payload: Optional[bool] = None) -> Callback:
    """Classify ``fn`` into one of the two callback variants.

    Args:
        fn: A plain callable, or an already built ``NoArgCallback``/``ArgCallback``
            which is returned unchanged.
        expects_payload: Force the variant. When ``None`` the variant is inferred:
            callables taking at least one required positional parameter (or ``*args``)
            receive the payload, all others are called without arguments.

    Raises:
        TypeError: if ``fn`` is not callable.
    """
    if isinstance(fn, (NoArgCallback, ArgCallback)):
        return fn
    if not callable(fn):
        raise TypeError("callback must be callable")
    if expects_payload is None:
        expects_payload = _accepts_positional(fn)
    return ArgCallback(fn) if expects_payload else NoArgCallback(fn)


@dataclass(eq=False)
class ListenerEntry:
    """One registered callback plus its (non-unique) identifier.

    Entries compare by identity so that two registrations of the same function
    under the same id remain distinct members of a bucket.
    """

    callback: Callback
    listener_id: str = ""

    @property
    def expects_payload(self) -> bool:
        return isinstance(self.callback, ArgCallback)

    def invoke(self, payload: Any = None) -> None:
        self.callback.invoke(payload)

    def __repr__(self) -> str:
        fn = self.callback.fn
        name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)
        kind = "arg" if self.expects_payload else "noarg"
        return f"ListenerEntry(id={self.listener_id!r}, {kind}={name})"
