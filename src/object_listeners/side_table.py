"""
Per-instance listener registries for arbitrary objects.

Registries live in a side table keyed by subject identity and hold the subject
only through a weak reference, so attaching listeners never extends a
subject's lifetime. When the subject is collected its registry is dropped.
Listeners that close over their own subject do keep it alive.

Objects that cannot be weakly referenced (ints, strings, ``__slots__`` classes
without ``__weakref__``) are rejected; such types should inherit
:class:`object_listeners.emitter.Emitter` instead.
"""
from __future__ import annotations

import logging
import weakref
from threading import RLock
from typing import Any, Callable, Dict, Optional, Tuple, Union

from .errors import UnsupportedSubjectError
from .listener import Callback, ListenerEntry
from .registry import ListenerRegistry

logger = logging.getLogger(__name__)

_lock = RLock()
_table: Dict[int, Tuple["weakref.ref[Any]", ListenerRegistry]] = {}


def _forget(key: int, ref: "weakref.ref[Any]") -> None:
    with _lock:
        current = _table.get(key)
        # The id may already belong to a newer subject.
        if current is not None and current[0] is ref:
            del _table[key]
            logger.debug("Released listener registry for collected subject %#x", key)


def _lookup(subject: Any) -> Optional[ListenerRegistry]:
    with _lock:
        current = _table.get(id(subject))
        if current is not None and current[0]() is subject:
            return current[1]
        return None


def _store(subject: Any, registry: ListenerRegistry) -> None:
    key = id(subject)
    try:
        ref = weakref.ref(subject, lambda r, key=key: _forget(key, r))
    except TypeError as exc:
        raise UnsupportedSubjectError(
            f"{type(subject).__name__!r} objects cannot be weakly referenced; use the Emitter mixin"
        ) from exc
    _table[key] = (ref, registry)


def listeners_of(subject: Any) -> ListenerRegistry:
    """Return the registry attached to ``subject``, creating it on first access."""
    with _lock:
        registry = _lookup(subject)
        if registry is None:
            registry = ListenerRegistry()
            _store(subject, registry)
            logger.debug("Created listener registry for %s at %#x", type(subject).__name__, id(subject))
        return registry


def attach(subject: Any, registry: ListenerRegistry) -> None:
    """Attach ``registry`` to ``subject``, replacing any existing one."""
    with _lock:
        _store(subject, registry)


def detach(subject: Any) -> Optional[ListenerRegistry]:
    """Drop and return the registry attached to ``subject``, if any."""
    with _lock:
        registry = _lookup(subject)
        if registry is not None:
            del _table[id(subject)]
        return registry


def is_attached(subject: Any) -> bool:
    return _lookup(subject) is not None


def add_listener(
    subject: Any,
    event_name: str,
    callback: Union[Callable[..., Any], Callback],
    listener_id: Optional[str] = None,
    *,
    expects_payload: Optional[bool] = None,
) -> ListenerEntry:
    return listeners_of(subject).add_listener(
        event_name, callback, listener_id, expects_payload=expects_payload
    )


def remove_listener(subject: Any, event_name: str, listener_id: str) -> bool:
    registry = _lookup(subject)
    if registry is None:
        return False
    return registry.remove_listener(event_name, listener_id)


def remove_listeners(subject: Any, event_name: Optional[str] = None) -> None:
    registry = _lookup(subject)
    if registry is not None:
        registry.remove_listeners(event_name)


def trigger(subject: Any, event_name: str, payload: Any = None) -> None:
    """Trigger ``event_name`` on ``subject``. Subjects without a registry are a no-op."""
    registry = _lookup(subject)
    if registry is not None:
        registry.trigger(event_name, payload)
