from __future__ import annotations

from threading import RLock
from typing import Any, Callable, Optional, Union

from .listener import Callback, ListenerEntry
from .registry import ListenerRegistry

_create_lock = RLock()


class Emitter:
    """Mixin giving a class its own listener registry.

    The registry is created lazily on first access to :attr:`listeners` and is
    owned by the instance, so it lives and dies with it. Works with
    ``__slots__`` subclasses since the mixin declares its own slot.

    Example:
        class Player(Emitter):
            def heal(self, amount: int) -> None:
                self.trigger("healed", amount)

        p = Player()
        p.add_listener("healed", lambda amount: print(amount), "hud")
    """

    __slots__ = ("_listeners",)

    @property
    def listeners(self) -> ListenerRegistry:
        try:
            return self._listeners
        except AttributeError:
            pass
        with _create_lock:
            try:
                return self._listeners
            except AttributeError:
                self._listeners = ListenerRegistry()
                return self._listeners

    @listeners.setter
    def listeners(self, registry: ListenerRegistry) -> None:
        self._listeners = registry

    def add_listener(
        self,
        event_name: str,
        callback: Union[Callable[..., Any], Callback],
        listener_id: Optional[str] = None,
        *,
        expects_payload: Optional[bool] = None,
    ) -> ListenerEntry:
        return self.listeners.add_listener(event_name, callback, listener_id, expects_payload=expects_payload)

    def remove_listener(self, event_name: str, listener_id: str) -> bool:
        return self.listeners.remove_listener(event_name, listener_id)

    def remove_listeners(self, event_name: Optional[str] = None) -> None:
        self.listeners.remove_listeners(event_name)

    def trigger(self, event_name: str, payload: Any = None) -> None:
        self.listeners.trigger(event_name, payload)
