from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

from .listener import Callback, ListenerEntry, as_callback
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ListenerRegistry(Generic[T]):
    """Thread-safe mapping from event name to an ordered bucket of listeners.

    Listeners for an event fire in registration order. ``trigger`` iterates a
    snapshot of the bucket taken under the lock and calls listeners outside it,
    so listeners may add or remove listeners (even on this registry) without
    affecting the trigger in progress.

    A bucket, once created, stays as a key even when emptied; a missing key and
    an empty bucket both mean "no listeners".
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._items: Dict[str, List[ListenerEntry]] = {}
        self._lock = RLock()
        self._settings = settings

    @property
    def settings(self) -> Settings:
        """Explicit settings if given at construction, else the process default."""
        return self._settings if self._settings is not None else get_settings()

    @property
    def items(self) -> Dict[str, List[ListenerEntry]]:
        """Copy of the event -> bucket mapping."""
        with self._lock:
            return {name: list(bucket) for name, bucket in self._items.items()}

    def _unhandled(self, msg: str, *args: Any) -> None:
        level = logging.WARNING if self.settings.warn_on_unhandled else logging.DEBUG
        logger.log(level, msg, *args)

    def add_listener(
        self,
        event_name: str,
        callback: Union[Callable[..., Any], Callback],
        listener_id: Optional[str] = None,
        *,
        expects_payload: Optional[bool] = None,
    ) -> ListenerEntry:
        """Register ``callback`` at the end of the bucket for ``event_name``.

        Args:
            event_name: Matching ``trigger`` calls will fire this listener.
            callback: A callable, or a prebuilt ``NoArgCallback``/``ArgCallback``.
            listener_id: Optional identifier for later removal. Need not be unique.
            expects_payload: Force whether the callback receives the payload;
                inferred from its signature when omitted.

        Returns:
            The newly created entry.
        """
        entry = ListenerEntry(as_callback(callback, expects_payload), listener_id or "")
        with self._lock:
            bucket = self._items.setdefault(event_name, [])
            bucket.append(entry)
            size = len(bucket)
        logger.debug("Added %r to '%s' (%d listeners)", entry, event_name, size)
        return entry

    def remove_listener(self, event_name: str, listener_id: str) -> bool:
        """Remove the first listener of ``event_name`` whose id is ``listener_id``.

        Only the first match is removed. Returns ``False`` when the event has no
        bucket or nothing matched.
        """
        with self._lock:
            bucket = self._items.get(event_name)
            if bucket is not None:
                for index, entry in enumerate(bucket):
                    if entry.listener_id == listener_id:
                        del bucket[index]
                        logger.debug("Removed %r from '%s'", entry, event_name)
                        return True
        self._unhandled("No listener '%s' registered for '%s'", listener_id, event_name)
        return False

    def remove_listeners(self, event_name: Optional[str] = None) -> None:
        """Empty the bucket for ``event_name``, or drop every bucket when omitted."""
        with self._lock:
            if event_name is None:
                count = sum(len(bucket) for bucket in self._items.values())
                self._items.clear()
                logger.debug("Removed all %d listeners", count)
                return
            bucket = self._items.get(event_name)
            if bucket is not None:
                logger.debug("Removed %d listeners from '%s'", len(bucket), event_name)
                bucket.clear()

    def trigger(self, event_name: str, payload: Optional[T] = None) -> None:
        """Invoke every listener of ``event_name`` in registration order.

        Listeners that expect data receive ``payload`` (``None`` when omitted);
        the rest are called without arguments. Exceptions from a listener
        propagate to the caller and skip the remaining listeners unless the
        settings disable ``propagate_errors``, in which case they are logged.
        """
        with self._lock:
            snapshot = list(self._items.get(event_name, ()))
        if not snapshot:
            self._unhandled("Triggered '%s' with no listeners", event_name)
            return
        logger.debug("Triggering '%s' for %d listeners with payload: %r", event_name, len(snapshot), payload)
        propagate = self.settings.propagate_errors
        for entry in snapshot:
            if propagate:
                entry.invoke(payload)
                continue
            try:
                entry.invoke(payload)
            except Exception:
                logger.exception("Unhandled exception in listener %r for '%s'", entry, event_name)

    def event_names(self) -> List[str]:
        with self._lock:
            return list(self._items)

    def listener_count(self, event_name: Optional[str] = None) -> int:
        with self._lock:
            if event_name is None:
                return sum(len(bucket) for bucket in self._items.values())
            return len(self._items.get(event_name, ()))

    def has_listeners(self, event_name: str) -> bool:
        return self.listener_count(event_name) > 0

    def listener_ids(self, event_name: str) -> List[str]:
        with self._lock:
            return [entry.listener_id for entry in self._items.get(event_name, ())]

    def __len__(self) -> int:
        return self.listener_count()

    def __contains__(self, event_name: object) -> bool:
        with self._lock:
            return event_name in self._items

    def __repr__(self) -> str:
        with self._lock:
            sizes = {name: len(bucket) for name, bucket in self._items.items()}
        return f"ListenerRegistry({sizes})"
