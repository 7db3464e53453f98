"""
Per-object event listeners.

Any object can carry a registry of named listeners: register callbacks with
``add_listener``, drop them by id with ``remove_listener`` or in bulk with
``remove_listeners``, and fire them in registration order with ``trigger``.

Two ways to give an object listeners:
- inherit :class:`Emitter`, which owns its registry directly
- call :func:`listeners_of` on any weakly referenceable object
"""
from .side_table import attach, detach, is_attached, listeners_of
from .emitter import Emitter
from .errors import ObjectListenersError, SettingsError, UnsupportedSubjectError
from .listener import ArgCallback, ListenerEntry, NoArgCallback, as_callback
from .logging_config import configure_logging
from .registry import ListenerRegistry
from .settings import Settings, get_settings, set_settings

__all__ = [
    "ArgCallback",
    "Emitter",
    "ListenerEntry",
    "ListenerRegistry",
    "NoArgCallback",
    "ObjectListenersError",
    "Settings",
    "SettingsError",
    "UnsupportedSubjectError",
    "as_callback",
    "attach",
    "configure_logging",
    "detach",
    "get_settings",
    "is_attached",
    "listeners_of",
    "set_settings",
]
