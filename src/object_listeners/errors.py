class ObjectListenersError(Exception):
    """Base error for object_listeners exceptions."""


class UnsupportedSubjectError(ObjectListenersError, TypeError):
    """Raised when a subject cannot be tracked by the weak side table."""


class SettingsError(ObjectListenersError, ValueError):
    """Raised when a settings file cannot be read or fails validation."""
