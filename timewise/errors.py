class TimewiseError(Exception):
    """Base class for every error raised by the timewise package."""


class ValidationError(TimewiseError):
    """Activity data rejected before it reaches the store.

    The message is user-facing and is returned as-is by the API.
    """


class PersistenceError(TimewiseError):
    """Writing the activity blob failed (serialization or storage fault)."""


class MalformedStorageError(TimewiseError):
    """The persisted blob could not be decoded into activity records."""
