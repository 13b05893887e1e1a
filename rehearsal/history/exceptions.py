class PersistenceError(Exception):
    """Base exception for interview history storage errors."""


class PersistenceFailure(PersistenceError):
    """Raised when a record could not be written or read back.

    The session keeps the in-memory record and reports a warning.
    """
