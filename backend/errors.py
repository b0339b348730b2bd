class JournalError(Exception):
    """Base class for errors raised by the journal core."""


class InvalidInputError(JournalError, ValueError):
    """A date, year or month supplied by the caller is malformed."""


class StorageError(JournalError):
    """A database operation failed and its transaction was rolled back."""
