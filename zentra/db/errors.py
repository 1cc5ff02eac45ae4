from __future__ import annotations


class DataAccessError(RuntimeError):
    pass


class StorageError(DataAccessError):
    """Raised when the key/value backend cannot be read or written."""


class UnknownTableError(DataAccessError, ValueError):
    pass


class RemoteError(DataAccessError):
    """Any failure talking to the remote backend."""


class InsertError(DataAccessError):
    """A record could not be persisted by either tier."""


class InvalidCredentialsError(DataAccessError):
    pass


class RecordNotFoundError(DataAccessError):
    pass


class InvalidTransitionError(DataAccessError, ValueError):
    pass
