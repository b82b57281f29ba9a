class StorageError(Exception):
    """Base class for document store errors.

    ``status`` is the HTTP status the transport layer answers with.
    """

    status = 500


class NotFound(StorageError):
    """Referenced collection or document does not exist."""

    status = 404


class AlreadyExists(StorageError):
    """Collection name collides with an existing entry."""

    status = 400


class InvalidName(StorageError):
    """Collection or document name is not a single safe path component."""

    status = 400


class InvalidPayload(StorageError):
    """Payload or predicate is not a JSON object of the expected shape."""

    status = 400


class Corrupt(StorageError):
    """Stored document is not a well-formed JSON object."""

    status = 500


class IOFailure(StorageError):
    """Underlying storage medium error (permissions, disk full, ...)."""

    status = 500
