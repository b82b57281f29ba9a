from .errors import AlreadyExists, Corrupt, InvalidName, InvalidPayload, IOFailure, NotFound, StorageError
from .file_store import FileStore, LocalFileStore, MemoryFileStore
from .json_store import ID_FIELD, JsonStore

__all__ = [
    "JsonStore",
    "ID_FIELD",
    "FileStore",
    "LocalFileStore",
    "MemoryFileStore",
    "StorageError",
    "NotFound",
    "AlreadyExists",
    "InvalidName",
    "InvalidPayload",
    "Corrupt",
    "IOFailure",
]
