import json
import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Dict, List, Mapping, Optional

from .errors import AlreadyExists, Corrupt, InvalidName, InvalidPayload, IOFailure, NotFound
from .file_store import TEMP_PREFIX, FileStore, StorePath
from .predicates import matches, validate_predicate

logger = logging.getLogger(__name__)

ID_FIELD = "uuid"
TRASH_PREFIX = ".trash-"
MAX_NAME_BYTES = 255


def check_name(name: Any, kind: str = "name") -> str:
    """Reject anything that is not one plain path component.

    Names starting with "." are reserved for temp files and collections pending removal.
    """
    if not isinstance(name, str) or not name:
        raise InvalidName(f"{kind} must be a non-empty string")
    if name in (".", "..") or name.startswith("."):
        raise InvalidName(f"invalid {kind}: {name!r}")
    if any(ch in name for ch in ("/", "\\", "\x00")):
        raise InvalidName(f"invalid {kind}: {name!r}")
    if len(name.encode("utf-8", "surrogatepass")) > MAX_NAME_BYTES:
        raise InvalidName(f"{kind} is longer than {MAX_NAME_BYTES} bytes")
    return name


@contextmanager
def _medium(action: str):
    """Turn stray OSErrors into IOFailure without leaking filesystem paths."""
    try:
        yield
    except OSError as e:
        logger.error("I/O error while trying to %s: %s", action, e)
        raise IOFailure(f"storage failure while trying to {action}") from e


class JsonStore:
    """JSON-on-disk document store: one directory per collection, one file per document.

    Every public method holds a single lock for its whole duration, so calls never
    overlap, even on unrelated collections. Filtering is a full scan of the
    collection; no index is kept.
    """

    def __init__(self, files: FileStore, lock: Optional[threading.Lock] = None):
        self.files = files
        self._lock = lock or threading.Lock()
        self._sweep_trash()

    def _sweep_trash(self):
        # Leftovers of delete_collection calls whose recursive removal failed,
        # and temp files of writes interrupted before their rename.
        with self._lock, _medium("clean up leftover files"):
            for name in self.files.list_dirs(()):
                if name.startswith(TRASH_PREFIX):
                    logger.info("Removing leftover deleted collection %s", name)
                    self.files.remove_tree((name,))
                elif not name.startswith("."):
                    for tmp in self.files.list_files((name,)):
                        if tmp.startswith(TEMP_PREFIX):
                            logger.info("Removing leftover temp file %s in %s", tmp, name)
                            self.files.remove_file((name, tmp))

    def _require_collection(self, collection: str):
        with _medium(f"look up collection {collection!r}"):
            found = self.files.exists_dir((collection,))
        if not found:
            raise NotFound(f"collection {collection!r} not found")

    def _require_not_dir(self, path: StorePath):
        collection, name = path
        with _medium(f"look up document {name!r} in {collection!r}"):
            is_dir = self.files.exists_dir(path)
        if is_dir:
            raise InvalidName(f"{name!r} in collection {collection!r} is a directory, not a document")

    def _load(self, path: StorePath) -> Dict[str, Any]:
        collection, name = path
        with _medium(f"read document {name!r} in {collection!r}"):
            try:
                text = self.files.read_text(path)
            except (FileNotFoundError, IsADirectoryError):
                raise NotFound(f"document {name!r} not found in collection {collection!r}") from None
            except UnicodeDecodeError as e:
                logger.warning("Document %s/%s is not valid UTF-8: %s", collection, name, e)
                raise Corrupt(f"document {name!r} in collection {collection!r} is corrupt") from e
        try:
            obj = json.loads(text)
        except ValueError as e:
            logger.warning("Document %s/%s is not valid JSON: %s", collection, name, e)
            raise Corrupt(f"document {name!r} in collection {collection!r} is corrupt") from e
        if not isinstance(obj, dict):
            logger.warning("Document %s/%s holds %s, not an object", collection, name, type(obj).__name__)
            raise Corrupt(f"document {name!r} in collection {collection!r} is not a JSON object")
        return obj

    def _save(self, path: StorePath, obj: Dict[str, Any]):
        text = json.dumps(obj, indent=2, ensure_ascii=False, allow_nan=False)
        with _medium(f"write document {path[1]!r} in {path[0]!r}"):
            self.files.atomic_write_text(path, text)

    # --- collections ---

    def create_collection(self, name: str):
        check_name(name, "collection name")
        with self._lock:
            with _medium(f"create collection {name!r}"):
                try:
                    self.files.make_dir((name,))
                except FileExistsError:
                    raise AlreadyExists(f"collection {name!r} already exists") from None
        logger.info("Created collection %s", name)

    def delete_collection(self, name: str):
        check_name(name, "collection name")
        with self._lock:
            self._require_collection(name)
            # One rename takes the whole collection out of view before the slow part.
            trash = (f"{TRASH_PREFIX}{uuid.uuid4().hex}",)
            with _medium(f"delete collection {name!r}"):
                self.files.rename_dir((name,), trash)
                self.files.remove_tree(trash)
        logger.info("Deleted collection %s", name)

    def list_collections(self) -> List[str]:
        with self._lock, _medium("list collections"):
            return [n for n in self.files.list_dirs(()) if not n.startswith(".")]

    # --- documents ---

    def create_or_update_document(self, collection: str, name: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Create the document or shallow-merge ``payload`` over it.

        The ``uuid`` field is assigned on first write and kept from then on; a
        ``uuid`` key in the payload is ignored. Returns the persisted object.
        """
        check_name(collection, "collection name")
        check_name(name, "document name")
        changes = _validate_payload(payload)
        with self._lock:
            self._require_collection(collection)
            path = (collection, name)
            self._require_not_dir(path)
            with _medium(f"read document {name!r} in {collection!r}"):
                exists = self.files.exists_file(path)
            data = self._load(path) if exists else {}
            if ID_FIELD not in data:
                data[ID_FIELD] = str(uuid.uuid4())
            for key, value in changes.items():
                if key != ID_FIELD:
                    data[key] = value
            self._save(path, data)
        logger.debug("%s document %s/%s", "Updated" if exists else "Created", collection, name)
        return data

    def get_document(self, collection: str, name: str) -> Dict[str, Any]:
        check_name(collection, "collection name")
        check_name(name, "document name")
        with self._lock:
            self._require_collection(collection)
            self._require_not_dir((collection, name))
            return self._load((collection, name))

    def delete_document(self, collection: str, name: str):
        check_name(collection, "collection name")
        check_name(name, "document name")
        with self._lock:
            self._require_collection(collection)
            self._require_not_dir((collection, name))
            with _medium(f"delete document {name!r} in {collection!r}"):
                if not self.files.exists_file((collection, name)):
                    raise NotFound(f"document {name!r} not found in collection {collection!r}")
                self.files.remove_file((collection, name))
        logger.debug("Deleted document %s/%s", collection, name)

    def list_documents(self, collection: str) -> List[str]:
        check_name(collection, "collection name")
        with self._lock:
            self._require_collection(collection)
            return self._document_names(collection)

    def filter_documents(self, collection: str, predicate: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """Scan every document in ``collection`` and return those matching all predicate fields.

        A single corrupt document fails the whole call with ``Corrupt`` rather than
        being skipped.
        """
        check_name(collection, "collection name")
        predicate = validate_predicate(predicate)
        with self._lock:
            self._require_collection(collection)
            return [
                doc
                for doc in (self._load((collection, n)) for n in self._document_names(collection))
                if matches(doc, predicate)
            ]

    def _document_names(self, collection: str) -> List[str]:
        with _medium(f"list documents in {collection!r}"):
            return [n for n in self.files.list_files((collection,)) if not n.startswith(".")]


def _validate_payload(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise InvalidPayload("document payload must be a JSON object")
    if not all(isinstance(k, str) for k in payload):
        raise InvalidPayload("document keys must be strings")
    try:
        json.dumps(payload, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise InvalidPayload(f"document payload is not valid JSON: {e}") from e
    return dict(payload)
