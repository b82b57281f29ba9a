"""File-store backends used by the document engine.

Paths are tuples of name components relative to the store root, e.g.
``("users", "alice")``. Missing entries raise ``FileNotFoundError``,
collisions raise ``FileExistsError``; anything else the medium reports
surfaces as ``OSError``.
"""
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Protocol, Set, Tuple

StorePath = Tuple[str, ...]

TEMP_PREFIX = ".tmp-"


class FileStore(Protocol):
    def exists_dir(self, path: StorePath) -> bool: ...

    def exists_file(self, path: StorePath) -> bool: ...

    def list_dirs(self, path: StorePath) -> List[str]: ...

    def list_files(self, path: StorePath) -> List[str]: ...

    def read_text(self, path: StorePath) -> str: ...

    def atomic_write_text(self, path: StorePath, text: str) -> None: ...

    def remove_file(self, path: StorePath) -> None: ...

    def make_dir(self, path: StorePath) -> None: ...

    def rename_dir(self, src: StorePath, dst: StorePath) -> None: ...

    def remove_tree(self, path: StorePath) -> None: ...


class LocalFileStore:
    """Directories and files under ``base_dir`` on the local filesystem."""

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, path: StorePath) -> Path:
        return self.base_dir.joinpath(*path)

    def exists_dir(self, path: StorePath) -> bool:
        return self._path(path).is_dir()

    def exists_file(self, path: StorePath) -> bool:
        return self._path(path).is_file()

    def list_dirs(self, path: StorePath) -> List[str]:
        return [p.name for p in self._path(path).iterdir() if p.is_dir()]

    def list_files(self, path: StorePath) -> List[str]:
        return [p.name for p in self._path(path).iterdir() if p.is_file()]

    def read_text(self, path: StorePath) -> str:
        return self._path(path).read_text(encoding="utf-8")

    def atomic_write_text(self, path: StorePath, text: str) -> None:
        target = self._path(path)
        # Temp file lives in the target directory so os.replace stays on one filesystem.
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=TEMP_PREFIX)
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600; documents are plain 0644 files.
            os.chmod(tmp, 0o644)
            os.replace(tmp, target)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    def remove_file(self, path: StorePath) -> None:
        self._path(path).unlink()

    def make_dir(self, path: StorePath) -> None:
        self._path(path).mkdir()

    def rename_dir(self, src: StorePath, dst: StorePath) -> None:
        self._path(src).rename(self._path(dst))

    def remove_tree(self, path: StorePath) -> None:
        shutil.rmtree(self._path(path))


class MemoryFileStore:
    """In-memory stand-in for ``LocalFileStore``.

    Keeps the same error contract so engine logic can be exercised without disk I/O.
    Writes replace the whole value in one assignment, which is the in-memory
    equivalent of a rename.
    """

    def __init__(self):
        self.dirs: Set[StorePath] = {()}
        self.files: Dict[StorePath, str] = {}

    def _require_dir(self, path: StorePath):
        if path not in self.dirs:
            raise FileNotFoundError("/".join(path))

    def _children(self, path: StorePath, entries) -> List[str]:
        self._require_dir(path)
        depth = len(path)
        return [p[-1] for p in entries if len(p) == depth + 1 and p[:depth] == path]

    def exists_dir(self, path: StorePath) -> bool:
        return path in self.dirs

    def exists_file(self, path: StorePath) -> bool:
        return path in self.files

    def list_dirs(self, path: StorePath) -> List[str]:
        return self._children(path, self.dirs)

    def list_files(self, path: StorePath) -> List[str]:
        return self._children(path, self.files)

    def read_text(self, path: StorePath) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError("/".join(path)) from None

    def atomic_write_text(self, path: StorePath, text: str) -> None:
        self._require_dir(path[:-1])
        if path in self.dirs:
            raise IsADirectoryError("/".join(path))
        self.files[path] = text

    def remove_file(self, path: StorePath) -> None:
        try:
            del self.files[path]
        except KeyError:
            raise FileNotFoundError("/".join(path)) from None

    def make_dir(self, path: StorePath) -> None:
        self._require_dir(path[:-1])
        if path in self.dirs or path in self.files:
            raise FileExistsError("/".join(path))
        self.dirs.add(path)

    def rename_dir(self, src: StorePath, dst: StorePath) -> None:
        self._require_dir(src)
        if dst in self.dirs or dst in self.files:
            raise FileExistsError("/".join(dst))
        n = len(src)
        self.dirs = {dst + p[n:] if p[:n] == src else p for p in self.dirs}
        self.files = {(dst + p[n:] if p[:n] == src else p): v for p, v in self.files.items()}

    def remove_tree(self, path: StorePath) -> None:
        self._require_dir(path)
        n = len(path)
        self.dirs = {p for p in self.dirs if p[:n] != path}
        self.files = {p: v for p, v in self.files.items() if p[:n] != path}
