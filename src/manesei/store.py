"""Versioned plain-file store for notes."""

import os
import shutil
import tempfile
from pathlib import Path, PurePosixPath
from types import TracebackType
from typing import TextIO

from loguru import logger

from manesei.config import HISTORY_DIRNAME


class IllegalPathError(ValueError):
    """The id does not name a location inside the store."""


class NotExistError(FileNotFoundError):
    """The file (or the requested generation of it) does not exist."""


def _raise(x: Exception) -> None:
    """Workaround for python's hate of one-liners."""
    raise x


class _PendingFile:
    """Write handle that replaces the target file only when closed cleanly.

    The previous version of the file is copied into the history before the
    replacement, so every successful write creates one generation.
    """

    def __init__(self, store: "FileStore", doc_id: str, path: Path) -> None:
        self._store = store
        self._doc_id = doc_id
        self._path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        self._tmp = tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=".tmp-", delete=False
        )
        self.closed = False

    def write(self, s: str) -> int:
        return self._tmp.write(s)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._tmp.close()
        self._store._commit(self._doc_id, self._path, Path(self._tmp.name))

    def discard(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._tmp.close()
        Path(self._tmp.name).unlink(missing_ok=True)

    def __enter__(self) -> "_PendingFile":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.close()
        else:
            self.discard()


class FileStore:
    """Store notes as files below a root directory.

    - ``ROOT/<id>`` holds the current version of a note.
    - ``ROOT/.history/<id>/<generation>`` holds older versions, numbered from 1.

    Ids are relative paths. Anything escaping the root or pointing into the
    history area is rejected with IllegalPathError.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = str(Path(root).resolve())
        Path(self.root).mkdir(parents=True, exist_ok=True)
        self.history_root = str(Path(self.root) / HISTORY_DIRNAME)
        logger.debug("Store ready, root {!r}", self.root)

    def _path(self, doc_id: str) -> Path:
        if not doc_id or PurePosixPath(doc_id).is_absolute():
            msg = f"must be a relative id: {doc_id!r}"
            raise IllegalPathError(msg)
        parts = PurePosixPath(doc_id).parts
        if ".." in parts or parts[0] == HISTORY_DIRNAME:
            msg = f"Illegal path: {doc_id!r}"
            raise IllegalPathError(msg)
        fname = str(Path(self.root) / doc_id)
        if not fname.startswith(self.root + "/"):
            msg = f"Path escapes store root: {fname!r}"
            raise IllegalPathError(msg)
        return Path(fname)

    def _history_dir(self, doc_id: str) -> Path:
        self._path(doc_id)
        return Path(self.history_root) / doc_id

    def open(self, doc_id: str, generation: int = 0) -> TextIO:
        """Open the current file (generation 0) or a historic generation."""
        if generation < 0:
            msg = f"Invalid generation {generation} of {doc_id!r}"
            raise NotExistError(msg)
        if generation == 0:
            path = self._path(doc_id)
        else:
            path = self._history_dir(doc_id) / str(generation)
        if not path.is_file():
            msg = f"No such entry: {doc_id!r} (generation {generation})"
            raise NotExistError(msg)
        return open(path, encoding="utf-8")

    def write(self, doc_id: str) -> _PendingFile:
        """Open a file for writing. The file is replaced once the handle is closed."""
        return _PendingFile(self, doc_id, self._path(doc_id))

    def _commit(self, doc_id: str, path: Path, tmp: Path) -> None:
        action = "create"
        if path.is_file():
            action = "update"
            if path.read_bytes() == tmp.read_bytes():
                tmp.unlink()
                logger.debug("Unchanged {!r}, nothing written", doc_id)
                return
            history = self._history_dir(doc_id)
            history.mkdir(parents=True, exist_ok=True)
            generation = max(self.file_history(doc_id), default=0) + 1
            shutil.copy2(path, history / str(generation))
        os.replace(tmp, path)
        logger.info("Wrote ({}) {!r}", action, doc_id)

    def stat(self, doc_id: str, *, follow_symlinks: bool = False) -> os.stat_result:
        path = self._path(doc_id)
        try:
            return path.stat(follow_symlinks=follow_symlinks)
        except FileNotFoundError as e:
            msg = f"No such entry: {doc_id!r}"
            raise NotExistError(msg) from e

    def file_history(self, doc_id: str) -> list[int]:
        """Return the generations stored for ``doc_id``, oldest first."""
        history = self._history_dir(doc_id)
        if not history.is_dir():
            return []
        return sorted(int(p.name) for p in history.iterdir() if p.name.isdigit())

    def remove(self, doc_id: str) -> None:
        """Delete a file together with its history."""
        path = self._path(doc_id)
        if not path.is_file():
            msg = f"No such entry: {doc_id!r}"
            raise NotExistError(msg)
        path.unlink()
        history = self._history_dir(doc_id)
        if history.is_dir():
            shutil.rmtree(history)
        logger.info("Removed {!r}", doc_id)

    def list(
        self, prefix: str = "/", *, include_dirs: bool = False, recursive: bool = True
    ) -> list[str]:
        """Return ids below ``prefix``, sorted. Hidden entries are skipped."""
        prefix = prefix.strip("/")
        start = Path(self.root) / prefix if prefix else Path(self.root)
        if prefix:
            self._path(prefix)
        if not start.is_dir():
            return []

        ids: list[str] = []
        for dirpath, dirnames, filenames in os.walk(start, onerror=_raise):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            rel_dir = Path(dirpath).relative_to(self.root)
            if include_dirs:
                ids.extend(str(rel_dir / d) + "/" for d in dirnames)
            ids.extend(str(rel_dir / f) for f in filenames if not f.startswith("."))
            if not recursive:
                break
        return sorted(i.removeprefix("./") for i in ids)

