"""Protocols for dependency injection of the note store."""

import os
from typing import Protocol, TextIO, runtime_checkable


@runtime_checkable
class StoreProtocol(Protocol):
    """Protocol for versioned note stores.

    Generation 0 is the current version of a file; positive generations name
    historic revisions.
    """

    def open(self, doc_id: str, generation: int = 0) -> TextIO:
        """Open a file (or one of its historic generations) for reading."""
        ...

    def write(self, doc_id: str) -> TextIO:
        """Open a file for writing, creating it if needed."""
        ...

    def stat(self, doc_id: str, *, follow_symlinks: bool = False) -> os.stat_result:
        """Return file metadata, raising if the file does not exist."""
        ...

    def file_history(self, doc_id: str) -> list[int]:
        """Return the historic generation numbers of a file, oldest first."""
        ...

    def remove(self, doc_id: str) -> None:
        """Delete a file and its history."""
        ...

    def list(
        self, prefix: str = "/", *, include_dirs: bool = False, recursive: bool = True
    ) -> list[str]:
        """Return the ids of all files below ``prefix``."""
        ...

