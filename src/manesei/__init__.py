"""Manesei: a personal wiki of hierarchically linked plain-text notes."""

from manesei.core.markup.parser import parse_document
from manesei.core.notes.resolver import load_documents, load_files, resolve_documents
from manesei.core.tree.navigation import document_location
from manesei.protocols import StoreProtocol
from manesei.store import FileStore

__all__ = [
    "FileStore",
    "StoreProtocol",
    "document_location",
    "load_documents",
    "load_files",
    "parse_document",
    "resolve_documents",
]
