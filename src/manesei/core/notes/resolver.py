"""Build the document tree from the files of a store.

The tree is rebuilt on every request; nothing here is cached.
"""

import random

from loguru import logger

from manesei.core.notes.assembler import assemble_document
from manesei.core.notes.linker import link_documents
from manesei.errors import StoreError
from manesei.models.document import DocFile, Document, DocumentMap, root_document
from manesei.protocols import StoreProtocol


def read_file(store: StoreProtocol, doc_id: str, generation: int = 0) -> DocFile:
    """Read one file (or one of its historic generations) from the store.

    Raises:
        StoreError: The file cannot be opened or read. Status 404 when it does
            not exist.
    """
    try:
        fd = store.open(doc_id, generation)
    except FileNotFoundError as e:
        raise StoreError(f"Failed to open file {doc_id}", cause=e, status=404) from e
    except (OSError, ValueError) as e:
        raise StoreError(f"Failed to open file {doc_id}", cause=e) from e
    with fd:
        try:
            body = fd.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StoreError(f"Failed to read file {doc_id}", cause=e) from e
    return DocFile(id=doc_id, body=body)


def load_files(store: StoreProtocol) -> list[DocFile]:
    """Read the current version of every file in the store."""
    try:
        ids = store.list("/", include_dirs=False, recursive=True)
    except (OSError, ValueError) as e:
        raise StoreError("Failed to retrieve document list", cause=e) from e
    return [read_file(store, doc_id.removeprefix("/")) for doc_id in ids]


def load_documents(
    doc_files: list[DocFile],
    *,
    rng: random.Random | None = None,
) -> DocumentMap:
    """Assemble and link ``doc_files`` into a document map.

    Args:
        doc_files: Raw files, in any order. The order only decides which of
            two files claiming the same slug keeps it.
        rng: Random source for duplicate slug suffixes.

    Returns:
        Map from slug to document, with the root at the empty slug.
    """
    documents: DocumentMap = {"": root_document()}
    for doc_file in doc_files:
        assemble_document(documents, doc_file, rng=rng)
    link_documents(documents)
    logger.debug("Resolved {} files into {} documents", len(doc_files), len(documents))
    return documents


def resolve_documents(
    store: StoreProtocol,
    *,
    rng: random.Random | None = None,
) -> DocumentMap:
    """Load every file of ``store`` and return the linked document map."""
    return load_documents(load_files(store), rng=rng)


def find_by_id(documents: DocumentMap, doc_id: str) -> Document | None:
    """Return the document read from file ``doc_id``, if any."""
    if not doc_id:
        return None
    for doc in documents.values():
        if doc.id == doc_id:
            return doc
    return None
