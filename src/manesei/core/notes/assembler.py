"""Turn raw note files into documents of an in-progress document map."""

import random
import string
from dataclasses import replace

from loguru import logger

from manesei.core.notes.header import parse_note
from manesei.models.document import DocFile, Document, DocumentMap


def _collides(documents: DocumentMap, slug: str, doc_id: str) -> bool:
    """True if ``slug`` is taken by a real document with a different id."""
    existing = documents.get(slug)
    return existing is not None and existing.id != "" and existing.id != doc_id


def assemble_document(
    documents: DocumentMap,
    doc_file: DocFile,
    *,
    rng: random.Random | None = None,
) -> Document:
    """Parse ``doc_file`` and store it in ``documents`` under a unique slug.

    When another file already claimed the slug, the new document is renamed
    to ``SLUG-duplicate`` (plus random lowercase letters until unique) and
    remembers the original slug in ``duplicate_of``. An existing entry with an
    empty id (the synthetic root) is taken over, keeping its children.

    Args:
        documents: Map being built; updated in place.
        doc_file: The raw file.
        rng: Random source for duplicate suffixes. Defaults to the module RNG.

    Returns:
        The stored document.
    """
    choice = rng.choice if rng is not None else random.choice
    doc = parse_note(doc_file.id, doc_file.body)

    if doc.slug in documents:
        if _collides(documents, doc.slug, doc_file.id):
            slug = doc.slug + "-duplicate"
            while _collides(documents, slug, doc_file.id):
                slug += choice(string.ascii_lowercase)
            logger.debug(
                "Slug {!r} of {!r} already taken, renamed to {!r}", doc.slug, doc_file.id, slug
            )
            doc = replace(doc, slug=slug, is_duplicate=True, duplicate_of=doc.slug)
        else:
            doc = replace(doc, children=documents[doc.slug].children)

    if doc.host == doc.slug:
        # Cyclic reference: attach to the root instead.
        doc = replace(doc, host="")
    elif doc.slug == "" and doc.host:
        # The root has no host.
        logger.debug("Ignoring host {!r} of root note {!r}", doc.host, doc_file.id)
        doc = replace(doc, host="")

    documents[doc.slug] = doc
    return doc
