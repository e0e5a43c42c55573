"""Connect assembled documents into a tree rooted at the empty slug."""

from dataclasses import replace

from loguru import logger

from manesei.models.document import Document, DocumentMap


def title_case(s: str) -> str:
    """Return ``s`` with its first character uppercased."""
    return s[:1].upper() + s[1:]


def placeholder_document(slug: str) -> Document:
    """Return the stand-in for a host that no file defines."""
    title = title_case(slug)
    return Document(slug=slug, title=title, content="# " + title)


def _reachable(documents: DocumentMap, start: str = "") -> set[str]:
    seen = {start}
    stack = [start]
    while stack:
        for child in documents[stack.pop()].children:
            if child not in seen:
                seen.add(child)
                stack.append(child)
    return seen


def _host_cycle(documents: DocumentMap, slug: str) -> list[str]:
    """Follow hosts from ``slug`` and return the cycle the chain ends in."""
    chain: list[str] = []
    while slug not in chain:
        chain.append(slug)
        slug = documents[slug].host
    return chain[chain.index(slug) :]


def _break_cycles(documents: DocumentMap) -> None:
    """Re-host one member of every host cycle to the root.

    Documents on a cycle like A -> B -> A are linked to each other but not to
    the root. The member with the smallest slug is moved under the root,
    which also makes everything hanging off the cycle reachable.
    """
    reachable = _reachable(documents)
    for slug in sorted(documents):
        if slug in reachable:
            continue
        head = min(_host_cycle(documents, slug))
        doc = documents[head]
        logger.warning("Host cycle through {!r}, attaching it to the root", head)
        documents[doc.host] = documents[doc.host].remove_child(head)
        documents[head] = replace(doc, host="")
        documents[""] = documents[""].add_child(head)
        reachable |= _reachable(documents, head)


def link_documents(documents: DocumentMap) -> DocumentMap:
    """Fill in the children of every document.

    - Hosts that no file defines get a placeholder, listed under the root.
    - Each document is added once to its host's children.
    - Host cycles are broken at the root.
    - Children are sorted.

    Args:
        documents: Map produced by the assembler; updated in place.

    Returns:
        The same map, for chaining.
    """
    for doc in list(documents.values()):
        if doc.host == doc.slug:
            continue
        if doc.host not in documents:
            logger.debug("Host {!r} of {!r} missing, adding placeholder", doc.host, doc.slug)
            documents[doc.host] = placeholder_document(doc.host)
            documents[""] = documents[""].add_child(doc.host)
        documents[doc.host] = documents[doc.host].add_child(doc.slug)

    _break_cycles(documents)

    for slug, doc in documents.items():
        documents[slug] = replace(doc, children=tuple(sorted(doc.children)))
    return documents
