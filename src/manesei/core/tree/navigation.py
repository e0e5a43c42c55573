"""Tree navigation: document location, breadcrumbs, child grouping."""

from manesei.models.document import Breadcrumb, DocumentMap


def document_location(documents: DocumentMap, slug: str) -> list[str]:
    """Return the slugs from the root's child down to ``slug``.

    The root itself is never part of the result, so the root and unknown
    slugs give an empty list. The walk stops if a host chain revisits a slug.
    """
    path: list[str] = []
    seen: set[str] = set()
    while slug in documents and slug not in seen:
        seen.add(slug)
        host = documents[slug].host
        if host == slug:
            if slug:
                path.append(slug)
            break
        path.append(slug)
        slug = host
    path.reverse()
    return path


def get_breadcrumbs(documents: DocumentMap, slug: str) -> tuple[Breadcrumb, ...]:
    """Get the breadcrumbs leading to ``slug``, including the document itself.

    Documents without a title are shown by their slug.
    """
    return tuple(
        Breadcrumb(slug=s, title=documents[s].title or s)
        for s in document_location(documents, slug)
    )


def split_children(documents: DocumentMap, slug: str) -> tuple[list[str], list[str]]:
    """Split the children of ``slug`` into leaves and branches.

    Returns (leaves, branches); both keep the children's order.
    """
    leaves: list[str] = []
    branches: list[str] = []
    doc = documents.get(slug)
    if doc is None:
        return leaves, branches
    for child in doc.children:
        if documents[child].children:
            branches.append(child)
        else:
            leaves.append(child)
    return leaves, branches
