"""Render the document tree as a markdown outline."""

import io

from manesei.models.document import DocumentMap


def render_tree_as_markdown(
    documents: DocumentMap,
    *,
    slug: str = "",
    max_depth: int | None = None,
) -> str:
    """Render a document and its descendants as an indented markdown list.

    Args:
        documents: Linked document map.
        slug: The document to start from (default: the root).
        max_depth: Max levels below the start document to include (None = unlimited).

    Returns:
        Markdown string with bullet-list hierarchy, one ``- TITLE (slug)`` per
        document. Placeholders are marked, and documents whose children are cut
        off by ``max_depth`` get a truncation line.
    """
    if slug not in documents:
        return ""

    out = io.StringIO()
    start = documents[slug]
    out.write(f"- {start.title or slug or '/'}\n")

    # Depth-first, children already sorted by the linker.
    todo: list[tuple[str, int]] = [(child, 1) for child in reversed(start.children)]
    seen = {slug}
    while todo:
        current, depth = todo.pop()
        if current in seen:
            continue
        seen.add(current)
        doc = documents[current]
        indent = "    " * depth

        suffix = " [placeholder]" if doc.is_placeholder else ""
        if doc.is_duplicate:
            suffix += f" [duplicate of {doc.duplicate_of}]"
        out.write(f"{indent}- {doc.title or current} ({current}){suffix}\n")

        if max_depth is not None and depth >= max_depth:
            if doc.children:
                noun = "child" if len(doc.children) == 1 else "children"
                out.write(f"{indent}    - ... ({len(doc.children)} more {noun})\n")
            continue
        todo.extend((child, depth + 1) for child in reversed(doc.children))

    return out.getvalue()
