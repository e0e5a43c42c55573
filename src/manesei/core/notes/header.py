"""Parse and write the note file format.

A note file looks like this::

    HOST:SLUG TITLE
    KEY1: VALUE1
    KEY2: VALUE2

    BODY...

The first line is mandatory, but HOST, SLUG and TITLE may each be empty.
"""

from manesei.models.document import Document


def parse_note(doc_id: str, body: str) -> Document:
    """Parse one note file into a Document.

    Never raises: a malformed header block simply ends early, and everything
    after it is kept as the content.

    Args:
        doc_id: Store id of the file. Used as the slug when the first line
            has no ``:``.
        body: Full text of the file.

    Returns:
        Document without children. Collisions and cycles are not resolved here.
    """
    lines = body.split("\n")
    head = lines[0].split(" ", 1)
    host, sep, slug = head[0].partition(":")
    if not sep:
        slug = doc_id
    title = head[1] if len(head) > 1 else slug

    headers: dict[str, str] = {}
    # The line that terminates the header block is consumed with it.
    consumed = 1
    for line in lines[1:]:
        consumed += 1
        if line.strip() == "":
            break
        key, sep, value = line.partition(":")
        if not sep:
            break
        headers[key.strip()] = value.strip()

    return Document(
        id=doc_id,
        host=host,
        slug=slug,
        title=title,
        headers=headers,
        content="\n".join(lines[consumed:]),
    )


def serialize_note(doc: Document) -> str:
    """Return the file text for ``doc``, headers in sorted key order."""
    header_lines = "".join(f"{k}: {v}\n" for k, v in sorted(doc.headers.items()))
    return f"{doc.host}:{doc.slug} {doc.title}\n{header_lines}\n{doc.content}"
