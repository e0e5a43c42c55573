"""Data sent to and received from the HTML editor form."""

import json
import uuid
from collections.abc import Mapping
from dataclasses import dataclass

from manesei.core.notes.header import serialize_note
from manesei.errors import FormError
from manesei.models.document import Document


def new_document_id() -> str:
    """Return a fresh opaque id for a note file."""
    return str(uuid.uuid4()).replace(":", "-")


@dataclass(frozen=True)
class DocumentForm:
    """Editor fields. ``headers`` is a JSON object of strings."""

    id: str = ""
    host: str = ""
    slug: str = ""
    title: str = ""
    headers: str = ""
    body: str = ""

    @classmethod
    def from_document(cls, doc: Document) -> "DocumentForm":
        return cls(
            id=doc.id,
            host=doc.host,
            slug=doc.slug,
            title=doc.title,
            headers=json.dumps(doc.headers, ensure_ascii=False) if doc.headers else "",
            body=doc.content,
        )

    @classmethod
    def from_request(cls, values: Mapping[str, str]) -> "DocumentForm":
        """Read the submitted fields. Browsers send CRLF line breaks; they become LF."""
        return cls(
            id=values.get("Id", ""),
            host=values.get("Host", ""),
            slug=values.get("Slug", ""),
            title=values.get("Title", ""),
            headers=values.get("Headers", ""),
            body=values.get("Body", "").replace("\r\n", "\n"),
        )

    def parsed_headers(self) -> dict[str, str]:
        """Decode the headers field.

        Raises:
            FormError: The field is not a JSON object of strings, or a key holds
                ":" or a line break, or a value holds a line break.
        """
        if not self.headers.strip():
            return {}
        try:
            headers = json.loads(self.headers)
        except json.JSONDecodeError as e:
            raise FormError("Failed to parse document headers", cause=e) from e
        if not isinstance(headers, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
        ):
            msg = f"Headers must map strings to strings, got {self.headers!r}"
            raise FormError("Failed to parse document headers", cause=ValueError(msg))
        for key, value in headers.items():
            if ":" in key or "\n" in key or "\n" in value:
                msg = f"Header {key!r} cannot be stored in a note file"
                raise FormError("Failed to parse document headers", cause=ValueError(msg))
        return headers

    def to_file(self) -> str:
        """Return the note file text for the submitted fields."""
        doc = Document(
            id=self.id,
            host=self.host,
            slug=self.slug,
            title=self.title,
            headers=self.parsed_headers(),
            content=self.body,
        )
        return serialize_note(doc)
