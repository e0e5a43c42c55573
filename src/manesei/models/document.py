"""Domain models for the note graph."""

from dataclasses import dataclass, field, replace

from manesei.config import ROOT_CONTENT, ROOT_TITLE


@dataclass(frozen=True)
class DocFile:
    """A raw note file as read from the store."""

    id: str
    body: str


@dataclass(frozen=True)
class Document:
    """A single note in the document tree."""

    id: str = ""
    host: str = ""
    slug: str = ""
    title: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    content: str = ""
    children: tuple[str, ...] = ()
    # Set when another note already claimed the same slug.
    is_duplicate: bool = False
    duplicate_of: str = ""

    @property
    def is_root(self) -> bool:
        return self.slug == ""

    @property
    def is_placeholder(self) -> bool:
        """True for documents fabricated because a child named them as host."""
        return self.id == "" and self.slug != ""

    def add_child(self, slug: str) -> "Document":
        """Return a copy with ``slug`` appended to the children, unless present."""
        if slug in self.children:
            return self
        return replace(self, children=(*self.children, slug))

    def remove_child(self, slug: str) -> "Document":
        return replace(self, children=tuple(c for c in self.children if c != slug))


@dataclass(frozen=True)
class Breadcrumb:
    """A single ancestor in a breadcrumb trail."""

    slug: str
    title: str


# Mapping from slug to document. The root is stored at the empty slug.
DocumentMap = dict[str, Document]


def root_document() -> Document:
    """Return the synthetic root document."""
    return Document(title=ROOT_TITLE, content=ROOT_CONTENT)
