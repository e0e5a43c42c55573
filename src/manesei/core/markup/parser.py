"""Convert note bodies to HTML.

The markup is a small, line-oriented cousin of Markdown:

- ``# Heading`` (up to ``######``; more ``#`` clamp to ``<h6>``)
- ``> quote``, ``- bullet``, ``. numbered item``
- ``---`` horizontal rule
- fenced code blocks between lines of three backticks, and inline code
- ``{href label}`` links (``{href}`` uses the href as label)

Documents are not split into paragraphs: newlines are kept as they are, and
HTML written in a note passes through untouched.
"""

from dataclasses import dataclass
from enum import Enum, auto

# Marks "drop the next character if it is a newline". Emitted after a code
# block so that the line break following the closing fence does not add an
# empty line to the output.
_NEWLINE_EATER = "\b"


class Element(Enum):
    HEADING = auto()
    BLOCKQUOTE = auto()
    UNORDERED_LIST = auto()
    ORDERED_LIST = auto()
    CODE_BLOCK = auto()
    INLINE_CODE = auto()
    LINK = auto()


@dataclass(frozen=True)
class Marker:
    """An open element on the parser stack."""

    element: Element
    level: int = 0  # heading level
    start: int = 0  # index where the link text starts


# Closing tags emitted when a line does not continue the element, or at the end.
_CLOSING_TAGS = {
    Element.BLOCKQUOTE: "</blockquote>",
    Element.UNORDERED_LIST: "</li></ul>",
    Element.ORDERED_LIST: "</li></ol>",
    Element.CODE_BLOCK: "</pre>",
    Element.INLINE_CODE: "</code>",
}

# Line prefix that continues an open list or quote.
_CONTINUATIONS = {
    Element.BLOCKQUOTE: ("\n> ", "\n"),
    Element.UNORDERED_LIST: ("\n- ", "</li><li>"),
    Element.ORDERED_LIST: ("\n. ", "</li><li>"),
}


def _closing_tag(marker: Marker) -> str:
    if marker.element is Element.HEADING:
        return f"</h{marker.level}>"
    return _CLOSING_TAGS[marker.element]


class _Parser:
    """Single pass over the text with a stack of open elements."""

    def __init__(self, document: str) -> None:
        # A leading newline lets tokens at the start of a line match as "\n...".
        self.content = document if document.startswith("\n") else "\n" + document
        self.stack: list[Marker] = []
        self.out = ""
        self.i = 0

    @property
    def top(self) -> Element | None:
        return self.stack[-1].element if self.stack else None

    def match(self, token: str) -> bool:
        return self.content.startswith(token, self.i)

    def run(self) -> str:
        while self.i < len(self.content):
            self.i += self.step()
        self.flush()

        out = self.out.removeprefix("\n")
        html: list[str] = []
        skip_newline = False
        for c in out:
            if c == _NEWLINE_EATER:
                skip_newline = True
                continue
            if not (skip_newline and c == "\n"):
                html.append(c)
            skip_newline = False
        return "".join(html)

    def step(self) -> int:
        """Handle the character at the current index and return how many were consumed."""
        c = self.content[self.i]

        if c == "\n":
            continuation = _CONTINUATIONS.get(self.top)  # type: ignore[arg-type]
            if continuation is not None and self.match(continuation[0]):
                self.out += continuation[1]
                return len(continuation[0])
            if self.top in (
                Element.HEADING,
                Element.BLOCKQUOTE,
                Element.UNORDERED_LIST,
                Element.ORDERED_LIST,
            ):
                self.out += _closing_tag(self.stack.pop())
            self.out += "\n"

        if self.top is Element.LINK and c != "}":
            return 1

        if self.match("\n```"):
            if self.top is Element.CODE_BLOCK:
                self.stack.pop()
                self.out += "</pre>" + _NEWLINE_EATER
            else:
                self.stack.append(Marker(Element.CODE_BLOCK))
                if self.out.endswith(_NEWLINE_EATER + "\n\n"):
                    # One blank line between two code blocks: drop it.
                    self.out = self.out[:-2]
                self.out += "<pre>"
            return 4

        if self.top is Element.CODE_BLOCK:
            if c != "\n":
                self.out += c
            return 1

        if c == "`":
            if self.top is Element.INLINE_CODE:
                self.stack.pop()
                self.out += "</code>"
            else:
                self.stack.append(Marker(Element.INLINE_CODE))
                self.out += "<code>"
            return 1

        if self.top is Element.INLINE_CODE:
            if c != "\n":
                self.out += c
            return 1

        if c == "{":
            self.stack.append(Marker(Element.LINK, start=self.i + 1))
            return 1

        if c == "}" and self.top is Element.LINK:
            link = self.content[self.stack.pop().start : self.i]
            href, sep, label = link.partition(" ")
            if not sep:
                label = href
            self.out += f'<a href="{href}">{label}</a>'
            return 1

        if self.match("\n#"):
            num = 0
            while self.content.startswith("#", self.i + 1 + num):
                num += 1
            if self.content.startswith(" ", self.i + 1 + num):
                level = min(num, 6)
                self.stack.append(Marker(Element.HEADING, level=level))
                self.out += f"<h{level}>"
                return num + 2

        if self.match("\n> "):
            self.stack.append(Marker(Element.BLOCKQUOTE))
            self.out += "<blockquote>"
            return 3

        if self.match("\n- "):
            self.stack.append(Marker(Element.UNORDERED_LIST))
            self.out += "<ul><li>"
            return 3

        if self.match("\n. "):
            self.stack.append(Marker(Element.ORDERED_LIST))
            self.out += "<ol><li>"
            return 3

        if self.match("\n---"):
            self.out += "<hr>"
            return 4

        if c != "\n":
            self.out += c
        return 1

    def flush(self) -> None:
        """Close whatever is still open at the end of the text."""
        while self.stack:
            marker = self.stack.pop()
            if marker.element is Element.LINK:
                self.out += "{" + self.content[marker.start :]
            else:
                self.out += _closing_tag(marker)


def parse_document(document: str) -> str:
    """Render a note body as HTML.

    Never raises: unknown or unbalanced markup is copied through.
    """
    return _Parser(document).run()
