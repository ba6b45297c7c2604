"""
HTML to RTF transpiler.

A recursive descent over the parsed markup tree (element children only, in
document order) that emits RTF control words around escaped text.

Emission rules:

| Element | Output |
|---|---|
| h1-h6 | ``\\par \\b`` text ``\\b0 \\par`` |
| p | ``\\par`` text ``\\par`` |
| br | ``\\par`` |
| b, strong | ``\\b`` text ``\\b0`` |
| i, em | ``\\i`` text ``\\i0`` |
| u | ``\\ul`` text ``\\ulnone`` |
| ul | ``\\par \\bullet`` text per item, then ``\\par`` |
| ol | ``\\par N.`` text per item (1-based, reset per list), then ``\\par`` |
| li (outside a list) | nothing |
| anything else | own text + one space, then its children |

Recognized elements use their flattened text and do not recurse, so nested
markup inside a paragraph is emitted as plain text.
"""

from typing import Iterable

import structlog
from bs4 import BeautifulSoup, NavigableString, Tag

logger = structlog.get_logger(__name__)

PARAGRAPH = "\\par "
BOLD_ON, BOLD_OFF = "\\b ", "\\b0 "
ITALIC_ON, ITALIC_OFF = "\\i ", "\\i0 "
UNDERLINE_ON, UNDERLINE_OFF = "\\ul ", "\\ulnone "
# Control word delimiter plus one visible space before the item text
BULLET = "\\bullet  "

HEADINGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
BOLD = frozenset({"b", "strong"})
ITALIC = frozenset({"i", "em"})


def escape_rtf(text: str) -> str:
    """
    Escape a text payload for RTF.

    Order matters: backslashes first, so the escapes added for braces and
    newlines are not escaped again. Non-ASCII characters become ``\\uN?``
    (signed 16-bit code units) so the output stays 7-bit clean.
    """
    escaped = (
        text.replace("\\", "\\\\")
        .replace("{", "\\{")
        .replace("}", "\\}")
        .replace("\n", PARAGRAPH)
        .replace("\r", "")
    )
    if escaped.isascii():
        return escaped
    return "".join(_escape_unicode(char) for char in escaped)


def _escape_unicode(char: str) -> str:
    if ord(char) < 128:
        return char
    encoded = char.encode("utf-16-le")
    units = [int.from_bytes(encoded[i:i + 2], "little") for i in range(0, len(encoded), 2)]
    return "".join(f"\\u{unit - 65536 if unit > 32767 else unit}?" for unit in units)


class RtfDocument:
    """Output buffer for one conversion call."""

    def __init__(self, font: str = "Arial"):
        self._parts: list[str] = [
            "{\\rtf1\\ansi\\deff0 {\\fonttbl {\\f0 " + escape_rtf(font) + ";}}\n"
        ]

    def write(self, *chunks: str) -> None:
        """Append raw RTF (control words or already escaped text)."""
        self._parts.extend(chunks)

    def write_text(self, text: str) -> None:
        self._parts.append(escape_rtf(text))

    def close(self) -> str:
        """Terminate the document and return the full RTF source."""
        self._parts.append("}")
        return "".join(self._parts)


class RtfConverter:
    """
    Converts intermediate HTML markup to RTF bytes.

    Never raises on malformed markup: unknown elements fall back to emitting
    their own text and recursing into their children.
    """

    def __init__(self, font: str = "Arial"):
        self.font = font

    def convert(self, markup: str) -> bytes:
        logger.info("Converting HTML to RTF", markup_length=len(markup))
        soup = BeautifulSoup(markup, "html.parser")
        root = soup.body or soup

        document = RtfDocument(self.font)
        self._walk(root.children, document)
        return document.close().encode("ascii")

    def _walk(self, nodes: Iterable, document: RtfDocument) -> None:
        for node in nodes:
            if isinstance(node, Tag):
                self._emit(node, document)

    def _emit(self, element: Tag, document: RtfDocument) -> None:
        name = (element.name or "").lower()

        if name in HEADINGS:
            document.write(PARAGRAPH, BOLD_ON)
            document.write_text(_flat_text(element))
            document.write(BOLD_OFF, PARAGRAPH)
        elif name == "p":
            document.write(PARAGRAPH)
            document.write_text(_flat_text(element))
            document.write(PARAGRAPH)
        elif name == "br":
            document.write(PARAGRAPH)
        elif name in BOLD:
            self._wrap(element, document, BOLD_ON, BOLD_OFF)
        elif name in ITALIC:
            self._wrap(element, document, ITALIC_ON, ITALIC_OFF)
        elif name == "u":
            self._wrap(element, document, UNDERLINE_ON, UNDERLINE_OFF)
        elif name == "ul":
            self._list(element, document, ordered=False)
        elif name == "ol":
            self._list(element, document, ordered=True)
        elif name == "li":
            # Only list handlers consume items
            return
        else:
            own = _own_text(element)
            if own:
                document.write_text(own)
                document.write(" ")
            self._walk(element.children, document)

    def _wrap(self, element: Tag, document: RtfDocument, on: str, off: str) -> None:
        document.write(on)
        document.write_text(_flat_text(element))
        document.write(off)

    def _list(self, element: Tag, document: RtfDocument, ordered: bool) -> None:
        items = element.find_all("li", recursive=False)
        for number, item in enumerate(items, start=1):
            document.write(PARAGRAPH, f"{number}. " if ordered else BULLET)
            document.write_text(_flat_text(item))
        document.write(PARAGRAPH)


def _flat_text(element: Tag) -> str:
    return element.get_text().strip()


def _own_text(element: Tag) -> str:
    # Exact type check skips comments, doctypes, and script/style contents
    return "".join(
        str(child) for child in element.children if type(child) is NavigableString
    ).strip()
