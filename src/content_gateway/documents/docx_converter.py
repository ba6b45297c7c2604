"""
HTML to DOCX conversion.

The markup is embedded as an HTML alternative-format chunk (altChunk) inside
an otherwise empty Word document; Word renders the chunk when the file is
opened.
"""

import io

import structlog
from docx import Document
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.packuri import PackURI
from docx.opc.part import Part
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from content_gateway.documents.exceptions import RenderError

logger = structlog.get_logger(__name__)

CHUNK_PARTNAME = "/word/htmlChunk1.html"
CHUNK_CONTENT_TYPE = "text/html"


def ensure_html_document(markup: str) -> str:
    """Wrap a bare fragment in html/head/body so Word imports it as a page."""
    head = markup.lstrip().lower()
    if head.startswith("<!doctype html") or head.startswith("<html"):
        return markup
    return (
        '<!DOCTYPE html><html><head><meta charset="UTF-8"></head><body>'
        + markup
        + "</body></html>"
    )


class DocxConverter:
    """Wraps markup as an embedded HTML chunk inside a DOCX container."""

    def convert(self, markup: str) -> bytes:
        """
        Raises:
            RenderError: The container could not be built or saved
        """
        logger.info("Converting HTML to DOCX", markup_length=len(markup))
        try:
            document = Document()
            main_part = document.part

            chunk = Part(
                PackURI(CHUNK_PARTNAME),
                CHUNK_CONTENT_TYPE,
                ensure_html_document(markup).encode("utf-8"),
                main_part.package,
            )
            r_id = main_part.relate_to(chunk, RT.A_F_CHUNK)

            alt_chunk = OxmlElement("w:altChunk")
            alt_chunk.set(qn("r:id"), r_id)

            # Body content must precede the trailing section properties
            body = document.element.body
            sect_pr = body.find(qn("w:sectPr"))
            if sect_pr is not None:
                sect_pr.addprevious(alt_chunk)
            else:
                body.append(alt_chunk)

            buffer = io.BytesIO()
            document.save(buffer)
            return buffer.getvalue()
        except Exception as e:
            logger.error("Error converting HTML to DOCX", error=str(e))
            raise RenderError(
                "Failed to convert HTML to DOCX", details={"error": str(e)}
            ) from e
