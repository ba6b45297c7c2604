"""
HTML to PDF rendering.

Delegates layout and pagination to markdown-pdf (PyMuPDF Story). The
intermediate markup is passed through as raw HTML blocks.
"""

import tempfile
from pathlib import Path

import structlog
from markdown_pdf import MarkdownPdf, Section

from content_gateway.documents.exceptions import RenderError

logger = structlog.get_logger(__name__)


class PdfConverter:
    """Renders markup directly to paginated PDF bytes."""

    def __init__(self, title: str = "Posts"):
        self.title = title

    def convert(self, markup: str) -> bytes:
        """
        Raises:
            RenderError: The rendering library failed
        """
        logger.info("Converting HTML to PDF", markup_length=len(markup))
        try:
            pdf = MarkdownPdf(toc_level=0)
            pdf.meta["title"] = self.title
            pdf.add_section(Section(markup, toc=False))

            with tempfile.TemporaryDirectory() as tmp_dir:
                output_path = Path(tmp_dir) / "document.pdf"
                pdf.save(str(output_path))
                return output_path.read_bytes()
        except Exception as e:
            logger.error("Error converting HTML to PDF", error=str(e))
            raise RenderError(
                "Failed to convert HTML to PDF", details={"error": str(e)}
            ) from e
