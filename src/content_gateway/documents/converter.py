"""
Format dispatch for the document pipeline.

The format is parsed into DocumentFormat before any work starts, so an
unknown format never reaches a converter.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Protocol

import structlog

from content_gateway.documents.docx_converter import DocxConverter
from content_gateway.documents.exceptions import RenderError
from content_gateway.documents.formats import DocumentFormat
from content_gateway.documents.pdf_converter import PdfConverter
from content_gateway.documents.rtf_converter import RtfConverter
from content_gateway.monitoring.metrics import documents_rendered_total

logger = structlog.get_logger(__name__)


class MarkupConverter(Protocol):
    """Markup in, document bytes out (or RenderError)."""

    def convert(self, markup: str) -> bytes:
        ...


@dataclass(frozen=True)
class ConversionRequest:
    """Markup plus target format; consumed once."""

    markup: str
    format: DocumentFormat


class FormatConverter:
    """Dispatches markup to the converter registered for the requested format."""

    def __init__(
        self,
        pdf: Optional[MarkupConverter] = None,
        docx: Optional[MarkupConverter] = None,
        rtf: Optional[MarkupConverter] = None,
    ):
        self.converters: Dict[DocumentFormat, MarkupConverter] = {
            DocumentFormat.PDF: pdf or PdfConverter(),
            DocumentFormat.DOCX: docx or DocxConverter(),
            DocumentFormat.RTF: rtf or RtfConverter(),
        }

    def convert(self, request: ConversionRequest) -> bytes:
        """
        Raises:
            RenderError: The converter failed
        """
        logger.info("Converting HTML to format", format=request.format.value)
        try:
            payload = self.converters[request.format].convert(request.markup)
        except RenderError:
            documents_rendered_total.labels(format=request.format.value, status="error").inc()
            raise

        documents_rendered_total.labels(format=request.format.value, status="success").inc()
        return payload

    def convert_markup(self, markup: str, format: "str | DocumentFormat") -> bytes:
        """
        Parse the format, then convert.

        Raises:
            UnsupportedFormat: Before any rendering, for unknown formats
            RenderError: The converter failed
        """
        return self.convert(ConversionRequest(markup=markup, format=DocumentFormat.parse(format)))
