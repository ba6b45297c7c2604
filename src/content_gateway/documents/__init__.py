"""
Document generation pipeline.

Records -> DocumentRenderer (HTML) -> FormatConverter -> bytes

Converters:
- RtfConverter: recursive HTML to RTF transpiler
- PdfConverter: markdown-pdf / PyMuPDF rendering
- DocxConverter: python-docx container with an embedded HTML chunk
"""

from content_gateway.documents.converter import ConversionRequest, FormatConverter
from content_gateway.documents.docx_converter import DocxConverter
from content_gateway.documents.exceptions import RenderError, UnsupportedFormat
from content_gateway.documents.formats import DocumentFormat
from content_gateway.documents.pdf_converter import PdfConverter
from content_gateway.documents.renderer import DocumentRenderer
from content_gateway.documents.rtf_converter import RtfConverter, escape_rtf

__all__ = [
    "ConversionRequest",
    "DocumentFormat",
    "DocumentRenderer",
    "DocxConverter",
    "FormatConverter",
    "PdfConverter",
    "RenderError",
    "RtfConverter",
    "UnsupportedFormat",
    "escape_rtf",
]
