"""
Unit tests for FormatConverter dispatch.
"""

from unittest.mock import MagicMock

import pytest

from content_gateway.documents.converter import ConversionRequest, FormatConverter
from content_gateway.documents.exceptions import RenderError, UnsupportedFormat
from content_gateway.documents.formats import DocumentFormat
from content_gateway.documents.rtf_converter import RtfConverter


@pytest.fixture
def converters():
    pdf = MagicMock()
    pdf.convert.return_value = b"%PDF-fake"
    docx = MagicMock()
    docx.convert.return_value = b"PK-fake"
    rtf = MagicMock()
    rtf.convert.return_value = b"{\\rtf1}"
    return pdf, docx, rtf


@pytest.mark.parametrize(
    "fmt,index,expected",
    [("pdf", 0, b"%PDF-fake"), ("docx", 1, b"PK-fake"), ("rtf", 2, b"{\\rtf1}")],
)
def test_dispatch_by_format(converters, fmt, index, expected):
    converter = FormatConverter(*converters)

    assert converter.convert_markup("<p>x</p>", fmt) == expected
    converters[index].convert.assert_called_once_with("<p>x</p>")
    for other, mock in enumerate(converters):
        if other != index:
            mock.convert.assert_not_called()


def test_unsupported_format_fails_before_rendering(converters):
    converter = FormatConverter(*converters)

    with pytest.raises(UnsupportedFormat):
        converter.convert_markup("<p>x</p>", "odt")

    for mock in converters:
        mock.convert.assert_not_called()


def test_render_error_propagates(converters):
    pdf, docx, rtf = converters
    pdf.convert.side_effect = RenderError("PDF engine failed")
    converter = FormatConverter(pdf, docx, rtf)

    with pytest.raises(RenderError):
        converter.convert(ConversionRequest("<p>x</p>", DocumentFormat.PDF))


def test_default_rtf_converter_is_real():
    converter = FormatConverter()

    payload = converter.convert(ConversionRequest("<h1>Title</h1>", DocumentFormat.RTF))

    assert isinstance(converter.converters[DocumentFormat.RTF], RtfConverter)
    assert payload.startswith(b"{\\rtf1")
