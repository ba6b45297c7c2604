"""
Unit tests for PdfConverter.
"""

from unittest.mock import patch

import pytest

from content_gateway.documents.exceptions import RenderError
from content_gateway.documents.pdf_converter import PdfConverter
from content_gateway.documents.renderer import DocumentRenderer


def test_pdf_output_is_a_pdf(sample_records):
    markup = DocumentRenderer().render(sample_records)
    payload = PdfConverter(title="Posts").convert(markup)

    assert payload.startswith(b"%PDF")


def test_engine_failure_becomes_render_error():
    with patch("content_gateway.documents.pdf_converter.MarkdownPdf") as engine:
        engine.return_value.save.side_effect = RuntimeError("story layout failed")

        with pytest.raises(RenderError) as exc_info:
            PdfConverter().convert("<p>x</p>")

    assert "story layout failed" in exc_info.value.details["error"]
