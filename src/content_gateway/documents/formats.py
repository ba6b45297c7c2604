"""
Supported output formats.
"""

from enum import Enum

from content_gateway.documents.exceptions import UnsupportedFormat


class DocumentFormat(str, Enum):
    """Closed set of export formats, decided at the request boundary."""

    PDF = "pdf"
    DOCX = "docx"
    RTF = "rtf"

    @classmethod
    def parse(cls, value: "str | DocumentFormat") -> "DocumentFormat":
        """
        Case-insensitive lookup.

        Raises:
            UnsupportedFormat: Value is not one of pdf, docx, rtf
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedFormat(
                f"Unsupported format: {value}",
                details={"format": value, "supported": [f.value for f in cls]},
            ) from None

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]

    @property
    def extension(self) -> str:
        return self.value


_MEDIA_TYPES = {
    DocumentFormat.PDF: "application/pdf",
    DocumentFormat.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    DocumentFormat.RTF: "application/rtf",
}
