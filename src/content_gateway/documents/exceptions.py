"""
Document pipeline exceptions.
"""

from content_gateway.exceptions import GatewayError


class UnsupportedFormat(GatewayError):
    """
    Raised for a requested format outside {pdf, docx, rtf}.

    Raised at the boundary, before any rendering work begins.
    """
    pass


class RenderError(GatewayError):
    """
    Raised when a format converter cannot produce a document.

    The underlying library error is chained as ``__cause__``.
    """
    pass
