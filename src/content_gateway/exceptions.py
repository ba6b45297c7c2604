"""
Base exceptions for the Content Gateway.

Every domain error carries a human-readable message plus a ``details`` dict
that ends up in structured logs and API error envelopes. Subsystems define
their own subclasses next to the code that raises them.
"""


class GatewayError(Exception):
    """
    Base exception for all gateway errors.

    Lets API handlers and callers catch any gateway failure with a single
    except clause while keeping structured context available.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(GatewayError):
    """
    Raised when the content API has no resource at the requested path.

    Never cached: a later call may find the resource.
    """
    pass
