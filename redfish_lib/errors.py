"""
Error taxonomy for the Redfish library.

Every failure surfaces to the caller as one of these; nothing is retried
internally.
"""

from typing import Optional


class RedfishError(Exception):
    """Base class for all errors raised by the library."""


class TransportError(RedfishError):
    """The service could not be reached or answered with an HTTP error."""

    def __init__(self, message: str, uri: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.uri = uri
        self.status_code = status_code


class DecodeError(RedfishError, ValueError):
    """A payload does not have the JSON shape expected for a resource, action or link."""
