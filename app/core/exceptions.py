"""
Error taxonomy for the QA toolkit gateway.

Every error carries the HTTP status code it maps to and renders as the
``{"error": ..., "details": ...}`` body the dashboard panels expect.
"""

from typing import Any, Dict, Optional


class QAToolkitError(Exception):
    """Base exception for all toolkit errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(QAToolkitError):
    """A required request field is missing; raised before any outbound call."""

    status_code = 400


class UpstreamError(QAToolkitError):
    """The generation provider answered with a non-2xx status."""

    def __init__(self, message: str, details: Optional[str] = None, upstream_status: Optional[int] = None) -> None:
        super().__init__(message, details)
        self.upstream_status = upstream_status


class InternalError(QAToolkitError):
    """Network failure, undecodable envelope or any unexpected exception."""


class ProbeError(QAToolkitError):
    """The probed target could not be reached."""
