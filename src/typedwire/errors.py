from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from typedwire.validation import Issue


class TypedWireError(Exception):
    """Base class for errors raised by typedwire."""


class ApiError(TypedWireError):
    """A declared domain error raised by a handler.

    The dispatcher answers with ``status_code`` and ``message`` as plain text,
    unlike undeclared exceptions which become a generic 500.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)


class SchemaValidationError(TypedWireError, ValueError):
    """Raised form of a rejected validation: carries the ordered issue list."""

    def __init__(self, issues: List["Issue"]):
        self.issues = list(issues)
        lines = [f"{len(self.issues)} validation issue(s)"]
        for i, issue in enumerate(self.issues):
            path = ".".join(str(p) for p in issue.path) or "<root>"
            lines.append(f"  Issue #{i}: {issue.code} at {path} - {issue.message}")
        super().__init__("\n".join(lines))


class UnsupportedFrameError(TypedWireError, ValueError):
    """A transport frame that cannot carry an envelope, e.g. a binary WebSocket frame."""


class ApiClientError(TypedWireError):
    """Non-200 response seen by the typed client.

    ``str(err)`` is exactly the raw response body.
    """

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
