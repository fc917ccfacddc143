"""
Error taxonomy for fetch_resource.

ValidationError and RequestConstructionError are raised synchronously,
before anything is dispatched. TransportError and ApiError are only ever
delivered through an operation's Outcome.
"""
from typing import Dict, List, Optional

from .types import TransportResponse


def format_body(body: Optional[bytes]) -> str:
    """Render a raw body for diagnostics without raising on bad encodings."""
    if not body:
        return ""
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        return f"<binary data: {len(body)} bytes>"


def _format_headers(headers: Optional[Dict[str, str]]) -> str:
    if not headers:
        return ""
    return ", ".join(f"{name}={value}" for name, value in headers.items())


class ClientError(Exception):
    """Base class for every error produced by fetch_resource."""

    def to_report(self) -> str:
        """Multi-line diagnostic report."""
        return f"error message: {self}\n"


class ValidationError(ClientError):
    """A call argument failed validation; nothing was sent."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def to_report(self) -> str:
        return f"error message: {self}\nfield: {self.field}\nreason: {self.reason}\n"


class RequestConstructionError(ClientError):
    """A path template placeholder has no url segment; nothing was sent."""

    def __init__(self, path_template: str, missing: List[str]):
        super().__init__(
            f"Missing url segment(s) {', '.join(missing)} for template {path_template!r}"
        )
        self.path_template = path_template
        self.missing = list(missing)

    def to_report(self) -> str:
        return (
            f"error message: {self}\n"
            f"template: {self.path_template}\n"
            f"missing segments: {', '.join(self.missing)}\n"
        )


class TransportError(ClientError):
    """The transport failed before producing a response."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        response: Optional[TransportResponse] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.response = response
        if cause is not None:
            self.__cause__ = cause

    def to_report(self) -> str:
        response = self.response or TransportResponse()
        return (
            f"error message: {self.message}\n"
            f"error exception: {self.cause!r}\n"
            f"response uri: {response.url or ''}\n"
            f"headers: {_format_headers(response.headers)}\n"
            f"content: {format_body(response.body)}\n"
        )


class ApiError(ClientError):
    """The server answered with a non-success status or a malformed body."""

    def __init__(
        self,
        status_code: int,
        status_description: str = "",
        body: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        response: Optional[TransportResponse] = None,
        message: Optional[str] = None,
    ):
        super().__init__(message or f"HTTP {status_code} {status_description}".rstrip())
        self.status_code = status_code
        self.status_description = status_description
        self.body = body
        self.headers = dict(headers or {})
        self.response = response

    @property
    def body_text(self) -> str:
        return format_body(self.body)

    def to_report(self) -> str:
        url = self.response.url if self.response is not None else None
        return (
            f"error message: {self}\n"
            f"status code: {self.status_code}\n"
            f"status desc: {self.status_description}\n"
            f"response uri: {url or ''}\n"
            f"headers: {_format_headers(self.headers)}\n"
            f"content: {self.body_text}\n"
        )
