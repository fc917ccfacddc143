"""
Type definitions for fetch_resource.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    List,
    Literal,
    Optional,
    Protocol,
    TypeVar,
)
from urllib.parse import quote

T = TypeVar("T")

# HTTP methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


class _Unset:
    """Marker for a field the caller did not supply."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Unset":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_Unset":
        return self


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    """Return True when a value was supplied (empty strings count)."""
    return value is not UNSET and value is not None


class DeleteStatus(str, Enum):
    """Result of a delete operation."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class RequestDescriptor:
    """Fully specified, pre-dispatch representation of one HTTP request."""

    method: HttpMethod
    path_template: str
    url_segments: Dict[str, str] = field(default_factory=dict)
    parameters: Dict[str, str] = field(default_factory=dict)

    def placeholders(self) -> List[str]:
        """Placeholder names in template order."""
        return PLACEHOLDER_PATTERN.findall(self.path_template)

    def missing_segments(self) -> List[str]:
        """Placeholders with no url segment."""
        return [name for name in self.placeholders() if name not in self.url_segments]

    def ensure_complete(self) -> None:
        """Raise RequestConstructionError if a placeholder has no segment."""
        missing = self.missing_segments()
        if missing:
            from .errors import RequestConstructionError

            raise RequestConstructionError(self.path_template, missing)

    def render_path(self) -> str:
        """Substitute url segments into the template."""
        self.ensure_complete()
        return PLACEHOLDER_PATTERN.sub(
            lambda match: quote(self.url_segments[match.group(1)], safe=""),
            self.path_template,
        )


@dataclass
class TransportResponse:
    """Raw outcome from the transport.

    ``error`` is set when the transport failed before any response was
    received; ``status_code`` is None in that case.
    """

    status_code: Optional[int] = None
    status_description: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: Optional[str] = None
    elapsed_ms: float = 0.0
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        """True if the transport never produced a response."""
        return self.error is not None or self.status_code is None

    @property
    def is_success(self) -> bool:
        return not self.failed and 200 <= self.status_code < 300

    def body_text(self) -> str:
        """Body decoded as UTF-8; undecodable bytes are replaced."""
        return self.body.decode("utf-8", errors="replace")


@dataclass
class Outcome(Generic[T]):
    """Final result of one operation: a value or a ClientError."""

    value: Optional[T] = None
    error: Optional[Exception] = None
    response: Optional[TransportResponse] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the error."""
        if self.error is not None:
            raise self.error
        return self.value


# One-shot callback receiving an operation's outcome
Continuation = Callable[[Outcome[T]], None]

# Callback receiving the raw transport response
RawContinuation = Callable[[TransportResponse], None]


class Transport(Protocol):
    """Transport interface consumed by the executor."""

    def send(self, descriptor: RequestDescriptor) -> Awaitable[TransportResponse]:
        """Send the request described by descriptor."""
        ...

    async def aclose(self) -> None:
        """Release transport resources."""
        ...
