"""
Typed client layer for resource-oriented HTTP APIs.

Builds validated request descriptors from declarative operations,
dispatches them without blocking the caller, and maps each response into
a typed value or a ClientError delivered through a one-shot continuation.
"""
from .types import (
    UNSET,
    is_set,
    HttpMethod,
    DeleteStatus,
    RequestDescriptor,
    TransportResponse,
    Outcome,
    Continuation,
    Transport,
)
from .errors import (
    ClientError,
    ValidationError,
    RequestConstructionError,
    TransportError,
    ApiError,
)
from .config import (
    TimeoutConfig,
    ClientConfig,
    ResolvedConfig,
    resolve_config,
)
from .validation import (
    Constraint,
    Required,
    MaxLength,
    REQUIRED,
    validate,
    validate_all,
    require_argument,
    validate_length,
)
from .request_builder import build, format_value, option_fields, placeholders
from .executor import AsyncExecutor
from .response_mapper import map_response
from .operation import Param, ResourceOperation
from .transport import HttpxTransport
from .client import ResourceClient
from .resources import (
    Application,
    ApplicationResult,
    ApplicationOptions,
    ApplicationsResource,
)
from .diagnostics import print_error_report, render_error_report

__all__ = [
    # Types
    "UNSET",
    "is_set",
    "HttpMethod",
    "DeleteStatus",
    "RequestDescriptor",
    "TransportResponse",
    "Outcome",
    "Continuation",
    "Transport",
    # Errors
    "ClientError",
    "ValidationError",
    "RequestConstructionError",
    "TransportError",
    "ApiError",
    # Config
    "TimeoutConfig",
    "ClientConfig",
    "ResolvedConfig",
    "resolve_config",
    # Validation
    "Constraint",
    "Required",
    "MaxLength",
    "REQUIRED",
    "validate",
    "validate_all",
    "require_argument",
    "validate_length",
    # Request building
    "build",
    "format_value",
    "option_fields",
    "placeholders",
    # Dispatch and mapping
    "AsyncExecutor",
    "map_response",
    "Param",
    "ResourceOperation",
    "HttpxTransport",
    "ResourceClient",
    # Resources
    "Application",
    "ApplicationResult",
    "ApplicationOptions",
    "ApplicationsResource",
    # Diagnostics
    "print_error_report",
    "render_error_report",
]

__version__ = "0.1.0"
