"""
Declarative resource operations.

A ResourceOperation describes one API call (method, path template, which
arguments fill url segments, which become parameters, which option-set
attributes are copied) and is evaluated by the validation and request
builder modules.
"""
from dataclasses import dataclass
from typing import Any, Collection, Generic, Mapping, Optional, Tuple, TypeVar

from .request_builder import build, option_fields
from .response_mapper import map_response
from .types import UNSET, HttpMethod, Outcome, RequestDescriptor, TransportResponse
from .validation import Constraint, validate_all

T = TypeVar("T")


@dataclass(frozen=True)
class Param:
    """An argument or option attribute and the wire name it travels under."""

    name: str
    wire_name: str
    constraints: Tuple[Constraint, ...] = ()


@dataclass(frozen=True)
class ResourceOperation(Generic[T]):
    """Declarative definition of a single resource call."""

    name: str
    method: HttpMethod
    path_template: str
    segments: Tuple[Param, ...] = ()
    params: Tuple[Param, ...] = ()
    options: Tuple[Param, ...] = ()
    result_type: Any = None
    success_statuses: Optional[Collection[int]] = None
    sentinels: Optional[Mapping[int, Any]] = None
    failure_value: Any = None

    def validate(self, arguments: Mapping[str, Any], options: Optional[Any] = None) -> None:
        """Run every constraint in declaration order: segments, params, options."""
        checks = [
            (param.wire_name, arguments.get(param.name, UNSET), param.constraints)
            for param in self.segments + self.params
        ]
        if options is not None:
            checks.extend(
                (param.wire_name, getattr(options, param.name, UNSET), param.constraints)
                for param in self.options
            )
        validate_all(checks)

    def prepare(
        self,
        arguments: Mapping[str, Any],
        options: Optional[Any] = None,
        default_segments: Optional[Mapping[str, str]] = None,
    ) -> RequestDescriptor:
        """Validate arguments and build the request descriptor.

        Raises:
            ValidationError: an argument violates a constraint
            RequestConstructionError: a placeholder has no segment
        """
        unknown = set(arguments) - {param.name for param in self.segments + self.params}
        if unknown:
            raise TypeError(f"{self.name}() got unexpected argument(s): {', '.join(sorted(unknown))}")

        self.validate(arguments, options)

        url_segments = dict(default_segments or {})
        for param in self.segments:
            url_segments[param.wire_name] = arguments.get(param.name, UNSET)

        fields = [(param.wire_name, arguments.get(param.name, UNSET)) for param in self.params]
        fields.extend(option_fields(options, self.options))

        return build(self.method, self.path_template, url_segments, fields)

    def map(self, response: TransportResponse) -> Outcome[T]:
        """Map a raw response using this operation's result rules."""
        return map_response(
            response,
            self.result_type,
            success_statuses=self.success_statuses,
            sentinels=self.sentinels,
            failure_value=self.failure_value,
        )
