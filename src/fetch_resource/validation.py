"""
Argument validation for resource operations.

Validation is fail-fast: the first violation, in declaration order,
raises ValidationError.
"""
from dataclasses import dataclass
from typing import Any, Iterable, Sequence, Tuple

from .errors import ValidationError
from .types import is_set


class Constraint:
    """Base constraint; subclasses raise ValidationError from check()."""

    def check(self, field: str, value: Any) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class Required(Constraint):
    """Value must be supplied and, for strings, non-empty."""

    def check(self, field: str, value: Any) -> None:
        if not is_set(value):
            raise ValidationError(field, "is required")
        if isinstance(value, str) and value == "":
            raise ValidationError(field, "must not be empty")


@dataclass(frozen=True)
class MaxLength(Constraint):
    """String value must be at most ``limit`` characters."""

    limit: int

    def check(self, field: str, value: Any) -> None:
        if not is_set(value):
            return
        if len(str(value)) > self.limit:
            raise ValidationError(
                field, f"must be at most {self.limit} characters (got {len(str(value))})"
            )


REQUIRED = Required()


def validate(field: str, value: Any, constraints: Sequence[Constraint]) -> None:
    """Check value against constraints in order."""
    for constraint in constraints:
        constraint.check(field, value)


def validate_all(items: Iterable[Tuple[str, Any, Sequence[Constraint]]]) -> None:
    """Validate (field, value, constraints) triples, stopping at the first failure."""
    for field, value, constraints in items:
        validate(field, value, constraints)


def require_argument(field: str, value: Any) -> None:
    """Shorthand for a single Required check."""
    REQUIRED.check(field, value)


def validate_length(field: str, value: Any, max_length: int) -> None:
    """Shorthand for a single MaxLength check."""
    MaxLength(max_length).check(field, value)
