"""
Request builder utilities for fetch_resource.
"""
import logging
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import RequestConstructionError
from .types import PLACEHOLDER_PATTERN, HttpMethod, RequestDescriptor, is_set

logger = logging.getLogger("fetch_resource.request_builder")


def placeholders(path_template: str) -> List[str]:
    """Return placeholder names found in a path template."""
    return PLACEHOLDER_PATTERN.findall(path_template)


def format_value(value: Any) -> str:
    """Format a parameter value as its wire string."""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def option_fields(options: Optional[Any], params: Sequence[Any]) -> List[Tuple[str, Any]]:
    """Evaluate a declarative field list against an option set.

    Each param names the option attribute and the wire name it is sent
    under. A missing option set yields every field as unset.
    """
    if options is None:
        return []
    return [(param.wire_name, getattr(options, param.name)) for param in params]


def build(
    method: HttpMethod,
    path_template: str,
    url_segments: Optional[Mapping[str, Any]] = None,
    fields: Iterable[Tuple[str, Any]] = (),
) -> RequestDescriptor:
    """Build a request descriptor.

    Unset fields are omitted; everything else, including empty strings,
    is sent. Raises RequestConstructionError when a placeholder has no
    matching segment.
    """
    segments = {
        name: format_value(value)
        for name, value in (url_segments or {}).items()
        if is_set(value)
    }

    missing = [name for name in placeholders(path_template) if name not in segments]
    if missing:
        logger.debug(f"build: template={path_template!r} missing segments={missing}")
        raise RequestConstructionError(path_template, missing)

    parameters = {}
    for wire_name, value in fields:
        if is_set(value):
            parameters[wire_name] = format_value(value)

    descriptor = RequestDescriptor(
        method=method,
        path_template=path_template,
        url_segments=segments,
        parameters=parameters,
    )
    logger.debug(
        f"build: method={method}, template={path_template!r}, "
        f"segments={list(segments)}, parameters={list(parameters)}"
    )
    return descriptor
