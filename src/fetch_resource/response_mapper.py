"""
Mapping of transport responses into typed outcomes.
"""
import logging
from functools import lru_cache
from typing import Any, Collection, Mapping, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import ApiError, TransportError
from .types import Outcome, TransportResponse

logger = logging.getLogger("fetch_resource.response_mapper")


@lru_cache(maxsize=None)
def _adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


def is_success_status(status_code: int, success_statuses: Optional[Collection[int]] = None) -> bool:
    """2xx by default, or membership in success_statuses when given."""
    if success_statuses is not None:
        return status_code in success_statuses
    return 200 <= status_code < 300


def deserialize(body: bytes, result_type: Any) -> Any:
    """Validate a JSON body into result_type; raises pydantic's ValidationError."""
    return _adapter(result_type).validate_json(body)


def map_response(
    response: TransportResponse,
    result_type: Any = None,
    success_statuses: Optional[Collection[int]] = None,
    sentinels: Optional[Mapping[int, Any]] = None,
    failure_value: Any = None,
) -> Outcome:
    """
    Classify a transport response.

    Decision order:
    1. transport failure -> TransportError
    2. status in sentinels -> the sentinel value, body ignored
    3. status not a success -> ApiError (value = failure_value)
    4. body deserialized into result_type; failure -> ApiError

    Args:
        response: Raw transport outcome
        result_type: Type to deserialize the body into; None skips the body
        success_statuses: Statuses counted as success (default: any 2xx)
        sentinels: Status -> value mapping for bodiless success results
        failure_value: Value placed on the outcome alongside an ApiError

    Returns:
        Outcome holding either the value or a ClientError
    """
    if response.failed:
        cause = response.error
        message = str(cause) if cause is not None and str(cause) else "Transport failed without a response"
        logger.debug(f"map_response: transport failure for {response.url}: {cause!r}")
        return Outcome(
            error=TransportError(message, cause=cause, response=response),
            response=response,
        )

    status = response.status_code
    if sentinels and status in sentinels:
        return Outcome(value=sentinels[status], response=response)

    if not is_success_status(status, success_statuses):
        logger.debug(f"map_response: non-success status {status} for {response.url}")
        return Outcome(
            value=failure_value,
            error=ApiError(
                status_code=status,
                status_description=response.status_description,
                body=response.body,
                headers=response.headers,
                response=response,
            ),
            response=response,
        )

    if result_type is None:
        return Outcome(response=response)

    try:
        value = deserialize(response.body, result_type)
    except PydanticValidationError as e:
        logger.warning(f"map_response: malformed payload from {response.url}: {e.error_count()} error(s)")
        return Outcome(
            value=failure_value,
            error=ApiError(
                status_code=status,
                status_description=response.status_description,
                body=response.body,
                headers=response.headers,
                response=response,
                message=f"Malformed response payload for HTTP {status}: {e}",
            ),
            response=response,
        )

    return Outcome(value=value, response=response)
