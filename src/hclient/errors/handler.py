"""Error classification for platform HTTP responses."""

from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from hclient.errors.exceptions import (
    APIError,
    AuthError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from hclient.errors.models import ErrorDetail

T = TypeVar("T")

AUTH_FAILURE_STATUS_CODES: frozenset[int] = frozenset([401])

_EXCEPTION_MAP: dict[int, type[APIError]] = {
    400: ValidationError,
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
    422: ValidationError,
}


def is_auth_failure(response: httpx.Response) -> bool:
    """True when the platform rejected the request's token."""
    return response.status_code in AUTH_FAILURE_STATUS_CODES


def _message(response: httpx.Response, detail: ErrorDetail | None) -> str:
    if detail:
        return detail.to_exception_message()
    response_text = response.text[:200]
    return f"HTTP {response.status_code}: {response_text}" if response_text else f"HTTP {response.status_code}"


def raise_for_status(response: httpx.Response) -> None:
    """Raise the matching hclient exception for a non-2xx response.

    Args:
        response: HTTP response object

    Raises:
        AuthError: 401/403
        NotFoundError: 404
        ValidationError: 400/422
        UpstreamError: any other non-2xx status
    """
    if response.is_success:
        return

    detail = ErrorDetail.from_response(response)
    status_code = response.status_code
    exc_class = _EXCEPTION_MAP.get(status_code, UpstreamError)
    message = _message(response, detail)

    if exc_class is ValidationError:
        raise ValidationError(
            message=message,
            validation_errors=detail.errors if detail else None,
            status_code=status_code,
            response=response,
            detail=detail,
        )

    if exc_class is UpstreamError:
        raise UpstreamError(
            message=message,
            upstream_code=detail.code if detail else None,
            status_code=status_code,
            response=response,
            detail=detail,
        )

    raise exc_class(
        message=message,
        status_code=status_code,
        response=response,
        detail=detail,
    )


def unwrap_envelope(response: httpx.Response) -> Any:
    """Return the `data` member of a successful platform envelope.

    A 2xx response whose envelope carries a non-zero `result` is still a
    failure and raises UpstreamError. Bodies without an envelope are returned
    as decoded; an empty body yields None.
    """
    raise_for_status(response)

    if not response.content:
        return None
    try:
        body = response.json()
    except ValueError as e:
        raise UpstreamError(
            f"HTTP {response.status_code}: response is not JSON",
            status_code=response.status_code,
            response=response,
        ) from e

    if not isinstance(body, dict) or "result" not in body:
        return body

    detail = ErrorDetail.from_payload(body)
    if detail is not None and not detail.is_success:
        raise UpstreamError(
            message=detail.to_exception_message(),
            upstream_code=detail.code,
            status_code=response.status_code,
            response=response,
            detail=detail,
        )
    return body.get("data")


def parse_payload(parse: Callable[[Any], T], data: Any, what: str) -> T:
    """Build a model from envelope data, mapping shape errors to UpstreamError.

    Args:
        parse: Converter such as `ObjectMeta.from_dict`.
        data: The unwrapped `data` member.
        what: Human-readable name of the expected payload, for the message.
    """
    try:
        return parse(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise UpstreamError(f"Platform returned a malformed {what}: {data!r}"[:300]) from e
