"""Structured exceptions for platform and transport errors."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from hclient.errors.models import ErrorDetail


class HClientError(Exception):
    """Base exception for everything raised by hclient at runtime."""


class APIError(HClientError):
    """An error with an (optional) HTTP response behind it.

    `status_code` is None for errors detected locally before any request
    was sent.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
        detail: "ErrorDetail | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.detail = detail


class AuthError(APIError):
    """Token acquisition or refresh failed permanently."""


class ValidationError(APIError):
    """Bad input, detected locally or rejected by the platform (400/422)."""

    def __init__(self, message: str, validation_errors: list[dict] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors if validation_errors is not None else []


class NotFoundError(APIError):
    """The referenced object, record or owner does not exist (404)."""


class UpstreamError(APIError):
    """Any other non-success answer from the platform.

    Attributes:
        upstream_code: The platform's own result code, when it sent one.
    """

    def __init__(self, message: str, upstream_code: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.upstream_code = upstream_code


class NetworkError(HClientError):
    """Transport-level failure: connect error, timeout, broken stream."""
