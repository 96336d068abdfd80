"""Error taxonomy and response classification for hclient."""

from hclient.errors.exceptions import (
    APIError,
    AuthError,
    HClientError,
    NetworkError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from hclient.errors.handler import is_auth_failure, parse_payload, raise_for_status, unwrap_envelope
from hclient.errors.models import ErrorDetail

__all__ = [
    "APIError",
    "AuthError",
    "ErrorDetail",
    "HClientError",
    "NetworkError",
    "NotFoundError",
    "UpstreamError",
    "ValidationError",
    "is_auth_failure",
    "parse_payload",
    "raise_for_status",
    "unwrap_envelope",
]
