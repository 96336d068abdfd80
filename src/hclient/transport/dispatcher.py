"""Authenticated request dispatch with a single re-authentication retry.

`RequestDispatcher.send()` walks a two-state protocol:

| State     | 401 from platform                         | anything else        |
|-----------|-------------------------------------------|----------------------|
| `FRESH`   | force a token refresh, resend -> `RETRIED` | classify and return |
| `RETRIED` | raise `AuthError` (terminal)               | classify and return |

Only an authorization failure changes state, and `RETRIED` has no outgoing
transition, so a request is sent at most twice. Validation, not-found, server
and network errors are raised as they are without touching the token.

Example:
    ```python
    dispatcher = RequestDispatcher(http_client, credential_manager)
    data = await dispatcher.send(ApiRequest("GET", "/v1/meta/objects"))
    ```
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from hclient.auth.manager import Credential, CredentialManager
from hclient.errors.exceptions import AuthError, NetworkError
from hclient.errors.handler import is_auth_failure, unwrap_envelope
from hclient.errors.models import ErrorDetail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiRequest:
    """Description of one outbound platform call, without credentials."""

    method: str
    path: str
    params: dict[str, Any] | None = None
    json: Any = None


class Attempt(Enum):
    FRESH = "fresh"
    RETRIED = "retried"


class RequestDispatcher:
    """Attach the current access token to requests and classify responses.

    This is the only component that sets the Authorization header.

    Args:
        http_client: Client configured with the platform base URL.
        credentials: Manager providing the shared access token.
    """

    def __init__(self, http_client: httpx.AsyncClient, credentials: CredentialManager) -> None:
        self._http_client = http_client
        self._credentials = credentials

    async def send(self, request: ApiRequest) -> Any:
        """Send `request` and return the `data` payload of the platform envelope.

        Raises:
            AuthError: The token was rejected again after a forced refresh,
                or a new token could not be obtained.
            ValidationError, NotFoundError, UpstreamError: Platform errors.
            NetworkError: Transport failure.
        """
        attempt = Attempt.FRESH
        credential = await self._credentials.acquire()

        while True:
            response = await self._send_once(request, credential)

            if not is_auth_failure(response):
                return unwrap_envelope(response)

            if attempt is Attempt.RETRIED:
                detail = ErrorDetail.from_response(response)
                raise AuthError(
                    f"{request.method} {request.path} rejected after token refresh",
                    status_code=response.status_code,
                    response=response,
                    detail=detail,
                )

            logger.warning(
                f"{request.method} {request.path} returned {response.status_code}, refreshing access token and retrying"
            )
            attempt = Attempt.RETRIED
            credential = await self._credentials.acquire(force_refresh=True, rejected=credential)

    async def _send_once(self, request: ApiRequest, credential: Credential) -> httpx.Response:
        http_request = self._http_client.build_request(
            request.method,
            request.path,
            params=request.params,
            json=request.json,
            headers={"Authorization": credential.authorization_header},
        )
        try:
            response = await self._http_client.send(http_request)
        except httpx.TransportError as e:
            raise NetworkError(f"{request.method} {request.path} failed: {e}") from e

        logger.debug(f"{request.method} {request.path} -> {response.status_code}")
        return response
