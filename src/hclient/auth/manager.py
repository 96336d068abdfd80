"""Access token acquisition, caching and single-flight refresh.

Every outbound platform call funnels through one `CredentialManager`. The
manager keeps at most one current `Credential` and at most one refresh in
flight: callers that find the cache empty or expired while a refresh is
running await that same refresh instead of starting their own.

Lifecycle of the cached credential:

    (empty) --acquire--> created --acquire(force_refresh)--> refreshed
                            \\                                  /
                             `-------- invalidate() ----------'  -> (empty)

Example:
    ```python
    manager = CredentialManager(config, http_client)
    credential = await manager.acquire()
    headers = {"Authorization": credential.authorization_header}
    ```
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from hclient.errors.exceptions import AuthError, NetworkError
from hclient.errors.handler import raise_for_status
from hclient.errors.models import ErrorDetail

if TYPE_CHECKING:
    from hclient.config import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    """An access token and the monotonic-clock instant after which it is stale."""

    token: str = field(repr=False)
    expires_at: float
    token_type: str = "Bearer"

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at

    @property
    def authorization_header(self) -> str:
        return f"{self.token_type} {self.token}"


class CredentialManager:
    """Owns the access token shared by all requests of one client.

    Args:
        config: Client configuration (identity endpoint, client credentials, account).
        http_client: Client used for identity endpoint calls.
        clock: Monotonic time source, replaceable in tests.
    """

    def __init__(
        self,
        config: "Config",
        http_client: httpx.AsyncClient,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._http_client = http_client
        self._clock = clock
        self._credential: Credential | None = None
        self._refresh_task: asyncio.Task[Credential] | None = None

    @property
    def credential(self) -> Credential | None:
        """The cached credential, valid or not."""
        return self._credential

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def invalidate(self) -> None:
        """Drop the cached credential; the next acquire() fetches a new one."""
        if self._credential is not None:
            logger.debug("Access token invalidated")
        self._credential = None

    async def acquire(self, force_refresh: bool = False, rejected: Credential | None = None) -> Credential:
        """Return a usable credential, fetching one if needed.

        Args:
            force_refresh: Ignore the cached credential even if it looks valid.
            rejected: The credential the platform just refused. If the cache
                already holds a different valid credential, it is returned
                without a new fetch.

        Raises:
            AuthError: The identity endpoint rejected the client credentials.
            NetworkError: The identity endpoint could not be reached.
            UpstreamError: The identity endpoint failed with a 5xx.
        """
        current = self._credential
        if current is not None and current.is_valid(self._clock()):
            if not force_refresh:
                return current
            if rejected is not None and current is not rejected:
                logger.debug("Access token was replaced after rejection, reusing the new one")
                return current

        task = self._refresh_task
        if task is None or task.done():
            task = asyncio.create_task(self._refresh())
            task.add_done_callback(self._on_refresh_done)
            self._refresh_task = task
        else:
            logger.debug("Joining in-flight access token refresh")

        # shield: a caller giving up must not cancel the refresh others wait on
        return await asyncio.shield(task)

    async def _refresh(self) -> Credential:
        try:
            credential = await self._fetch()
            self._credential = credential
            return credential
        finally:
            self._refresh_task = None

    def _on_refresh_done(self, task: asyncio.Task) -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        if not task.cancelled() and task.exception() is not None:
            # retrieved here so an unawaited failure is not reported by asyncio
            logger.debug(f"Access token refresh failed: {task.exception()!r}")

    async def _fetch(self) -> Credential:
        config = self._config
        logger.info(f"Requesting access token for account {config.account!r}")

        try:
            response = await self._http_client.post(
                config.token_url,
                auth=(config.client_id, config.client_secret),
                data={"grant_type": "password", "username": config.account},
            )
        except httpx.TransportError as e:
            raise NetworkError(f"Token request to {config.token_url} failed: {e}") from e

        if 400 <= response.status_code < 500:
            detail = ErrorDetail.from_response(response)
            message = detail.to_exception_message() if detail else f"HTTP {response.status_code}"
            raise AuthError(
                f"Identity endpoint rejected client credentials: {message}",
                status_code=response.status_code,
                response=response,
                detail=detail,
            )
        raise_for_status(response)

        try:
            body = response.json()
        except ValueError as e:
            raise AuthError("Identity endpoint returned a non-JSON body", status_code=response.status_code) from e

        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            raise AuthError("Identity endpoint response has no access_token", status_code=response.status_code)

        lifetime = self._lifetime(body.get("expires_in"))
        usable_for = max(lifetime - config.expiry_margin, lifetime / 2)

        logger.info(f"Obtained access token valid for {lifetime:.0f}s")
        return Credential(
            token=token,
            expires_at=self._clock() + usable_for,
            token_type=body.get("token_type") or "Bearer",
        )

    def _lifetime(self, expires_in: object) -> float:
        """Token lifetime in seconds; the configured default when unusable."""
        default = self._config.default_token_lifetime
        if expires_in is None:
            return default
        try:
            lifetime = float(expires_in)
        except (TypeError, ValueError):
            logger.warning(f"Identity endpoint sent unusable expires_in {expires_in!r}, assuming {default:.0f}s")
            return default
        if not lifetime > 0:
            # also catches nan
            logger.warning(f"Identity endpoint sent non-positive expires_in {expires_in!r}, assuming {default:.0f}s")
            return default
        return lifetime
