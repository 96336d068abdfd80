"""Client configuration.

`Config` holds the immutable startup parameters shared by every service of an
`HClient` instance. It is normally built by the application and passed in; for
scripts and tests `Config.from_env()` resolves the same fields through
`CredentialResolver` (explicit value > environment > .env file > default).

Example:
    ```python
    from hclient import Config, HClient

    config = Config(
        base_url="https://crm.example.com/api",
        client_id="my-client",
        client_secret="s3cret",
        account="integration-user",
    )

    async with HClient(config) as client:
        objects = await client.get_objects()
    ```
"""

from dataclasses import dataclass, replace
from typing import Any

from hclient.auth.credentials import CredentialResolver

DEFAULT_PAGE_SIZE = 10
DEFAULT_TOKEN_PATH = "/oauth/token"


@dataclass(frozen=True)
class Config:
    """Immutable connection parameters.

    Attributes:
        base_url: Platform API root, without trailing slash.
        client_id: OAuth client id, sent as the basic-auth user to the identity endpoint.
        client_secret: OAuth client secret.
        account: Platform account the access token is issued for.
        token_path: Identity endpoint path relative to `base_url`.
        timeout: Per-request timeout in seconds.
        page_size: Default page size for structured queries.
        expiry_margin: Seconds subtracted from the token lifetime so that a
            token is replaced shortly before the platform rejects it.
        default_token_lifetime: Lifetime assumed when the identity endpoint
            does not report `expires_in`.
    """

    base_url: str
    client_id: str
    client_secret: str
    account: str
    token_path: str = DEFAULT_TOKEN_PATH
    timeout: float = 30.0
    page_size: int = DEFAULT_PAGE_SIZE
    expiry_margin: float = 60.0
    default_token_lifetime: float = 7200.0

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    def __repr__(self) -> str:
        return (
            f"Config(base_url={self.base_url!r}, client_id={self.client_id!r}, "
            f"client_secret='***', account={self.account!r})"
        )

    @property
    def token_url(self) -> str:
        """Absolute URL of the identity endpoint."""
        return f"{self.base_url}{self.token_path}"

    def with_overrides(self, **changes: Any) -> "Config":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_env(cls, resolver: CredentialResolver | None = None, **overrides: Any) -> "Config":
        """Build a Config from explicit overrides, environment variables and .env.

        Args:
            resolver: Resolver to use. A default one (loading .env, `HCLIENT_`
                variable prefix) is created if omitted.
            **overrides: Explicit field values; they win over the environment.

        Raises:
            CredentialNotFoundError: A required value is missing everywhere.
            CredentialFileError: No client secret is set and CLIENT_SECRET_FILE is
                unset or unreadable.
        """
        resolver = resolver or CredentialResolver()

        client_secret = resolver.secret("client_secret", value=overrides.pop("client_secret", None))
        required = {
            name: resolver.setting(name, value=overrides.pop(name, None), required=True)
            for name in ("base_url", "client_id", "account")
        }
        for name, convert in (("page_size", int), ("timeout", float)):
            raw = resolver.setting(name, mask_in_logs=False)
            if raw is not None and name not in overrides:
                overrides[name] = convert(raw)

        return cls(client_secret=client_secret, **required, **overrides)
