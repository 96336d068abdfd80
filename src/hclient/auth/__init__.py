"""Authentication components for hclient.

- `CredentialManager`: caches the platform access token and refreshes it
  single-flight when it is absent, expired or rejected
- `CredentialResolver`: resolves configuration secrets (value > env > .env > default)

Example:
    ```python
    from hclient.auth import CredentialResolver

    resolver = CredentialResolver()
    secret = resolver.secret("client_secret")
    ```
"""

from hclient.auth.credentials import CredentialResolver
from hclient.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)
from hclient.auth.manager import Credential, CredentialManager

__all__ = [
    "Credential",
    "CredentialError",
    "CredentialFileError",
    "CredentialManager",
    "CredentialNotFoundError",
    "CredentialResolver",
]
