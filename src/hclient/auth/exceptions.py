"""Exceptions raised while resolving client settings.

These are configuration-time errors: they are raised by `Config.from_env()`
before any `HClient` exists and are unrelated to the runtime `AuthError`
raised when the platform refuses a token request.
"""


class CredentialError(Exception):
    """Base class for setting/secret resolution failures."""


class CredentialNotFoundError(CredentialError):
    """A required setting was not found in any source.

    Attributes:
        env_var_name: The environment variable that was checked, if any.
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """A secret file was required but missing or unreadable."""
