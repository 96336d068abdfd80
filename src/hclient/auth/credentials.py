"""Multi-source resolution of client settings and secrets.

Used by `Config.from_env()` to collect the platform URL, OAuth client
credentials and account name. Settings are addressed by their `Config`
field name; the environment variable is the field name upper-cased behind
the resolver's prefix (`base_url` -> `HCLIENT_BASE_URL`).

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable (a loaded .env file populates the environment)
3. Secret file named by `<VAR>_FILE` (secrets only)
4. Default value

Example:
    ```python
    from hclient.auth import CredentialResolver

    resolver = CredentialResolver()
    base_url = resolver.setting("base_url", required=True)
    secret = resolver.secret("client_secret")  # HCLIENT_CLIENT_SECRET or HCLIENT_CLIENT_SECRET_FILE
    ```

Security Considerations:
    - Resolved values are never logged in full (masked with ***)
    - Only the source (env var name, file path) is logged
    - Secret files have surrounding whitespace stripped
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from hclient.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "HCLIENT_"


class CredentialResolver:
    """Resolve settings from explicit values, the environment, .env, files and defaults.

    The .env file is loaded at most once per resolver, under a lock, and never
    overrides variables already present in the environment.

    Args:
        dotenv_path: Path to a .env file. If None, python-dotenv searches
            parent directories.
        load_dotenv: Set to False to skip .env loading entirely.
        env_prefix: Prepended to upper-cased setting names to form
            environment variable names.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True, env_prefix: str = DEFAULT_ENV_PREFIX):
        self.env_prefix = env_prefix
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path

        if load_dotenv:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        with self._dotenv_lock:
            if self._dotenv_loaded:
                return
            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for hclient settings")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def env_var(self, setting: str) -> str:
        """Environment variable consulted for `setting`."""
        return f"{self.env_prefix}{setting.upper()}"

    def setting(
        self,
        name: str,
        *,
        value: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve the setting `name` through its prefixed environment variable."""
        return self.resolve(
            value=value,
            env_var_name=self.env_var(name),
            default=default,
            required=required,
            mask_in_logs=mask_in_logs,
        )

    def secret(self, name: str, *, value: str | None = None, required: bool = True) -> str | None:
        """Resolve a secret from `value`, its environment variable, or the file its `_FILE` variable names.

        Raises:
            CredentialFileError: required=True and neither variable is usable.
        """
        found = self.setting(name, value=value)
        if found is not None:
            return found
        return self.resolve_from_file(env_var_name=self.env_var(f"{name}_file"), required=required)

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a single value from an explicit environment variable name.

        An empty environment variable counts as set.

        Raises:
            CredentialNotFoundError: required=True and no source had a value.
        """
        candidates = [
            (value, "explicit parameter"),
            (os.environ.get(env_var_name) if env_var_name else None, f"environment variable '{env_var_name}'"),
            (default, "default value"),
        ]
        for candidate, source in candidates:
            if candidate is not None:
                logger.debug(f"Resolved setting from {source}: {'***' if mask_in_logs else candidate}")
                return candidate

        if required:
            checked = f" (checked env var: {env_var_name})" if env_var_name else ""
            raise CredentialNotFoundError(f"Required setting not found{checked}", env_var_name=env_var_name)
        return None

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a secret from a file.

        The path may be given directly or through an environment variable and
        supports `~` and `$VAR` expansion.

        Raises:
            CredentialFileError: required=True and no path was given or the
                file could not be read.
        """
        if file_path is None and env_var_name:
            file_path = self.resolve(env_var_name=env_var_name, mask_in_logs=False)

        if file_path is None:
            if not required:
                return None
            unset = f" (env var '{env_var_name}' not set)" if env_var_name else ""
            raise CredentialFileError(f"No file path provided for secret resolution{unset}")

        path = Path(os.path.expandvars(str(file_path))).expanduser()
        try:
            content = path.read_text().strip()
        except OSError as e:
            if isinstance(e, FileNotFoundError):
                message = f"Secret file not found: {path}"
            elif isinstance(e, PermissionError):
                message = f"Permission denied reading secret file: {path}"
            else:
                message = f"Error reading secret file {path}: {e}"
            if required:
                raise CredentialFileError(message) from e
            logger.warning(message)
            return None

        logger.debug(f"Resolved secret from file: {path} (***)")
        return content
