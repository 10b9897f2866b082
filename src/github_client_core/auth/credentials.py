"""Credential and endpoint configuration from the environment.

Values are looked up in priority order:

1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv, loaded into the environment once)
4. Default value

Secrets can also live in files (``resolve_from_file``), which is how
``GITHUB_TOKEN_FILE`` and friends are honoured.

``resolve_github_config`` reads the whole client configuration at once and
``build_auth_transport`` turns it into the matching authentication transport:

```python
from github_client_core.auth import CredentialResolver, build_auth_transport, resolve_github_config

config = resolve_github_config(CredentialResolver())
transport = build_auth_transport(config)
```

Secrets are never logged; only the source they came from is.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from threading import Lock

import httpx
from dotenv import load_dotenv

from github_client_core.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

ENV_TOKEN = "GITHUB_TOKEN"
ENV_USERNAME = "GITHUB_USERNAME"
ENV_PASSWORD = "GITHUB_PASSWORD"
ENV_OTP = "GITHUB_OTP"
ENV_CLIENT_ID = "GITHUB_CLIENT_ID"
ENV_CLIENT_SECRET = "GITHUB_CLIENT_SECRET"
ENV_BASE_URL = "GITHUB_BASE_URL"
ENV_UPLOAD_URL = "GITHUB_UPLOAD_URL"
ENV_WEBHOOK_SECRET = "GITHUB_WEBHOOK_SECRET"

# Secrets may instead name a file holding them, e.g. GITHUB_TOKEN_FILE
FILE_SUFFIX = "_FILE"


class CredentialResolver:
    """Resolve configuration values from explicit values, environment and .env.

    Args:
        dotenv_path: Path to a .env file. None lets python-dotenv search
            parent directories.
        load_dotenv: Set to False to skip .env loading (tests, containers).
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file once (thread-safe)."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        secret: bool = True,
    ) -> str | None:
        """Resolve a single value; the first source that has one wins.

        Args:
            value: Explicit value, overrides every other source.
            env_var_name: Environment variable to consult (includes .env values).
            default: Fallback value.
            required: Raise CredentialNotFoundError instead of returning None.
            secret: Mask the value in debug logs (default). Disable for URLs.

        Raises:
            CredentialNotFoundError: If ``required`` and nothing was found.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            shown = "***" if secret else result
            logger.debug(f"Resolved {env_var_name or 'value'} from {source}: {shown}")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a secret held in a file, e.g. a mounted container secret.

        The path is ``file_path`` or, when that is None, the value of the
        environment variable ``env_var_name``; ``~`` and ``$VAR`` are
        expanded. Surrounding whitespace is stripped and an empty file counts
        as no value.

        Raises:
            CredentialFileError: If ``required`` and no non-empty secret could
                be read.
        """
        if file_path is None and env_var_name:
            file_path = self.resolve(env_var_name=env_var_name, secret=False) or None

        if file_path is None:
            if required:
                where = f" ({env_var_name} is not set)" if env_var_name else ""
                raise CredentialFileError(f"No credential file configured{where}")
            return None

        path = Path(os.path.expandvars(str(file_path))).expanduser()
        try:
            content = path.read_text().strip()
        except OSError as e:
            reason = e.strerror or str(e)
            if required:
                raise CredentialFileError(f"Cannot read credential file {path}: {reason}") from e
            logger.warning(f"Ignoring unreadable credential file {path}: {reason}")
            return None

        if not content:
            if required:
                raise CredentialFileError(f"Credential file {path} is empty")
            return None

        logger.debug(f"Resolved credential from file {path}: ***")
        return content


@dataclass(frozen=True)
class GitHubConfig:
    """Everything a client needs besides the HTTP stack itself."""

    base_url: str | None = None
    upload_url: str | None = None
    token: str | None = None
    username: str | None = None
    password: str | None = None
    otp: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    webhook_secret: str | None = None


def resolve_github_config(resolver: CredentialResolver | None = None, **overrides: str | None) -> GitHubConfig:
    """Read the client configuration from the standard ``GITHUB_*`` variables.

    Keyword arguments named after GitHubConfig fields take precedence over
    the environment. A secret with no value of its own is read from the file
    named by the same variable plus ``_FILE`` (``GITHUB_TOKEN_FILE``,
    ``GITHUB_WEBHOOK_SECRET_FILE``...), if set.
    """
    resolver = resolver or CredentialResolver()
    env_names = {
        "base_url": (ENV_BASE_URL, False),
        "upload_url": (ENV_UPLOAD_URL, False),
        "token": (ENV_TOKEN, True),
        "username": (ENV_USERNAME, False),
        "password": (ENV_PASSWORD, True),
        "otp": (ENV_OTP, True),
        "client_id": (ENV_CLIENT_ID, False),
        "client_secret": (ENV_CLIENT_SECRET, True),
        "webhook_secret": (ENV_WEBHOOK_SECRET, True),
    }
    unknown = set(overrides) - set(env_names)
    if unknown:
        raise TypeError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    values = {}
    for name, (env_var, secret) in env_names.items():
        value = resolver.resolve(value=overrides.get(name), env_var_name=env_var, secret=secret)
        if value is None and secret:
            value = resolver.resolve_from_file(env_var_name=env_var + FILE_SUFFIX)
        values[name] = value
    return GitHubConfig(**values)


def build_auth_transport(
    config: GitHubConfig,
    wrapped_transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncBaseTransport | None:
    """Pick the authentication transport matching the configured credentials.

    Token wins over username/password, which wins over OAuth application
    credentials. Returns ``wrapped_transport`` unchanged when nothing is set.
    """
    from github_client_core.transport.auth import (
        BasicAuthTransport,
        TokenAuthTransport,
        UnauthenticatedRateLimitedTransport,
    )

    if config.token:
        logger.debug("Using token authentication")
        return TokenAuthTransport(token=config.token, wrapped_transport=wrapped_transport)
    if config.username and config.password:
        logger.debug(f"Using basic authentication for {config.username}")
        return BasicAuthTransport(
            username=config.username,
            password=config.password,
            otp=config.otp,
            wrapped_transport=wrapped_transport,
        )
    if config.client_id and config.client_secret:
        logger.debug("Using OAuth application credentials")
        return UnauthenticatedRateLimitedTransport(
            client_id=config.client_id,
            client_secret=config.client_secret,
            wrapped_transport=wrapped_transport,
        )
    logger.debug("No credentials configured, sending unauthenticated requests")
    return wrapped_transport
