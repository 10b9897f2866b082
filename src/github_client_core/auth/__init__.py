"""Credential and endpoint configuration.

- Multi-source resolution (value → env → .env → default)
- ``GITHUB_*`` environment conventions
- Selection of the matching authentication transport

Example:
    ```python
    from github_client_core.auth import CredentialResolver

    resolver = CredentialResolver()
    token = resolver.resolve(env_var_name="GITHUB_TOKEN", required=True)
    ```
"""

from github_client_core.auth.credentials import (
    CredentialResolver,
    GitHubConfig,
    build_auth_transport,
    resolve_github_config,
)
from github_client_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)

__all__ = [
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "GitHubConfig",
    "build_auth_transport",
    "resolve_github_config",
]
