"""Exceptions raised while resolving or applying credentials.

Example:
    ```python
    from github_client_core.auth.exceptions import CredentialNotFoundError

    if not token:
        raise CredentialNotFoundError("GitHub token not found", env_var_name="GITHUB_TOKEN")
    ```
"""

from github_client_core.errors.exceptions import GitHubError


class CredentialError(GitHubError):
    """Base exception for credential problems.

    Also raised by the authentication transports when constructed with empty
    credentials.
    """

    pass


class CredentialNotFoundError(CredentialError):
    """A required credential is not set in any source.

    Attributes:
        env_var_name: The environment variable that was consulted, if any.
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """A credential file is missing, unreadable or empty when required."""

    pass
