"""Custom exceptions for GitHub API access."""

from __future__ import annotations


class GithubError(Exception):
    """Base exception for GitHub API failures."""


class GithubConfigurationError(GithubError):
    """Raised when required configuration or a credential is missing."""


class GithubTransportError(GithubError):
    """Raised when no HTTP response was obtained (DNS, connect, timeout)."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class GithubRemoteApiError(GithubError):
    """Raised when GitHub answers with a non-2xx status."""

    def __init__(self, status_code: int, status_text: str, url: str | None = None):
        super().__init__(f"GitHub API error: {status_code} - {status_text}")
        self.status_code = status_code
        self.status_text = status_text
        self.url = url


class GithubRateLimitError(GithubRemoteApiError):
    """Raised when the upstream service enforces a rate limit."""

    def __init__(
        self,
        status_code: int,
        status_text: str,
        url: str | None = None,
        retry_after: int | float | None = None,
    ):
        super().__init__(status_code, status_text, url=url)
        self.retry_after = retry_after
