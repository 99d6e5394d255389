from .exceptions import (
    GithubConfigurationError,
    GithubError,
    GithubRateLimitError,
    GithubRemoteApiError,
    GithubTransportError,
)
from .github_oauth import build_authorize_url, create_oauth_state
from .workflow_client import (
    GitHubWorkflowClient,
    format_created_query,
    get_workflow_client,
)

__all__ = [
    "GitHubWorkflowClient",
    "get_workflow_client",
    "format_created_query",
    "build_authorize_url",
    "create_oauth_state",
    "GithubError",
    "GithubConfigurationError",
    "GithubRateLimitError",
    "GithubRemoteApiError",
    "GithubTransportError",
]
