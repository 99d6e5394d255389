"""GitHub sign-in helpers for the dashboard."""

from fastapi import APIRouter, Depends

from app.dtos import GithubAuthorizeResponse, GithubUserResponse
from app.middleware.auth import get_github_client
from app.services.github.github_oauth import build_authorize_url, create_oauth_state
from app.services.github.workflow_client import GitHubWorkflowClient

router = APIRouter()


@router.get("/auth/github/authorize", response_model=GithubAuthorizeResponse)
def get_github_authorize_url():
    """Return the URL the dashboard redirects to for GitHub OAuth."""
    state = create_oauth_state()
    return GithubAuthorizeResponse(authorize_url=build_authorize_url(state), state=state)


@router.get("/auth/github/user", response_model=GithubUserResponse)
async def get_github_user(
    client: GitHubWorkflowClient = Depends(get_github_client),
):
    """Return the GitHub user behind the supplied token."""
    return await client.get_authenticated_user()
