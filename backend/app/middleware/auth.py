"""GitHub credential dependencies for FastAPI."""
from __future__ import annotations

from typing import AsyncIterator, Optional

from fastapi import Depends, Header

from app.services.github.workflow_client import GitHubWorkflowClient, get_workflow_client
from app.services.workflow_job_service import WorkflowJobService

TOKEN_SCHEMES = ("token ", "bearer ")


async def get_github_token(
    authorization: Optional[str] = Header(None),
    x_github_token: Optional[str] = Header(None),
) -> Optional[str]:
    """Extract the caller's GitHub token, if any.

    Checks for token in:
    1. X-GitHub-Token header
    2. Authorization header ("token <t>" or "Bearer <t>")

    The token is passed through as an opaque credential. When absent the
    client falls back to GITHUB_TOKEN from settings, then to anonymous access.
    """
    if x_github_token and x_github_token.strip():
        return x_github_token.strip()

    if authorization:
        lowered = authorization.lower()
        for scheme in TOKEN_SCHEMES:
            if lowered.startswith(scheme):
                token = authorization[len(scheme):].strip()
                return token or None

    return None


async def get_github_client(
    token: Optional[str] = Depends(get_github_token),
) -> AsyncIterator[GitHubWorkflowClient]:
    client = get_workflow_client(token)
    try:
        yield client
    finally:
        await client.aclose()


async def get_workflow_job_service(
    client: GitHubWorkflowClient = Depends(get_github_client),
) -> WorkflowJobService:
    return WorkflowJobService.from_settings(client)
