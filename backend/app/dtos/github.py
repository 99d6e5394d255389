"""GitHub integration DTOs"""

from typing import Optional

from pydantic import BaseModel


class GithubAuthorizeResponse(BaseModel):
    authorize_url: str
    state: str


class GithubUserResponse(BaseModel):
    login: str
    id: int
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    html_url: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    repository: str
    workflow: str
    authenticated: bool
