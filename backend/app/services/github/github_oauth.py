"""GitHub OAuth helper utilities."""

from __future__ import annotations

import uuid
from typing import List, Optional
from urllib.parse import urlencode

from app.config import settings
from app.services.github.exceptions import GithubConfigurationError

GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"


def _require_client_id(client_id: Optional[str]) -> str:
    if not client_id:
        raise GithubConfigurationError(
            "GitHub OAuth client ID not configured. Set GITHUB_CLIENT_ID."
        )
    return client_id


def create_oauth_state() -> str:
    return uuid.uuid4().hex


def build_authorize_url(
    state: str,
    client_id: Optional[str] = None,
    redirect_uri: Optional[str] = None,
    scopes: Optional[List[str]] = None,
) -> str:
    """
    URL the dashboard redirects the browser to for GitHub sign-in.

    The code-for-token exchange needs the client secret and is handled by the
    deployment's auth proxy, not by this service.
    """
    client_id = _require_client_id(client_id or settings.GITHUB_CLIENT_ID)
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri or settings.GITHUB_REDIRECT_URI,
        "scope": " ".join(scopes if scopes is not None else settings.GITHUB_SCOPES),
        "response_type": "code",
        "state": state,
    }
    return f"{GITHUB_AUTHORIZE_URL}?{urlencode(params)}"
