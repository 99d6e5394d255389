from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from app.config import settings
from app.entities.date_range import DateRange
from app.entities.workflow_run import JobsPage, WorkflowRun, WorkflowRunsPage
from app.services.github.exceptions import (
    GithubConfigurationError,
    GithubRateLimitError,
    GithubRemoteApiError,
    GithubTransportError,
)

GITHUB_API_URL = "https://api.github.com"

API_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
}

INVALID_BODY_TEXT = "Invalid JSON body"
UNEXPECTED_BODY_TEXT = "Unexpected response body"

PayloadModel = TypeVar("PayloadModel", bound=BaseModel)

logger = logging.getLogger(__name__)


def format_created_query(date_range: DateRange) -> str:
    """
    Build the `created` search qualifier for a date range.

    GitHub reads `YYYY-MM-DD..YYYY-MM-DD` as an inclusive range of UTC days.
    """
    start = date_range.start.astimezone(timezone.utc).date().isoformat()
    end = date_range.end.astimezone(timezone.utc).date().isoformat()
    return f"{start}..{end}"


class GitHubWorkflowClient:
    """
    Read-only client for the runs and jobs of one GitHub Actions workflow.

    The credential is passed in by the caller; see get_workflow_client() for
    the settings fallback. Without a credential requests go out
    unauthenticated, which only works for public repositories.
    """

    def __init__(
        self,
        token: str | None = None,
        owner: str = "",
        repo: str = "",
        workflow_file: str = "",
        api_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize GitHubWorkflowClient.

        Args:
            token: Raw GitHub token, sent as `Authorization: token <token>`
            owner: Repository owner
            repo: Repository name
            workflow_file: Workflow file name, e.g. "ci.yml"
            api_url: GitHub API URL (defaults to api.github.com)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        if not owner or not repo or not workflow_file:
            raise GithubConfigurationError(
                "Repository owner, name and workflow file are required"
            )

        self._token = token.strip() if token and token.strip() else None
        self.owner = owner
        self.repo = repo
        self.workflow_file = workflow_file

        self._api_url = (api_url or GITHUB_API_URL).rstrip("/")
        self._rest = httpx.AsyncClient(
            base_url=self._api_url, timeout=timeout, transport=transport
        )

        if not self._token:
            logger.warning(
                "GitHub token not provided - only public data is reachable and "
                "unauthenticated rate limits apply"
            )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def _headers(self) -> Dict[str, str]:
        headers = dict(API_HEADERS)
        if self._token:
            headers["Authorization"] = f"token {self._token}"
        return headers

    def _retry_after(self, response: httpx.Response) -> Optional[float]:
        retry_after_header = response.headers.get("Retry-After")
        reset_header = response.headers.get("X-RateLimit-Reset")

        if retry_after_header:
            try:
                return float(retry_after_header)
            except ValueError:
                return None
        if reset_header:
            try:
                reset_epoch = float(reset_header)
            except ValueError:
                return None
            now_epoch = datetime.now(timezone.utc).timestamp()
            return max(reset_epoch - now_epoch, 1.0)
        return None

    def _handle_response(self, response: httpx.Response) -> Any:
        status_text = response.reason_phrase or ""
        url = str(response.url)

        if response.is_success:
            try:
                return response.json()
            except ValueError as exc:
                raise GithubRemoteApiError(
                    response.status_code, INVALID_BODY_TEXT, url=url
                ) from exc

        if response.status_code in (403, 429) and "rate limit" in response.text.lower():
            raise GithubRateLimitError(
                response.status_code,
                status_text,
                url=url,
                retry_after=self._retry_after(response),
            )

        raise GithubRemoteApiError(response.status_code, status_text, url=url)

    async def _send(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            return await self._rest.get(url, headers=self._headers(), params=params)
        except httpx.RequestError as exc:
            raise GithubTransportError(
                f"GitHub request to {url} failed: {exc!r}", cause=exc
            ) from exc

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a GitHub API resource and return the decoded JSON body.

        Args:
            url: Absolute URL or path relative to the API base
            params: Query parameters

        Raises:
            GithubRemoteApiError: GitHub answered with a non-2xx status or a
                body that is not JSON.
            GithubRateLimitError: The non-2xx answer was a rate limit.
            GithubTransportError: No response was received.
        """
        response = await self._send(url, params)
        return self._handle_response(response)

    async def _get_model(
        self,
        url: str,
        model: Type[PayloadModel],
        params: Optional[Dict[str, Any]] = None,
    ) -> PayloadModel:
        # A 2xx body that does not fit the envelope is an upstream fault
        response = await self._send(url, params)
        data = self._handle_response(response)
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise GithubRemoteApiError(
                response.status_code, UNEXPECTED_BODY_TEXT, url=str(response.url)
            ) from exc

    @property
    def workflow_runs_path(self) -> str:
        return (
            f"/repos/{self.owner}/{self.repo}/actions/workflows/"
            f"{self.workflow_file}/runs"
        )

    async def list_workflow_runs(
        self,
        date_range: Optional[DateRange] = None,
        page: int = 1,
        per_page: int = 100,
    ) -> WorkflowRunsPage:
        """Fetch one page of runs of the configured workflow."""
        params: Dict[str, Any] = {"page": page, "per_page": per_page}
        if date_range is not None:
            params["created"] = format_created_query(date_range)

        return await self._get_model(self.workflow_runs_path, WorkflowRunsPage, params=params)

    async def list_all_workflow_runs(
        self,
        date_range: Optional[DateRange] = None,
        per_page: int = 100,
        max_pages: Optional[int] = None,
    ) -> List[WorkflowRun]:
        """
        Page through workflow runs until total_count is reached.

        Stops early on an empty page or after max_pages pages.
        """
        runs: List[WorkflowRun] = []
        page = 1
        while max_pages is None or page <= max_pages:
            result = await self.list_workflow_runs(date_range, page=page, per_page=per_page)
            runs.extend(result.workflow_runs)
            if not result.workflow_runs or len(runs) >= result.total_count:
                break
            page += 1
        return runs

    async def list_jobs_for_run(self, run_id: int) -> JobsPage:
        """Fetch the jobs of a workflow run (single page)."""
        return await self._get_model(
            f"/repos/{self.owner}/{self.repo}/actions/runs/{run_id}/jobs", JobsPage
        )

    async def get_authenticated_user(self) -> Dict[str, Any]:
        """Return the GitHub user the token belongs to."""
        if not self._token:
            raise GithubConfigurationError("A GitHub token is required to look up the user")
        return await self.get("/user")

    async def aclose(self) -> None:
        await self._rest.aclose()

    async def __aenter__(self) -> "GitHubWorkflowClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def get_workflow_client(
    token: Optional[str] = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GitHubWorkflowClient:
    """
    Build a client for the configured repository and workflow.

    Token priority: explicit argument, then GITHUB_TOKEN from settings, then
    none (unauthenticated).
    """
    return GitHubWorkflowClient(
        token=token or settings.GITHUB_TOKEN,
        owner=settings.GITHUB_REPO_OWNER,
        repo=settings.GITHUB_REPO_NAME,
        workflow_file=settings.GITHUB_WORKFLOW_FILE,
        api_url=settings.GITHUB_API_URL,
        timeout=settings.GITHUB_REQUEST_TIMEOUT,
        transport=transport,
    )
