"""Shared fixtures: entity builders and an in-memory workflow client."""

import asyncio
from typing import Dict, List, Optional

import pytest

from app.entities import Job, JobsPage, JobStep, WorkflowRun, WorkflowRunsPage


def build_run(run_id: int, **overrides) -> WorkflowRun:
    data = {
        "id": run_id,
        "name": "upstream-auto-merge",
        "status": "completed",
        "conclusion": "success",
        "created_at": "2024-03-01T10:00:00Z",
        "updated_at": "2024-03-01T10:30:00Z",
        "html_url": f"https://github.com/octo/demo/actions/runs/{run_id}",
    }
    data.update(overrides)
    return WorkflowRun.model_validate(data)


def build_job(
    job_id: int,
    name: str,
    conclusion: Optional[str] = "success",
    status: str = "completed",
    steps: Optional[List[dict]] = None,
    started_at: Optional[str] = "2024-03-01T10:05:00Z",
) -> Job:
    return Job.model_validate(
        {
            "id": job_id,
            "name": name,
            "status": status,
            "conclusion": conclusion,
            "started_at": started_at,
            "completed_at": "2024-03-01T10:20:00Z",
            "html_url": f"https://github.com/octo/demo/actions/runs/1/job/{job_id}",
            "steps": [
                JobStep.model_validate({"number": i + 1, "status": "completed", **step})
                for i, step in enumerate(steps or [])
            ],
        }
    )


class FakeWorkflowClient:
    """Stands in for GitHubWorkflowClient without any network access."""

    full_name = "octo/demo"

    def __init__(
        self,
        runs: List[WorkflowRun],
        jobs_by_run: Optional[Dict[int, List[Job]]] = None,
        failing_runs: Optional[Dict[int, Exception]] = None,
        run_list_error: Optional[Exception] = None,
        yield_control: bool = True,
    ):
        self.runs = runs
        self.jobs_by_run = jobs_by_run or {}
        self.failing_runs = failing_runs or {}
        self.run_list_error = run_list_error
        self.yield_control = yield_control

        self.run_list_calls: List[dict] = []
        self.job_calls: List[int] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.user = {"login": "octocat", "id": 1, "name": "The Octocat"}

    async def list_workflow_runs(self, date_range=None, page=1, per_page=100):
        self.run_list_calls.append(
            {"date_range": date_range, "page": page, "per_page": per_page}
        )
        if self.run_list_error:
            raise self.run_list_error
        start = (page - 1) * per_page
        return WorkflowRunsPage(
            total_count=len(self.runs), workflow_runs=self.runs[start : start + per_page]
        )

    async def list_all_workflow_runs(self, date_range=None, per_page=100, max_pages=None):
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
        self.job_calls.append(run_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.yield_control:
                await asyncio.sleep(0)
            if run_id in self.failing_runs:
                raise self.failing_runs[run_id]
            jobs = self.jobs_by_run.get(run_id, [])
            return JobsPage(total_count=len(jobs), jobs=jobs)
        finally:
            self.in_flight -= 1

    async def get_authenticated_user(self):
        return self.user

    async def aclose(self):
        pass


@pytest.fixture
def make_run():
    return build_run


@pytest.fixture
def make_job():
    return build_job


@pytest.fixture
def fake_client_cls():
    return FakeWorkflowClient
