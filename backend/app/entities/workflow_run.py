"""GitHub Actions entities as returned by the REST API."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class JobStep(BaseModel):
    """Atomic unit of work within a job."""

    name: str
    status: str
    conclusion: Optional[str] = None
    number: int = 0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore")


class Job(BaseModel):
    """A set of steps executed on the same runner, owned by a workflow run."""

    id: int
    name: str = ""
    status: str
    conclusion: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    html_url: Optional[str] = None
    steps: List[JobStep] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class WorkflowRun(BaseModel):
    """One execution instance of a workflow definition."""

    id: int
    name: Optional[str] = None
    status: str
    conclusion: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    html_url: Optional[str] = None
    jobs_url: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class WorkflowRunsPage(BaseModel):
    """Envelope of the workflow runs listing endpoint."""

    total_count: int = 0
    workflow_runs: List[WorkflowRun] = Field(default_factory=list)


class JobsPage(BaseModel):
    """Envelope of the jobs-for-run listing endpoint."""

    total_count: int = 0
    jobs: List[Job] = Field(default_factory=list)
