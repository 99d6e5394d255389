"""DTOs for the workflow job dashboard API."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from app.entities.processed_job import ProcessedJob
from app.entities.workflow_run import WorkflowRun


class WorkflowDataResponse(BaseModel):
    """Raw runs plus the jobs normalized from them."""

    workflow_runs: List[WorkflowRun] = Field(default_factory=list, alias="workflowRuns")
    processed_jobs: List[ProcessedJob] = Field(default_factory=list, alias="processedJobs")

    model_config = ConfigDict(populate_by_name=True)


class ProcessedJobListResponse(BaseModel):
    # total: before filtering, filtered: len(jobs)
    total: int = 0
    filtered: int = 0
    jobs: List[ProcessedJob] = Field(default_factory=list)


class JobFacetsResponse(BaseModel):
    """Options for the job name and status dropdowns."""

    job_names: List[str] = Field(default_factory=list, alias="jobNames")
    statuses: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# Chart DTOs
# =============================================================================


class StatusCount(BaseModel):
    name: str
    value: int
    percentage: float  # value / total * 100


class JobNameCount(BaseModel):
    name: str
    value: int


class TimelinePoint(BaseModel):
    date: str
    success: int = 0
    failure: int = 0
    other: int = 0


class JobStatisticsResponse(BaseModel):
    """Aggregates behind the dashboard charts."""

    total: int = 0
    success: int = 0
    failure: int = 0
    other: int = 0
    status_distribution: List[StatusCount] = Field(
        default_factory=list, alias="statusDistribution"
    )
    top_job_names: List[JobNameCount] = Field(default_factory=list, alias="topJobNames")
    timeline: List[TimelinePoint] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class DateRangeResponse(BaseModel):
    start: datetime
    end: datetime
