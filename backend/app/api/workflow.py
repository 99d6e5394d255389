"""Workflow run and job endpoints backing the dashboard."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config import settings
from app.dtos import (
    DateRangeResponse,
    JobFacetsResponse,
    JobStatisticsResponse,
    ProcessedJobListResponse,
    WorkflowDataResponse,
)
from app.entities import DateRange, JobsPage, JobSortField, SortDirection, WorkflowRunsPage
from app.middleware.auth import get_github_client, get_workflow_job_service
from app.services.github.workflow_client import GitHubWorkflowClient
from app.services.job_filter_service import filter_jobs, get_job_facets, sort_jobs
from app.services.job_statistics_service import build_job_statistics
from app.services.workflow_job_service import WorkflowJobService
from app.utils.date_utils import get_default_date_range

router = APIRouter()


def _resolve_date_range(
    start: Optional[datetime], end: Optional[datetime]
) -> Optional[DateRange]:
    """No bounds means no window; one bound is completed from the default window."""
    if start is None and end is None:
        return None

    default = get_default_date_range(settings.DEFAULT_DATE_RANGE_DAYS)
    try:
        return DateRange(start=start or default.start, end=end or default.end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid date range: {e}")


@router.get("/runs", response_model=WorkflowRunsPage)
async def list_workflow_runs(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    client: GitHubWorkflowClient = Depends(get_github_client),
):
    """Return one page of raw workflow runs."""
    date_range = _resolve_date_range(start, end)
    return await client.list_workflow_runs(date_range, page=page, per_page=per_page)


@router.get("/runs/{run_id}/jobs", response_model=JobsPage)
async def list_jobs_for_run(
    run_id: int,
    client: GitHubWorkflowClient = Depends(get_github_client),
):
    """Return the raw jobs of one workflow run."""
    return await client.list_jobs_for_run(run_id)


@router.get("/jobs", response_model=ProcessedJobListResponse)
async def get_processed_jobs(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    search: Optional[str] = None,
    job_name: Optional[str] = None,
    status: Optional[str] = None,
    sort_field: Optional[JobSortField] = None,
    sort_direction: SortDirection = SortDirection.DESC,
    service: WorkflowJobService = Depends(get_workflow_job_service),
):
    """
    Return processed jobs for the window, filtered and optionally sorted.

    Without sort_field the jobs keep run order, then API job order.
    """
    jobs = await service.get_processed_jobs(_resolve_date_range(start, end))
    filtered = filter_jobs(jobs, search=search, job_name=job_name, status=status)
    if sort_field is not None:
        filtered = sort_jobs(
            filtered, sort_field, sort_direction, settings.EXECUTION_DATE_FORMAT
        )
    return ProcessedJobListResponse(total=len(jobs), filtered=len(filtered), jobs=filtered)


@router.get("/jobs/facets", response_model=JobFacetsResponse)
async def get_processed_job_facets(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    service: WorkflowJobService = Depends(get_workflow_job_service),
):
    """Unique job names and statuses for the filter dropdowns."""
    jobs = await service.get_processed_jobs(_resolve_date_range(start, end))
    return get_job_facets(jobs)


@router.get("/jobs/statistics", response_model=JobStatisticsResponse)
async def get_processed_job_statistics(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    search: Optional[str] = None,
    job_name: Optional[str] = None,
    status: Optional[str] = None,
    service: WorkflowJobService = Depends(get_workflow_job_service),
):
    """Chart aggregates over the (filtered) processed jobs."""
    jobs = await service.get_processed_jobs(_resolve_date_range(start, end))
    filtered = filter_jobs(jobs, search=search, job_name=job_name, status=status)
    return build_job_statistics(filtered, date_format=settings.EXECUTION_DATE_FORMAT)


@router.get("/data", response_model=WorkflowDataResponse)
async def get_all_workflow_data(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    service: WorkflowJobService = Depends(get_workflow_job_service),
):
    """Raw workflow runs together with their processed jobs."""
    return await service.get_all_workflow_data(_resolve_date_range(start, end))


@router.get("/date-range/default", response_model=DateRangeResponse)
def get_default_range(days: Optional[int] = Query(None, ge=1, le=365)):
    """Window the dashboard preselects on first load."""
    date_range = get_default_date_range(days or settings.DEFAULT_DATE_RANGE_DAYS)
    return DateRangeResponse(start=date_range.start, end=date_range.end)
