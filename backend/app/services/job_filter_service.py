"""Filtering, sorting and dropdown facets over processed jobs."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from app.dtos.workflow import JobFacetsResponse
from app.entities.enums import JobSortField, SortDirection
from app.entities.processed_job import ProcessedJob


def parse_execution_date(value: str, date_format: str = "%Y-%m-%d") -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.strptime(value, date_format)
    except ValueError:
        return None


def execution_date_sort_key(value: str, date_format: str = "%Y-%m-%d") -> Tuple[int, datetime]:
    # Missing or unparseable dates sort before every real date
    parsed = parse_execution_date(value, date_format)
    return (1, parsed) if parsed else (0, datetime.min)


def filter_jobs(
    jobs: Iterable[ProcessedJob],
    search: Optional[str] = None,
    job_name: Optional[str] = None,
    status: Optional[str] = None,
) -> List[ProcessedJob]:
    """
    Apply the dashboard filters. All given filters must match.

    Args:
        jobs: Jobs to filter
        search: Case-insensitive substring of job name, status or error summary
        job_name: Exact job label
        status: Exact status
    """
    filtered = list(jobs)

    if search:
        needle = search.lower()
        filtered = [
            job
            for job in filtered
            if needle in job.job_name.lower()
            or needle in job.status.lower()
            or needle in job.error_summary.lower()
        ]

    if job_name:
        filtered = [job for job in filtered if job.job_name == job_name]

    if status:
        filtered = [job for job in filtered if job.status == status]

    return filtered


def sort_jobs(
    jobs: Sequence[ProcessedJob],
    field: JobSortField = JobSortField.EXECUTION_DATE,
    direction: SortDirection = SortDirection.DESC,
    date_format: str = "%Y-%m-%d",
) -> List[ProcessedJob]:
    """Stable sort by one column. Newest first by default."""
    reverse = direction == SortDirection.DESC

    if field == JobSortField.EXECUTION_DATE:
        return sorted(
            jobs,
            key=lambda job: execution_date_sort_key(job.execution_date, date_format),
            reverse=reverse,
        )
    if field == JobSortField.JOB_NAME:
        return sorted(jobs, key=lambda job: job.job_name, reverse=reverse)
    return sorted(jobs, key=lambda job: job.status, reverse=reverse)


def get_job_facets(jobs: Iterable[ProcessedJob]) -> JobFacetsResponse:
    jobs = list(jobs)
    return JobFacetsResponse(
        job_names=sorted({job.job_name for job in jobs}),
        statuses=sorted({job.status for job in jobs}),
    )
