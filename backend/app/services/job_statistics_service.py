"""
Job statistics - aggregates for the dashboard charts.

Provides:
- Success / failure / other totals
- Status distribution with percentages
- Most frequent job labels
- Per-day success/failure timeline
"""

from collections import Counter
from typing import Dict, List, Sequence

from app.dtos.workflow import (
    JobNameCount,
    JobStatisticsResponse,
    StatusCount,
    TimelinePoint,
)
from app.entities.enums import JobConclusion
from app.entities.processed_job import ProcessedJob
from app.services.job_filter_service import execution_date_sort_key

TOP_JOB_NAMES_LIMIT = 10
TIMELINE_DAYS = 14


def _outcome(status: str) -> str:
    if status == JobConclusion.SUCCESS.value:
        return "success"
    if status == JobConclusion.FAILURE.value:
        return "failure"
    return "other"


def build_job_statistics(
    jobs: Sequence[ProcessedJob],
    top_limit: int = TOP_JOB_NAMES_LIMIT,
    timeline_days: int = TIMELINE_DAYS,
    date_format: str = "%Y-%m-%d",
) -> JobStatisticsResponse:
    total = len(jobs)

    # Counter keeps first-seen order for equal counts
    status_counts = Counter(job.status for job in jobs)
    name_counts = Counter(job.job_name for job in jobs)

    status_distribution = [
        StatusCount(
            name=status,
            value=count,
            percentage=round(count / total * 100, 1) if total else 0.0,
        )
        for status, count in status_counts.items()
    ]

    top_job_names = [
        JobNameCount(name=name, value=count)
        for name, count in name_counts.most_common(top_limit)
    ]

    per_day: Dict[str, TimelinePoint] = {}
    outcomes: Dict[str, int] = {"success": 0, "failure": 0, "other": 0}
    for job in jobs:
        outcome = _outcome(job.status)
        outcomes[outcome] += 1

        # Jobs that never started have no day on the timeline
        if not job.execution_date:
            continue
        point = per_day.setdefault(job.execution_date, TimelinePoint(date=job.execution_date))
        setattr(point, outcome, getattr(point, outcome) + 1)

    timeline: List[TimelinePoint] = sorted(
        per_day.values(),
        key=lambda point: execution_date_sort_key(point.date, date_format),
    )
    if timeline_days > 0:
        timeline = timeline[-timeline_days:]

    return JobStatisticsResponse(
        total=total,
        success=outcomes["success"],
        failure=outcomes["failure"],
        other=outcomes["other"],
        status_distribution=status_distribution,
        top_job_names=top_job_names,
        timeline=timeline,
    )
