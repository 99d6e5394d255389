from .date_range import DateRange

# Shared enums
from .enums import (
    JobConclusion,
    JobFilterPolicy,
    JobSortField,
    RunStatus,
    SortDirection,
)
from .processed_job import ProcessedJob

# GitHub Actions entities
from .workflow_run import Job, JobsPage, JobStep, WorkflowRun, WorkflowRunsPage

__all__ = [
    # Value types
    "DateRange",
    "ProcessedJob",
    # Enums
    "JobConclusion",
    "JobFilterPolicy",
    "JobSortField",
    "RunStatus",
    "SortDirection",
    # GitHub Actions
    "Job",
    "JobStep",
    "JobsPage",
    "WorkflowRun",
    "WorkflowRunsPage",
]
