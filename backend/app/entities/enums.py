"""
Shared enums for entities.

This module contains enums that are used across multiple entity files.
"""

from enum import Enum


class RunStatus(str, Enum):
    """Lifecycle status of a workflow run or job."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILURE = "failure"
    CANCELLED = "cancelled"


class JobConclusion(str, Enum):
    """Terminal outcome of a run, job or step."""

    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"
    NEUTRAL = "neutral"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"


class JobFilterPolicy(str, Enum):
    """Which jobs of a run are kept for the dashboard."""

    # Build/test/deploy/lint/... keywords or matrix-style "(...)" names
    KEYWORDS = "keywords"
    # Only names containing "build"
    BUILD_ONLY = "build_only"


class JobSortField(str, Enum):
    """Sortable ProcessedJob columns, named as on the wire."""

    JOB_NAME = "jobName"
    EXECUTION_DATE = "executionDate"
    STATUS = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"
