"""Data Transfer Objects (DTOs) for API requests and responses"""

from .github import (
    GithubAuthorizeResponse,
    GithubUserResponse,
    HealthResponse,
)
from .workflow import (
    DateRangeResponse,
    JobFacetsResponse,
    JobNameCount,
    JobStatisticsResponse,
    ProcessedJobListResponse,
    StatusCount,
    TimelinePoint,
    WorkflowDataResponse,
)

__all__ = [
    # GitHub
    "GithubAuthorizeResponse",
    "GithubUserResponse",
    "HealthResponse",
    # Workflow jobs
    "DateRangeResponse",
    "JobFacetsResponse",
    "JobNameCount",
    "JobStatisticsResponse",
    "ProcessedJobListResponse",
    "StatusCount",
    "TimelinePoint",
    "WorkflowDataResponse",
]
