from typing import List, Optional

from pydantic_settings import BaseSettings

from app.entities.enums import JobFilterPolicy


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Workflow Job Dashboard"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENV: str = "dev"  # Environment: "dev", "staging", "prod"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    # GitHub
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_REPO_OWNER: str = "opendatahub-io"
    GITHUB_REPO_NAME: str = "odh-data-service-rhods"
    GITHUB_WORKFLOW_FILE: str = "upstream-auto-merge.yml"
    GITHUB_REQUEST_TIMEOUT: float = 30.0  # Seconds per upstream request

    # GitHub OAuth (authorize URL only, token exchange lives outside this service)
    GITHUB_CLIENT_ID: Optional[str] = None
    GITHUB_REDIRECT_URI: str = "http://localhost:3000/auth/callback"
    GITHUB_SCOPES: List[str] = ["repo", "actions:read"]

    # ==========================================================================
    # Job Aggregation
    # ==========================================================================

    JOBS_BATCH_SIZE: int = 5  # Runs whose jobs are fetched concurrently
    JOBS_BATCH_DELAY_SECONDS: float = 0.1  # Pause between batches
    JOBS_MAX_RUN_PAGES: Optional[int] = 1  # Workflow run pages to read, "none" = all
    JOBS_RUNS_PER_PAGE: int = 100
    JOBS_FILTER_POLICY: JobFilterPolicy = JobFilterPolicy.KEYWORDS  # "keywords" or "build_only"

    # --- Presentation ---
    DISPLAY_TIMEZONE: str = "UTC"  # Timezone used for execution dates
    EXECUTION_DATE_FORMAT: str = "%Y-%m-%d"
    DEFAULT_DATE_RANGE_DAYS: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_parse_none_str = "none"


settings = Settings()
