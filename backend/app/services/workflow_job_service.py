"""
Workflow Job Service - turns workflow runs into ProcessedJob records.

Runs are listed once per call, then their jobs are fetched in fixed-size
batches:
- Jobs of the runs in one batch are fetched concurrently
- Batches run one after another with a short pause in between
- A run whose jobs cannot be fetched contributes no jobs; the call goes on
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from app.config import settings
from app.dtos.workflow import WorkflowDataResponse
from app.entities.date_range import DateRange
from app.entities.enums import JobConclusion, JobFilterPolicy
from app.entities.processed_job import ProcessedJob
from app.entities.workflow_run import Job, WorkflowRun
from app.services.github.workflow_client import GitHubWorkflowClient
from app.services.job_name_extractor import extract_job_name, is_relevant_job
from app.utils.date_utils import format_execution_date

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"


def build_error_summary(job: Job) -> str:
    """
    Summarize why a job did not succeed.

    Empty for successful jobs; otherwise the names of the failed steps, or
    the conclusion itself when no step is marked failed.
    """
    if job.conclusion == JobConclusion.SUCCESS.value:
        return ""

    failed_steps = [
        step.name
        for step in job.steps
        if step.conclusion == JobConclusion.FAILURE.value
        or step.status == JobConclusion.FAILURE.value
    ]
    if failed_steps:
        return ", ".join(failed_steps)

    return job.conclusion or UNKNOWN_ERROR


def chunk_runs(runs: Sequence[WorkflowRun], batch_size: int) -> List[List[WorkflowRun]]:
    return [list(runs[i : i + batch_size]) for i in range(0, len(runs), batch_size)]


class WorkflowJobService:
    def __init__(
        self,
        client: GitHubWorkflowClient,
        batch_size: int = 5,
        batch_delay: float = 0.1,
        filter_policy: JobFilterPolicy = JobFilterPolicy.KEYWORDS,
        max_run_pages: Optional[int] = 1,
        runs_per_page: int = 100,
        display_timezone: str = "UTC",
        date_format: str = "%Y-%m-%d",
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the service.

        Args:
            client: GitHub client scoped to the dashboard's workflow
            batch_size: Runs whose jobs are fetched concurrently
            batch_delay: Seconds to wait between batches
            filter_policy: Which jobs are kept
            max_run_pages: Workflow run pages to read (None reads all)
            runs_per_page: Page size of the run listing
            display_timezone: Timezone execution dates are computed in
            date_format: strftime pattern for execution dates
            logger: Logger receiving progress and per-run failures
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if max_run_pages is not None and max_run_pages < 1:
            raise ValueError("max_run_pages must be at least 1 or None")

        self.client = client
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.filter_policy = filter_policy
        self.max_run_pages = max_run_pages
        self.runs_per_page = runs_per_page
        self.display_timezone = display_timezone
        self.date_format = date_format
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_settings(
        cls,
        client: GitHubWorkflowClient,
        logger: Optional[logging.Logger] = None,
    ) -> "WorkflowJobService":
        return cls(
            client,
            batch_size=settings.JOBS_BATCH_SIZE,
            batch_delay=settings.JOBS_BATCH_DELAY_SECONDS,
            filter_policy=settings.JOBS_FILTER_POLICY,
            max_run_pages=settings.JOBS_MAX_RUN_PAGES,
            runs_per_page=settings.JOBS_RUNS_PER_PAGE,
            display_timezone=settings.DISPLAY_TIMEZONE,
            date_format=settings.EXECUTION_DATE_FORMAT,
            logger=logger,
        )

    async def list_workflow_runs(
        self, date_range: Optional[DateRange] = None
    ) -> List[WorkflowRun]:
        """List runs in the window. Errors propagate to the caller."""
        if self.max_run_pages == 1:
            page = await self.client.list_workflow_runs(
                date_range, page=1, per_page=self.runs_per_page
            )
            return page.workflow_runs

        return await self.client.list_all_workflow_runs(
            date_range, per_page=self.runs_per_page, max_pages=self.max_run_pages
        )

    async def _fetch_run_jobs(self, run: WorkflowRun) -> List[Job]:
        try:
            page = await self.client.list_jobs_for_run(run.id)
        except Exception as e:
            self.logger.warning("Error fetching jobs for run %s: %s", run.id, e)
            return []
        return page.jobs

    def to_processed_job(self, job: Job, run: WorkflowRun) -> ProcessedJob:
        return ProcessedJob(
            job_name=extract_job_name(job.name),
            execution_date=format_execution_date(
                job.started_at, self.display_timezone, self.date_format
            ),
            job_url=job.html_url or "",
            status=job.conclusion or job.status,
            error_summary=build_error_summary(job),
            workflow_run_id=run.id,
        )

    def process_run_jobs(self, run: WorkflowRun, jobs: Sequence[Job]) -> List[ProcessedJob]:
        return [
            self.to_processed_job(job, run)
            for job in jobs
            if is_relevant_job(job.name, self.filter_policy)
        ]

    async def process_runs(self, runs: Sequence[WorkflowRun]) -> List[ProcessedJob]:
        """Fetch and normalize the jobs of the given runs, keeping run order."""
        processed: List[ProcessedJob] = []
        batches = chunk_runs(runs, self.batch_size)

        for index, batch in enumerate(batches):
            if index > 0 and self.batch_delay > 0:
                await asyncio.sleep(self.batch_delay)

            results = await asyncio.gather(*(self._fetch_run_jobs(run) for run in batch))

            for run, jobs in zip(batch, results):
                processed.extend(self.process_run_jobs(run, jobs))

            self.logger.debug(
                "Processed batch %s/%s (%s runs)", index + 1, len(batches), len(batch)
            )

        return processed

    async def get_processed_jobs(
        self, date_range: Optional[DateRange] = None
    ) -> List[ProcessedJob]:
        """
        Build the dashboard's job records for a date window.

        Raises whatever the run listing raises; per-run job failures are
        logged and skipped.
        """
        runs = await self.list_workflow_runs(date_range)
        return await self._process_listed_runs(runs)

    async def _process_listed_runs(self, runs: Sequence[WorkflowRun]) -> List[ProcessedJob]:
        processed = await self.process_runs(runs)
        self.logger.info(
            "Processed %s jobs from %s workflow runs of %s",
            len(processed),
            len(runs),
            self.client.full_name,
        )
        return processed

    async def get_all_workflow_data(
        self, date_range: Optional[DateRange] = None
    ) -> WorkflowDataResponse:
        """
        Return the raw run list together with the jobs processed from it.

        Runs are listed once, so every processed job references a run in
        workflow_runs and nothing is fetched after a listing failure.
        """
        runs = await self.list_workflow_runs(date_range)
        processed = await self._process_listed_runs(runs)
        return WorkflowDataResponse(workflow_runs=runs, processed_jobs=processed)
