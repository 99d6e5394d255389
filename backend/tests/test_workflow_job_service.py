"""Tests for WorkflowJobService batching, failure isolation and job normalization."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.entities import JobFilterPolicy, RunStatus
from app.services.github.exceptions import GithubRemoteApiError, GithubTransportError
from app.services.workflow_job_service import (
    UNKNOWN_ERROR,
    WorkflowJobService,
    build_error_summary,
    chunk_runs,
)


def one_build_job_per_run(make_job, run_ids):
    return {run_id: [make_job(run_id * 10, f"build-r{run_id}")] for run_id in run_ids}


class TestBatching:
    def test_failed_run_is_skipped_and_order_kept(self, make_run, make_job, fake_client_cls):
        run_ids = [1, 2, 3, 4, 5, 6, 7]
        client = fake_client_cls(
            runs=[make_run(i) for i in run_ids],
            jobs_by_run=one_build_job_per_run(make_job, run_ids),
            failing_runs={3: GithubTransportError("connection reset")},
        )
        service = WorkflowJobService(client, batch_size=5, batch_delay=0)

        jobs = asyncio.run(service.get_processed_jobs())

        assert [job.workflow_run_id for job in jobs] == [1, 2, 4, 5, 6, 7]
        assert [job.job_name for job in jobs] == ["r1", "r2", "r4", "r5", "r6", "r7"]
        assert sorted(client.job_calls) == run_ids

    def test_at_most_batch_size_requests_in_flight(self, make_run, make_job, fake_client_cls):
        run_ids = list(range(1, 13))
        client = fake_client_cls(
            runs=[make_run(i) for i in run_ids],
            jobs_by_run=one_build_job_per_run(make_job, run_ids),
        )
        service = WorkflowJobService(client, batch_size=5, batch_delay=0)

        asyncio.run(service.get_processed_jobs())

        assert client.max_in_flight == 5

    def test_sleeps_only_between_batches(self, make_run, make_job, fake_client_cls):
        run_ids = [1, 2, 3, 4, 5, 6, 7]
        client = fake_client_cls(
            runs=[make_run(i) for i in run_ids],
            jobs_by_run=one_build_job_per_run(make_job, run_ids),
            yield_control=False,
        )
        service = WorkflowJobService(client, batch_size=5, batch_delay=0.1)

        with patch(
            "app.services.workflow_job_service.asyncio.sleep", new=AsyncMock()
        ) as sleep_mock:
            asyncio.run(service.get_processed_jobs())

        sleep_mock.assert_awaited_once_with(0.1)

    def test_single_batch_does_not_sleep(self, make_run, fake_client_cls):
        client = fake_client_cls(runs=[make_run(1), make_run(2)], yield_control=False)
        service = WorkflowJobService(client, batch_size=5, batch_delay=0.1)

        with patch(
            "app.services.workflow_job_service.asyncio.sleep", new=AsyncMock()
        ) as sleep_mock:
            asyncio.run(service.get_processed_jobs())

        sleep_mock.assert_not_awaited()

    def test_failure_is_logged(self, make_run, fake_client_cls):
        client = fake_client_cls(
            runs=[make_run(9)],
            failing_runs={9: GithubRemoteApiError(500, "Internal Server Error")},
        )
        logger = MagicMock()
        service = WorkflowJobService(client, batch_delay=0, logger=logger)

        assert asyncio.run(service.get_processed_jobs()) == []
        logger.warning.assert_called_once()
        assert logger.warning.call_args[0][1] == 9

    def test_run_listing_error_propagates(self, fake_client_cls):
        client = fake_client_cls(
            runs=[], run_list_error=GithubRemoteApiError(401, "Unauthorized")
        )
        service = WorkflowJobService(client, batch_delay=0)

        with pytest.raises(GithubRemoteApiError):
            asyncio.run(service.get_processed_jobs())

        assert client.job_calls == []

    def test_no_runs_yields_no_jobs(self, fake_client_cls):
        service = WorkflowJobService(fake_client_cls(runs=[]), batch_delay=0)
        assert asyncio.run(service.get_processed_jobs()) == []

    def test_invalid_batch_size(self, fake_client_cls):
        with pytest.raises(ValueError):
            WorkflowJobService(fake_client_cls(runs=[]), batch_size=0)

    def test_chunk_runs(self, make_run):
        runs = [make_run(i) for i in range(1, 8)]
        assert [len(batch) for batch in chunk_runs(runs, 5)] == [5, 2]


class TestRunListing:
    def test_single_page_by_default(self, make_run, fake_client_cls):
        client = fake_client_cls(runs=[make_run(i) for i in range(1, 4)])
        service = WorkflowJobService(client, batch_delay=0, runs_per_page=2)

        runs = asyncio.run(service.list_workflow_runs())

        assert [run.id for run in runs] == [1, 2]
        assert len(client.run_list_calls) == 1

    def test_all_pages_when_unbounded(self, make_run, fake_client_cls):
        client = fake_client_cls(runs=[make_run(i) for i in range(1, 4)])
        service = WorkflowJobService(
            client, batch_delay=0, runs_per_page=2, max_run_pages=None
        )

        runs = asyncio.run(service.list_workflow_runs())

        assert [run.id for run in runs] == [1, 2, 3]
        assert [call["page"] for call in client.run_list_calls] == [1, 2]


class TestNormalization:
    def test_processed_job_fields(self, make_run, make_job, fake_client_cls):
        job = make_job(
            70,
            "build (python-3.9, ubuntu-latest)",
            conclusion="failure",
            steps=[
                {"name": "Checkout", "conclusion": "success"},
                {"name": "Compile", "conclusion": "failure"},
            ],
            started_at="2024-03-02T23:30:00Z",
        )
        client = fake_client_cls(runs=[make_run(7)], jobs_by_run={7: [job]})
        service = WorkflowJobService(client, batch_delay=0)

        [processed] = asyncio.run(service.get_processed_jobs())

        assert processed.job_name == "python-3.9, ubuntu-latest"
        assert processed.execution_date == "2024-03-02"
        assert processed.job_url == job.html_url
        assert processed.status == "failure"
        assert processed.error_summary == "Compile"
        assert processed.workflow_run_id == 7

    def test_irrelevant_jobs_are_dropped(self, make_run, make_job, fake_client_cls):
        jobs = [make_job(1, "notify slack"), make_job(2, "unit-tests"), make_job(3, "build-api")]
        client = fake_client_cls(runs=[make_run(1)], jobs_by_run={1: jobs})

        keywords = asyncio.run(
            WorkflowJobService(client, batch_delay=0).get_processed_jobs()
        )
        build_only = asyncio.run(
            WorkflowJobService(
                client, batch_delay=0, filter_policy=JobFilterPolicy.BUILD_ONLY
            ).get_processed_jobs()
        )

        assert [job.job_name for job in keywords] == ["unit-tests", "api"]
        assert [job.job_name for job in build_only] == ["api"]

    def test_status_falls_back_to_job_status(self, make_run, make_job, fake_client_cls):
        job = make_job(
            1,
            "build-web",
            conclusion=None,
            status=RunStatus.IN_PROGRESS.value,
            started_at=None,
        )
        client = fake_client_cls(runs=[make_run(1)], jobs_by_run={1: [job]})

        [processed] = asyncio.run(WorkflowJobService(client, batch_delay=0).get_processed_jobs())

        assert processed.status == RunStatus.IN_PROGRESS
        assert processed.execution_date == ""
        assert processed.error_summary == UNKNOWN_ERROR

    def test_execution_date_in_display_timezone(self, make_run, make_job, fake_client_cls):
        job = make_job(1, "build-web", started_at="2024-03-02T23:30:00Z")
        client = fake_client_cls(runs=[make_run(1)], jobs_by_run={1: [job]})
        service = WorkflowJobService(
            client, batch_delay=0, display_timezone="Asia/Tokyo", date_format="%d/%m/%Y"
        )

        [processed] = asyncio.run(service.get_processed_jobs())

        assert processed.execution_date == "03/03/2024"

    def test_repeated_calls_give_equal_results(self, make_run, make_job, fake_client_cls):
        run_ids = [1, 2, 3]
        client = fake_client_cls(
            runs=[make_run(i) for i in run_ids],
            jobs_by_run=one_build_job_per_run(make_job, run_ids),
        )
        service = WorkflowJobService(client, batch_delay=0)

        assert asyncio.run(service.get_processed_jobs()) == asyncio.run(
            service.get_processed_jobs()
        )

    def test_every_job_references_a_listed_run(self, make_run, make_job, fake_client_cls):
        run_ids = [11, 12, 13]
        client = fake_client_cls(
            runs=[make_run(i) for i in run_ids],
            jobs_by_run={
                11: [make_job(1, "build-a"), make_job(2, "test-a")],
                13: [make_job(3, "lint")],
            },
        )

        jobs = asyncio.run(WorkflowJobService(client, batch_delay=0).get_processed_jobs())

        assert {job.workflow_run_id for job in jobs} <= set(run_ids)
        assert len(jobs) == 3


class TestErrorSummary:
    def test_success_has_empty_summary(self, make_job):
        assert build_error_summary(make_job(1, "build", conclusion="success")) == ""

    def test_failed_steps_are_joined(self, make_job):
        job = make_job(
            1,
            "build",
            conclusion="failure",
            steps=[
                {"name": "Compile", "conclusion": "failure"},
                {"name": "Upload", "conclusion": "skipped"},
                {"name": "Package", "status": "failure"},
            ],
        )
        assert build_error_summary(job) == "Compile, Package"

    def test_conclusion_without_failed_steps(self, make_job):
        job = make_job(1, "build", conclusion="failure", steps=[{"name": "Setup", "conclusion": "success"}])
        assert build_error_summary(job) == "failure"

    def test_cancelled(self, make_job):
        assert build_error_summary(make_job(1, "build", conclusion="cancelled")) == "cancelled"

    def test_no_conclusion(self, make_job):
        job = make_job(1, "build", conclusion=None, status="queued")
        assert build_error_summary(job) == "Unknown error"


def test_get_all_workflow_data(make_run, make_job, fake_client_cls):
    client = fake_client_cls(
        runs=[make_run(1), make_run(2)],
        jobs_by_run={1: [make_job(1, "build-api")], 2: [make_job(2, "deploy")]},
    )
    service = WorkflowJobService(client, batch_delay=0)

    data = asyncio.run(service.get_all_workflow_data())

    assert [run.id for run in data.workflow_runs] == [1, 2]
    assert [job.job_name for job in data.processed_jobs] == ["api", "deploy"]
    dumped = data.model_dump(by_alias=True)
    assert set(dumped) == {"workflowRuns", "processedJobs"}
    assert dumped["processedJobs"][0]["workflowRunId"] == 1
    assert len(client.run_list_calls) == 1


class TestWorkflowData:
    def test_listing_failure_leaves_no_job_requests_behind(
        self, make_run, make_job, fake_client_cls
    ):
        class FirstListingFailsClient(fake_client_cls):
            async def list_workflow_runs(self, date_range=None, page=1, per_page=100):
                if not self.run_list_calls:
                    self.run_list_calls.append({"page": page})
                    raise GithubTransportError("connection reset")
                return await super().list_workflow_runs(date_range, page, per_page)

        client = FirstListingFailsClient(
            runs=[make_run(i) for i in (1, 2, 3)],
            jobs_by_run=one_build_job_per_run(make_job, [1, 2, 3]),
        )
        service = WorkflowJobService(client, batch_delay=0)

        async def scenario():
            with pytest.raises(GithubTransportError):
                await service.get_all_workflow_data()
            await asyncio.sleep(0.05)

        asyncio.run(scenario())

        assert client.job_calls == []
        assert len(client.run_list_calls) == 1

    def test_jobs_reference_the_returned_runs(self, make_run, make_job, fake_client_cls):
        class GrowingRunsClient(fake_client_cls):
            async def list_workflow_runs(self, date_range=None, page=1, per_page=100):
                page_result = await super().list_workflow_runs(date_range, page, per_page)
                # A new run shows up after every listing
                self.runs = [make_run(len(self.runs) + 1)] + self.runs
                return page_result

        client = GrowingRunsClient(
            runs=[make_run(1)],
            jobs_by_run={1: [make_job(1, "build-api")], 2: [make_job(2, "build-web")]},
        )

        data = asyncio.run(WorkflowJobService(client, batch_delay=0).get_all_workflow_data())

        run_ids = {run.id for run in data.workflow_runs}
        assert run_ids == {1}
        assert {job.workflow_run_id for job in data.processed_jobs} <= run_ids
