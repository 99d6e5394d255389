from pydantic import BaseModel, ConfigDict, Field


class ProcessedJob(BaseModel):
    """
    Normalized build job record shown by the dashboard.

    Built fresh on every fetch and never mutated afterwards. Serialized with
    the camelCase names the dashboard table and charts read.
    """

    job_name: str = Field(..., alias="jobName")
    execution_date: str = Field(..., alias="executionDate")
    job_url: str = Field("", alias="jobUrl")
    status: str
    error_summary: str = Field("", alias="errorSummary")
    workflow_run_id: int = Field(..., alias="workflowRunId")

    model_config = ConfigDict(populate_by_name=True, frozen=True)
