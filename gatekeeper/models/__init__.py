"""Data models for check runs, workflow runs, jobs and the gate verdict (Pydantic)."""

from gatekeeper.models.check_run import CheckRun, CheckRunsPage
from gatekeeper.models.job import CorrelatedJob, JobState
from gatekeeper.models.status import Status
from gatekeeper.models.workflow_run import WorkflowRun

__all__ = ["CheckRun", "CheckRunsPage", "CorrelatedJob", "JobState", "Status", "WorkflowRun"]
