"""Check run reported by the provider for a commit reference."""

from typing import List

from pydantic import BaseModel, Field

# https://docs.github.com/en/rest/checks/runs
STATUS_QUEUED = "queued"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"

CONCLUSION_NEUTRAL = "neutral"
CONCLUSION_SUCCESS = "success"
CONCLUSION_SKIPPED = "skipped"
CONCLUSION_FAILURE = "failure"
CONCLUSION_TIMED_OUT = "timed_out"


class CheckRun(BaseModel):
    """One execution of a named job.

    Name and status are optional here so that a malformed provider
    response reaches the correlator instead of failing at parse time.
    """

    name: str | None = None
    status: str | None = None
    conclusion: str | None = None
    check_suite_id: int | None = None


class CheckRunsPage(BaseModel):
    """One page of check runs plus the provider-reported total."""

    check_runs: List[CheckRun] = Field(default_factory=list)
    total_count: int = 0
