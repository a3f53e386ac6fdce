"""Map a check run's raw status and conclusion to a job state."""

from gatekeeper.models.check_run import (
    CONCLUSION_NEUTRAL,
    CONCLUSION_SKIPPED,
    CONCLUSION_SUCCESS,
    STATUS_COMPLETED,
)
from gatekeeper.models.job import JobState

SUCCESS_CONCLUSIONS = frozenset({CONCLUSION_SUCCESS, CONCLUSION_NEUTRAL})


def classify(status: str, conclusion: str | None) -> JobState | None:
    """Return pending, success or error; None for a skipped run.

    A skipped run says nothing about mergeability, so it produces no job.
    Any completed conclusion other than success, neutral or skipped
    (failure, timed_out, cancelled, ...) is an error.
    """
    if status != STATUS_COMPLETED:
        return "pending"
    if conclusion in SUCCESS_CONCLUSIONS:
        return "success"
    if conclusion == CONCLUSION_SKIPPED:
        return None
    return "error"
