"""Job as seen by the gate: one per workflow/job pair."""

from typing import Literal

from pydantic import BaseModel

JobState = Literal["pending", "success", "error"]


class CorrelatedJob(BaseModel):
    """Latest attempt of a job, attributed to its workflow and classified."""

    job: str
    workflow: str
    state: JobState

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.workflow} / {self.job}"
