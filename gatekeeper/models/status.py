"""Gate verdict for one validation call."""

import json
from typing import List

from pydantic import BaseModel, Field


def _jobs(jobs: List[str]) -> str:
    return json.dumps(jobs, ensure_ascii=False)


class Status(BaseModel):
    """Aggregated result of one validation.

    complete_jobs and error_jobs are subsets of total_jobs; ignored_jobs is
    the configured ignore list. All lists keep encounter order.
    """

    total_jobs: List[str] = Field(default_factory=list)
    complete_jobs: List[str] = Field(default_factory=list)
    error_jobs: List[str] = Field(default_factory=list)
    ignored_jobs: List[str] = Field(default_factory=list)
    succeeded: bool = False

    model_config = {"frozen": True}

    def is_success(self) -> bool:
        return self.succeeded

    def detail(self) -> str:
        """Human-readable report; identical input gives identical text."""
        return (
            f"{len(self.complete_jobs)} out of {len(self.total_jobs)}\n"
            "\n"
            f"  Total job count:     {len(self.total_jobs)}\n"
            f"    jobs: {_jobs(self.total_jobs)}\n"
            f"  Completed job count: {len(self.complete_jobs)}\n"
            f"    jobs: {_jobs(self.complete_jobs)}\n"
            f"  Failed job count:    {len(self.error_jobs)}\n"
            f"    jobs: {_jobs(self.error_jobs)}\n"
            f"  Ignored job count:   {len(self.ignored_jobs)}\n"
            f"    jobs: {_jobs(self.ignored_jobs)}\n"
        )
