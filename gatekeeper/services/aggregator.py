"""Fold classified jobs into the gate verdict."""

import logging
from typing import Iterable, List, Sequence

from gatekeeper.errors import GateFailure
from gatekeeper.models import CorrelatedJob, Status

LOG = logging.getLogger("gatekeeper.aggregator")


def aggregate(
    jobs: Sequence[CorrelatedJob],
    self_job_name: str,
    ignored_jobs: Iterable[str] = (),
) -> Status:
    """Return the verdict for the given jobs.

    The self job and ignored jobs count as successful whatever their state
    and never show up in total_jobs. A still-pending job gives
    succeeded=False without error.

    Raises:
        GateFailure: If any other job ended in error; the message is the
            detail report and pending jobs do not change that
    """
    ignored: List[str] = list(ignored_jobs)
    ignored_set = set(ignored)
    total_jobs: List[str] = []
    complete_jobs: List[str] = []
    error_jobs: List[str] = []
    success_count = 0

    for job in jobs:
        if job.job == self_job_name or job.job in ignored_set:
            success_count += 1
            continue

        name = str(job)
        total_jobs.append(name)
        if job.state == "success":
            complete_jobs.append(name)
            success_count += 1
        elif job.state == "error":
            error_jobs.append(name)

    status = Status(
        total_jobs=total_jobs,
        complete_jobs=complete_jobs,
        error_jobs=error_jobs,
        ignored_jobs=ignored,
        succeeded=not error_jobs and success_count == len(jobs),
    )
    if error_jobs:
        LOG.debug("Failed jobs: %s", error_jobs)
        raise GateFailure(status)
    return status
