"""Status validator: decide whether every CI job for a ref has passed.

Build it with create_validator(); a validator with missing fields is never
returned. Each validate() call fetches fresh data and keeps no state, so
one validator can be polled repeatedly or shared between threads.
"""

import logging
import threading
from typing import List, Tuple

from pydantic import BaseModel, Field

from gatekeeper.adapters.base import ChecksProvider
from gatekeeper.errors import ConfigurationError, ValidationCancelled
from gatekeeper.models import CheckRun, Status
from gatekeeper.services.aggregator import aggregate
from gatekeeper.services.correlator import correlate

LOG = logging.getLogger("gatekeeper.validator")

MAX_CHECK_RUNS_PER_PAGE = 100


def parse_ignored_jobs(raw: str | None) -> List[str]:
    """Split a comma-separated job list, trimming spaces and dropping empty entries."""
    if not raw:
        return []
    return [name.strip() for name in raw.split(",") if name.strip()]


def split_repository(repository: str | None) -> Tuple[str, str]:
    """Split "owner/repo"; returns empty parts when the value is malformed."""
    owner, sep, repo = (repository or "").strip().partition("/")
    if not sep or "/" in repo:
        return "", ""
    return owner, repo


class ValidatorOptions(BaseModel):
    """Validator settings; empty strings are reported by create_validator."""

    owner: str = ""
    repo: str = ""
    ref: str = ""
    self_job_name: str = ""
    ignored_jobs: Tuple[str, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}


class StatusValidator:
    """Validates that all check runs of a ref succeeded."""

    def __init__(self, client: ChecksProvider, options: ValidatorOptions) -> None:
        self._client = client
        self._options = options

    @property
    def name(self) -> str:
        """Self job name; this job never blocks its own gate."""
        return self._options.self_job_name

    @property
    def options(self) -> ValidatorOptions:
        return self._options

    def validate(self, cancel: threading.Event | None = None) -> Status:
        """Fetch check and workflow runs for the ref and return the verdict.

        Returns:
            Status with succeeded=True when all jobs passed, False while any
            job is still pending

        Raises:
            GateFailure: If any job failed
            ProviderError: If the provider call fails (not retried)
            MalformedResponseError: If a check run cannot be attributed
            ValidationCancelled: If cancel is set, including while a fetch is in flight
        """
        opts = self._options
        check_runs = self._list_check_runs_for_ref(cancel)

        _raise_if_cancelled(cancel)
        workflow_runs = self._client.list_workflow_runs(opts.owner, opts.repo, opts.ref, cancel=cancel)

        jobs = correlate(check_runs, workflow_runs)
        _raise_if_cancelled(cancel)
        LOG.debug("Correlated %d jobs from %d check runs", len(jobs), len(check_runs))
        return aggregate(jobs, opts.self_job_name, opts.ignored_jobs)

    def _list_check_runs_for_ref(self, cancel: threading.Event | None) -> List[CheckRun]:
        """Fetch pages until the provider-reported total has been collected."""
        opts = self._options
        runs: List[CheckRun] = []
        page = 1
        while True:
            _raise_if_cancelled(cancel)
            result = self._client.list_check_runs_for_ref(
                opts.owner,
                opts.repo,
                opts.ref,
                page=page,
                per_page=MAX_CHECK_RUNS_PER_PAGE,
                cancel=cancel,
            )
            runs.extend(result.check_runs)
            if result.total_count <= len(runs) or not result.check_runs:
                break
            page += 1
        return runs


def _raise_if_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise ValidationCancelled("validation cancelled")


def create_validator(client: ChecksProvider | None, options: ValidatorOptions) -> StatusValidator:
    """Return a StatusValidator, or raise listing every missing field.

    Raises:
        ConfigurationError: If owner, repo, ref, self job name or client is empty
    """
    missing: List[str] = []
    if not options.repo:
        missing.append("repository name is empty")
    if not options.owner:
        missing.append("repository owner is empty")
    if not options.ref:
        missing.append("reference of repository is empty")
    if not options.self_job_name:
        missing.append("self job name is empty")
    if client is None:
        missing.append("github client is empty")
    if missing:
        raise ConfigurationError(missing)
    return StatusValidator(client, options)
