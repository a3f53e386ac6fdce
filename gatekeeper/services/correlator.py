"""Attribute check runs to workflows and keep the latest attempt of each job.

Check runs must be passed in provider order, most recent first: the first
run seen for a "workflow / job" key wins and later ones are dropped.
Reordering the input changes which duplicate wins.
"""

import logging
from typing import Dict, Iterable, List, Set, Tuple

from gatekeeper.errors import MalformedResponseError
from gatekeeper.models import CheckRun, CorrelatedJob, WorkflowRun
from gatekeeper.services.classifier import classify

LOG = logging.getLogger("gatekeeper.correlator")


def map_suites_to_workflows(workflow_runs: Iterable[WorkflowRun]) -> Dict[int, str]:
    """Map check suite ID to workflow name."""
    suite_to_workflow: Dict[int, str] = {}
    for wf in workflow_runs:
        suite_to_workflow[wf.check_suite_id] = wf.name
    LOG.debug("Found workflows: %s", list(suite_to_workflow.values()))
    return suite_to_workflow


def create_check_key(run: CheckRun, suite_to_workflow: Dict[int, str]) -> Tuple[str, str]:
    """Return ("workflow / job" key, workflow name) for a check run.

    Raises:
        MalformedResponseError: If the run's check suite has no workflow
    """
    suite_id = run.check_suite_id
    wf_name = suite_to_workflow.get(suite_id) if suite_id is not None else None
    if wf_name is None:
        raise MalformedResponseError(
            f"workflow name not found for check suite ID: {suite_id} of run {run.name}",
            job=run.name,
            check_suite_id=suite_id,
        )
    return f"{wf_name} / {run.name}", wf_name


def correlate(check_runs: Iterable[CheckRun], workflow_runs: Iterable[WorkflowRun]) -> List[CorrelatedJob]:
    """Build one classified job per workflow/job key.

    Skipped runs produce no job. Any malformed run aborts the whole pass.

    Raises:
        MalformedResponseError: If a run lacks name or status, or its check
            suite matches no workflow run
    """
    suite_to_workflow = map_suites_to_workflows(workflow_runs)
    seen: Set[str] = set()
    jobs: List[CorrelatedJob] = []

    for run in check_runs:
        if run.name is None or run.status is None:
            raise MalformedResponseError(
                f"github check run response is invalid: name: {run.name!r}, status: {run.status!r}",
                job=run.name,
                check_suite_id=run.check_suite_id,
            )
        key, wf_name = create_check_key(run, suite_to_workflow)
        if key in seen:
            continue
        seen.add(key)

        state = classify(run.status, run.conclusion)
        if state is None:
            LOG.debug("Skipping %s (conclusion: skipped)", key)
            continue
        jobs.append(CorrelatedJob(job=run.name, workflow=wf_name, state=state))

    return jobs
