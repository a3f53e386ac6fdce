"""GitHub API adapter."""

import logging
import threading
from typing import Any, Dict, List

import requests
from pydantic import ValidationError

from gatekeeper.adapters.base import ChecksProvider
from gatekeeper.errors import MalformedResponseError, ProviderError, ValidationCancelled
from gatekeeper.models import CheckRun, CheckRunsPage, WorkflowRun

LOG = logging.getLogger("gatekeeper.adapters.github")

# Workflow runs are fetched in one request; check suites beyond this many
# runs cannot be mapped to a workflow name.
MAX_WORKFLOW_RUNS_PER_PAGE = 100

# How often a waiting request looks at the cancel event
CANCEL_POLL_SECONDS = 0.05


def _check_run_from_api(data: Dict[str, Any]) -> CheckRun:
    suite = data.get("check_suite") or {}
    try:
        return CheckRun(
            name=data.get("name"),
            status=data.get("status"),
            conclusion=data.get("conclusion"),
            check_suite_id=suite.get("id"),
        )
    except ValidationError as e:
        raise MalformedResponseError(
            f"github check run response is invalid: {e.errors()[0]['msg']}",
            job=data.get("name") if isinstance(data.get("name"), str) else None,
        ) from e


def _workflow_run_from_api(data: Dict[str, Any]) -> WorkflowRun:
    try:
        return WorkflowRun(name=data.get("name") or "", check_suite_id=data.get("check_suite_id"))
    except ValidationError as e:
        raise MalformedResponseError(
            f"workflow run {data.get('name')!r} has no valid check suite ID: {data.get('check_suite_id')!r}",
        ) from e


class GitHubAdapter(ChecksProvider):
    """GitHub REST API implementation."""

    def __init__(self, token: str, api_url: str = "https://api.github.com", timeout: int = 30) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _send(
        self,
        method: str,
        url: str,
        params: Dict[str, Any] | None,
        cancel: threading.Event | None,
    ) -> requests.Response:
        """Run the request; with a cancel event, wait for it in a daemon thread.

        When cancel is set first, the session is closed to drop its
        connections and ValidationCancelled is raised without waiting for
        the response.
        """
        if cancel is None:
            return self._session.request(method, url, params=params, timeout=self._timeout)
        if cancel.is_set():
            raise ValidationCancelled("validation cancelled")

        done = threading.Event()
        outcome: Dict[str, Any] = {}

        def worker() -> None:
            try:
                outcome["response"] = self._session.request(method, url, params=params, timeout=self._timeout)
            except Exception as e:
                outcome["error"] = e
            finally:
                done.set()

        threading.Thread(target=worker, name="gatekeeper-request", daemon=True).start()
        while not done.wait(CANCEL_POLL_SECONDS):
            if cancel.is_set():
                LOG.debug("Cancelled while waiting for %s %s", method, url)
                self._session.close()
                raise ValidationCancelled("validation cancelled")
        if "error" in outcome:
            raise outcome["error"]
        return outcome["response"]

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        cancel: threading.Event | None = None,
    ) -> Dict[str, Any]:
        """Send the request and return the decoded JSON object."""
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._send(method, url, params, cancel)
        except requests.RequestException as e:
            raise ProviderError(f"{method} {path}: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except (ValueError, AttributeError):
                pass
            raise ProviderError(f"{resp.status_code}: {msg}", status_code=resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(f"{method} {path}: response is not valid JSON: {e}", status_code=resp.status_code) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ProviderError(
                f"{method} {path}: expected a JSON object, got {type(data).__name__}",
                status_code=resp.status_code,
            )
        return data

    def list_check_runs_for_ref(
        self,
        owner: str,
        repo: str,
        ref: str,
        page: int,
        per_page: int,
        cancel: threading.Event | None = None,
    ) -> CheckRunsPage:
        data = self._request(
            "GET",
            f"/repos/{owner}/{repo}/commits/{ref}/check-runs",
            params={"page": page, "per_page": per_page},
            cancel=cancel,
        )
        runs = [_check_run_from_api(d) for d in data.get("check_runs") or []]
        LOG.debug("Fetched %d check runs (page %d) for %s/%s@%s", len(runs), page, owner, repo, ref)
        return CheckRunsPage(check_runs=runs, total_count=data.get("total_count") or 0)

    def list_workflow_runs(
        self,
        owner: str,
        repo: str,
        ref: str,
        cancel: threading.Event | None = None,
    ) -> List[WorkflowRun]:
        data = self._request(
            "GET",
            f"/repos/{owner}/{repo}/actions/runs",
            params={"head_sha": ref, "per_page": MAX_WORKFLOW_RUNS_PER_PAGE},
            cancel=cancel,
        )
        runs = [_workflow_run_from_api(d) for d in data.get("workflow_runs") or []]
        total = data.get("total_count") or 0
        if total > len(runs):
            LOG.warning(
                "Only %d of %d workflow runs for %s/%s@%s fetched; check runs of the others "
                "will not be attributed to a workflow",
                len(runs),
                total,
                owner,
                repo,
                ref,
            )
        return runs
