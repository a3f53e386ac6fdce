"""Unit tests for GitHub adapter (mocked API)."""

import threading
import time
from unittest.mock import Mock, patch

import pytest
import requests

from gatekeeper.adapters.github import GitHubAdapter
from gatekeeper.errors import MalformedResponseError, ProviderError, ValidationCancelled
from gatekeeper.models import CheckRun, CheckRunsPage, WorkflowRun


@pytest.fixture
def adapter() -> GitHubAdapter:
    return GitHubAdapter(token="test-token", api_url="https://api.github.com")


def test_session_headers(adapter: GitHubAdapter) -> None:
    assert adapter._session.headers["Authorization"] == "token test-token"
    assert adapter._session.headers["Accept"] == "application/vnd.github.v3+json"


def test_list_check_runs_for_ref_success(adapter: GitHubAdapter) -> None:
    """list_check_runs_for_ref maps check runs and total_count."""
    response_data = {
        "total_count": 2,
        "check_runs": [
            {
                "id": 11,
                "name": "build",
                "status": "completed",
                "conclusion": "success",
                "check_suite": {"id": 5},
            },
            {
                "id": 12,
                "name": "test",
                "status": "in_progress",
                "conclusion": None,
                "check_suite": {"id": 5},
            },
        ],
    }
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = response_data

    with patch.object(adapter._session, "request", return_value=mock_resp) as req:
        page = adapter.list_check_runs_for_ref("owner", "repo", "abc123", page=2, per_page=100)

    assert isinstance(page, CheckRunsPage)
    assert page.total_count == 2
    assert page.check_runs == [
        CheckRun(name="build", status="completed", conclusion="success", check_suite_id=5),
        CheckRun(name="test", status="in_progress", conclusion=None, check_suite_id=5),
    ]
    call_args = req.call_args
    assert call_args[0][0] == "GET"
    assert call_args[0][1] == "https://api.github.com/repos/owner/repo/commits/abc123/check-runs"
    assert call_args[1].get("params") == {"page": 2, "per_page": 100}
    assert call_args[1].get("timeout") == 30


def test_list_check_runs_keeps_malformed_runs(adapter: GitHubAdapter) -> None:
    """Runs without name or check suite are passed through for the correlator to reject."""
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = {"total_count": 1, "check_runs": [{"id": 1}]}

    with patch.object(adapter._session, "request", return_value=mock_resp):
        page = adapter.list_check_runs_for_ref("owner", "repo", "sha", page=1, per_page=100)
    assert page.check_runs == [CheckRun()]


def test_list_check_runs_empty_body(adapter: GitHubAdapter) -> None:
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = {}

    with patch.object(adapter._session, "request", return_value=mock_resp):
        page = adapter.list_check_runs_for_ref("owner", "repo", "sha", page=1, per_page=100)
    assert page == CheckRunsPage(check_runs=[], total_count=0)


def test_list_workflow_runs_success(adapter: GitHubAdapter) -> None:
    """list_workflow_runs filters by head_sha and maps name and check suite."""
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = {
        "total_count": 2,
        "workflow_runs": [
            {"id": 1, "name": "CI", "check_suite_id": 5, "head_sha": "abc123"},
            {"id": 2, "name": "Merge Gatekeeper", "check_suite_id": 6, "head_sha": "abc123"},
        ],
    }

    with patch.object(adapter._session, "request", return_value=mock_resp) as req:
        runs = adapter.list_workflow_runs("owner", "repo", "abc123")

    assert runs == [
        WorkflowRun(name="CI", check_suite_id=5),
        WorkflowRun(name="Merge Gatekeeper", check_suite_id=6),
    ]
    call_args = req.call_args
    assert call_args[0][0] == "GET"
    assert "/repos/owner/repo/actions/runs" in call_args[0][1]
    assert call_args[1].get("params", {}).get("head_sha") == "abc123"


def test_list_workflow_runs_empty(adapter: GitHubAdapter) -> None:
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = {"total_count": 0, "workflow_runs": []}

    with patch.object(adapter._session, "request", return_value=mock_resp):
        assert adapter.list_workflow_runs("owner", "repo", "sha") == []


def test_api_error_uses_message(adapter: GitHubAdapter) -> None:
    """HTTP errors raise ProviderError with the API message and status code."""
    mock_resp = Mock()
    mock_resp.status_code = 403
    mock_resp.text = "Forbidden"
    mock_resp.json.return_value = {"message": "API rate limit exceeded"}

    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(ProviderError) as exc_info:
            adapter.list_check_runs_for_ref("owner", "repo", "sha", page=1, per_page=100)
    assert str(exc_info.value) == "403: API rate limit exceeded"
    assert exc_info.value.status_code == 403


def test_api_error_without_json_body(adapter: GitHubAdapter) -> None:
    mock_resp = Mock()
    mock_resp.status_code = 502
    mock_resp.text = "Bad Gateway"
    mock_resp.json.side_effect = ValueError("no json")

    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(ProviderError) as exc_info:
            adapter.list_workflow_runs("owner", "repo", "sha")
    assert str(exc_info.value) == "502: Bad Gateway"


def test_network_error_raises_provider_error(adapter: GitHubAdapter) -> None:
    cause = requests.ConnectionError("connection refused")
    with patch.object(adapter._session, "request", side_effect=cause):
        with pytest.raises(ProviderError) as exc_info:
            adapter.list_workflow_runs("owner", "repo", "sha")
    assert exc_info.value.__cause__ is cause
    assert exc_info.value.status_code is None


def test_api_url_trailing_slash_stripped() -> None:
    adapter = GitHubAdapter(token="t", api_url="https://ghe.example.com/api/v3/", timeout=5)
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = {}

    with patch.object(adapter._session, "request", return_value=mock_resp) as req:
        adapter.list_workflow_runs("o", "r", "sha")
    assert req.call_args[0][1] == "https://ghe.example.com/api/v3/repos/o/r/actions/runs"
    assert req.call_args[1].get("timeout") == 5


def _ok(data) -> Mock:
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = data
    return mock_resp


def test_non_json_success_body_raises_provider_error(adapter: GitHubAdapter) -> None:
    """A 200 response that is not JSON is a provider error, not a bare ValueError."""
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.side_effect = ValueError("Expecting value")

    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(ProviderError) as exc_info:
            adapter.list_check_runs_for_ref("owner", "repo", "sha", page=1, per_page=100)
    assert "not valid JSON" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_non_object_json_body_raises_provider_error(adapter: GitHubAdapter) -> None:
    with patch.object(adapter._session, "request", return_value=_ok(["unexpected"])):
        with pytest.raises(ProviderError):
            adapter.list_workflow_runs("owner", "repo", "sha")


@pytest.mark.parametrize(
    "workflow_run",
    [
        {"name": "CI"},
        {"name": "CI", "check_suite_id": None},
        {"name": "CI", "check_suite_id": "not-a-number"},
    ],
)
def test_workflow_run_without_valid_suite_id_is_malformed(adapter: GitHubAdapter, workflow_run: dict) -> None:
    with patch.object(adapter._session, "request", return_value=_ok({"workflow_runs": [workflow_run]})):
        with pytest.raises(MalformedResponseError) as exc_info:
            adapter.list_workflow_runs("owner", "repo", "sha")
    assert "'CI' has no valid check suite ID" in str(exc_info.value)


def test_check_run_with_invalid_suite_id_is_malformed(adapter: GitHubAdapter) -> None:
    body = {"total_count": 1, "check_runs": [{"name": "build", "status": "queued", "check_suite": {"id": "x"}}]}
    with patch.object(adapter._session, "request", return_value=_ok(body)):
        with pytest.raises(MalformedResponseError) as exc_info:
            adapter.list_check_runs_for_ref("owner", "repo", "sha", page=1, per_page=100)
    assert exc_info.value.job == "build"


def test_more_workflow_runs_than_one_page_logs_warning(
    adapter: GitHubAdapter, caplog: pytest.LogCaptureFixture
) -> None:
    body = {"total_count": 150, "workflow_runs": [{"name": "CI", "check_suite_id": 1}]}
    with caplog.at_level("WARNING", logger="gatekeeper.adapters.github"):
        with patch.object(adapter._session, "request", return_value=_ok(body)) as req:
            runs = adapter.list_workflow_runs("owner", "repo", "sha")
    assert runs == [WorkflowRun(name="CI", check_suite_id=1)]
    assert req.call_args[1]["params"]["per_page"] == 100
    assert any("Only 1 of 150 workflow runs" in r.getMessage() for r in caplog.records)


def test_cancel_aborts_in_flight_request(adapter: GitHubAdapter) -> None:
    """Setting cancel while the request is still running returns at once."""

    def slow_request(*args, **kwargs):
        time.sleep(1.5)
        return _ok({"total_count": 0, "check_runs": []})

    cancel = threading.Event()
    timer = threading.Timer(0.05, cancel.set)
    with patch.object(adapter._session, "request", side_effect=slow_request):
        with patch.object(adapter._session, "close") as close:
            timer.start()
            started = time.monotonic()
            try:
                with pytest.raises(ValidationCancelled):
                    adapter.list_check_runs_for_ref("owner", "repo", "sha", page=1, per_page=100, cancel=cancel)
            finally:
                timer.cancel()
            elapsed = time.monotonic() - started
    assert elapsed < 0.5
    close.assert_called_once()


def test_cancel_already_set_skips_request(adapter: GitHubAdapter) -> None:
    cancel = threading.Event()
    cancel.set()
    with patch.object(adapter._session, "request") as req:
        with pytest.raises(ValidationCancelled):
            adapter.list_workflow_runs("owner", "repo", "sha", cancel=cancel)
    req.assert_not_called()


def test_request_with_cancel_event_returns_response(adapter: GitHubAdapter) -> None:
    body = {"workflow_runs": [{"name": "CI", "check_suite_id": 3}]}
    with patch.object(adapter._session, "request", return_value=_ok(body)):
        runs = adapter.list_workflow_runs("owner", "repo", "sha", cancel=threading.Event())
    assert runs == [WorkflowRun(name="CI", check_suite_id=3)]


def test_network_error_with_cancel_event_raises_provider_error(adapter: GitHubAdapter) -> None:
    cause = requests.Timeout("read timed out")
    with patch.object(adapter._session, "request", side_effect=cause):
        with pytest.raises(ProviderError) as exc_info:
            adapter.list_workflow_runs("owner", "repo", "sha", cancel=threading.Event())
    assert exc_info.value.__cause__ is cause
