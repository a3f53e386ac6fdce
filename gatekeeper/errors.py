"""Error taxonomy for the gatekeeper.

Every error raised on purpose derives from GatekeeperError, so callers can
tell a red gate (GateFailure) from a broken setup (ConfigurationError) or a
misbehaving provider (ProviderError, MalformedResponseError).
"""

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from gatekeeper.models import Status


class GatekeeperError(Exception):
    """Base class for all gatekeeper errors."""

    pass


class ConfigurationError(GatekeeperError):
    """Raised when the validator is built with missing or empty fields.

    All problems are collected before raising, never only the first one.
    """

    def __init__(self, missing: List[str]) -> None:
        self.missing = list(missing)
        super().__init__("; ".join(self.missing))


class ProviderError(GatekeeperError):
    """Raised when a call to the source-control host fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(GatekeeperError):
    """Raised when a check run cannot be attributed to a job or a workflow."""

    def __init__(
        self,
        message: str,
        job: str | None = None,
        check_suite_id: int | None = None,
    ) -> None:
        self.job = job
        self.check_suite_id = check_suite_id
        super().__init__(message)


class GateFailure(GatekeeperError):
    """Raised when at least one job has failed.

    The message is the status detail report.
    """

    def __init__(self, status: "Status") -> None:
        self.status = status
        super().__init__(status.detail())

    @property
    def error_jobs(self) -> List[str]:
        return list(self.status.error_jobs)


class ValidationCancelled(GatekeeperError):
    """Raised when validation is cancelled before it could finish."""

    pass


class ValidationTimeout(GatekeeperError):
    """Raised by the poll loop when jobs are still pending at the deadline."""

    def __init__(self, timeout_seconds: float, status: "Status | None" = None) -> None:
        self.timeout_seconds = timeout_seconds
        self.status = status
        message = f"validation timed out after {timeout_seconds:g}s"
        if status is not None:
            message = f"{message}\n{status.detail()}"
        super().__init__(message)
