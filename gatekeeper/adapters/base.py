"""Abstract base class for check and workflow providers."""

import threading
from abc import ABC, abstractmethod
from typing import List

from gatekeeper.models import CheckRunsPage, WorkflowRun


class ChecksProvider(ABC):
    """Read-only view of a host's check-run and workflow-run APIs."""

    @abstractmethod
    def list_check_runs_for_ref(
        self,
        owner: str,
        repo: str,
        ref: str,
        page: int,
        per_page: int,
        cancel: threading.Event | None = None,
    ) -> CheckRunsPage:
        """Fetch one page of check runs for a commit reference.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Commit SHA, branch or tag
            page: 1-based page number
            per_page: Page size
            cancel: When set, the in-flight request is abandoned

        Returns:
            CheckRunsPage with the runs (most recent first) and the total count

        Raises:
            ProviderError: If the API call fails
            ValidationCancelled: If cancel is set before the response arrives
        """
        pass

    @abstractmethod
    def list_workflow_runs(
        self,
        owner: str,
        repo: str,
        ref: str,
        cancel: threading.Event | None = None,
    ) -> List[WorkflowRun]:
        """List workflow runs triggered for the given head SHA.

        Raises:
            ProviderError: If the API call fails
            MalformedResponseError: If a workflow run has no usable check suite ID
            ValidationCancelled: If cancel is set before the response arrives
        """
        pass
