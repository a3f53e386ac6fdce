"""Source-control host adapters (base and implementations)."""

from gatekeeper.adapters.base import ChecksProvider
from gatekeeper.adapters.github import GitHubAdapter

__all__ = ["ChecksProvider", "GitHubAdapter"]
