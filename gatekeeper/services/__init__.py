"""Correlation, classification and aggregation of CI job results."""

from gatekeeper.services.aggregator import aggregate
from gatekeeper.services.classifier import classify
from gatekeeper.services.correlator import correlate, create_check_key, map_suites_to_workflows
from gatekeeper.services.validator import (
    MAX_CHECK_RUNS_PER_PAGE,
    StatusValidator,
    ValidatorOptions,
    create_validator,
    parse_ignored_jobs,
    split_repository,
)

__all__ = [
    "MAX_CHECK_RUNS_PER_PAGE",
    "StatusValidator",
    "ValidatorOptions",
    "aggregate",
    "classify",
    "correlate",
    "create_check_key",
    "create_validator",
    "map_suites_to_workflows",
    "parse_ignored_jobs",
    "split_repository",
]
