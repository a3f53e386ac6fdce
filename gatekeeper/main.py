"""Merge gatekeeper entry point.

Usage: gatekeeper validate [--ref SHA] [--self JOB] [--ignored a,b] ...
Exit codes: 0 all jobs passed, 1 a job failed or timed out, 2 bad
configuration, 3 provider or response error.
"""

import argparse
import sys
from pathlib import Path

from gatekeeper.adapters.github import GitHubAdapter
from gatekeeper.config import AppConfig, load_config
from gatekeeper.errors import (
    ConfigurationError,
    GateFailure,
    MalformedResponseError,
    ProviderError,
    ValidationCancelled,
    ValidationTimeout,
)
from gatekeeper.logging import GatekeeperLogging
from gatekeeper.poller import run_validation_loop
from gatekeeper.services.validator import (
    StatusValidator,
    ValidatorOptions,
    create_validator,
    parse_ignored_jobs,
    split_repository,
)

EXIT_OK = 0
EXIT_GATE_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_PROVIDER_ERROR = 3


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments; flags left unset fall back to config and env."""
    parser = argparse.ArgumentParser(
        prog="gatekeeper",
        description="Merge gatekeeper - wait until every CI job for a ref has passed",
    )
    sub = parser.add_subparsers(dest="command")
    sub.required = True
    validate = sub.add_parser("validate", help="Validate check runs for a ref")
    validate.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("gatekeeper.yaml"),
        help="Path to YAML config file",
    )
    validate.add_argument("--token", help="GitHub token (default: GITHUB_TOKEN)")
    validate.add_argument("--repository", help="Repository as owner/repo (default: GITHUB_REPOSITORY)")
    validate.add_argument("--ref", help="Commit SHA to validate (default: GITHUB_SHA)")
    validate.add_argument("--self", dest="self_job", help="Name of the job running the gate")
    validate.add_argument("--ignored", help="Comma-separated job names to ignore")
    validate.add_argument("--timeout", type=int, help="Seconds to wait before giving up")
    validate.add_argument("--interval", type=int, help="Seconds between validations")
    validate.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    return parser.parse_args(argv)


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return config with CLI flags applied on top of file and env values."""
    github_update = {}
    if args.token:
        github_update["token"] = args.token
    gate_update = {}
    for key, value in (
        ("repository", args.repository),
        ("ref", args.ref),
        ("self_job", args.self_job),
        ("ignored", args.ignored),
        ("timeout_seconds", args.timeout),
        ("interval_seconds", args.interval),
    ):
        if value is not None:
            gate_update[key] = value
    return config.model_copy(
        update={
            "github": config.github.model_copy(update=github_update),
            "gate": config.gate.model_copy(update=gate_update),
        }
    )


def build_validator(config: AppConfig) -> StatusValidator:
    """Create the GitHub client and validator from config.

    Raises:
        ConfigurationError: If any required field is missing
    """
    owner, repo = split_repository(config.gate.repository)
    token = config.github_token_resolved
    client = GitHubAdapter(token, api_url=config.github.api_url, timeout=config.github.request_timeout) if token else None
    options = ValidatorOptions(
        owner=owner,
        repo=repo,
        ref=config.gate.ref,
        self_job_name=config.gate.self_job,
        ignored_jobs=tuple(parse_ignored_jobs(config.gate.ignored)),
    )
    return create_validator(client, options)


def main(argv: list[str] | None = None) -> int:
    """Entry point: run the validation loop and map the outcome to an exit code."""
    args = parse_args(argv)
    config = apply_overrides(load_config(args.config), args)
    log = GatekeeperLogging(config.logging).setup()

    try:
        validator = build_validator(config)
    except ConfigurationError as e:
        log.error("Invalid configuration: %s", e)
        return EXIT_CONFIG_ERROR

    if args.check:
        print("Config OK:", config.gate.repository, config.gate.ref)
        return EXIT_OK

    try:
        run_validation_loop(
            validator,
            timeout_seconds=config.gate.timeout_seconds,
            interval_seconds=config.gate.interval_seconds,
            log=log,
        )
    except GateFailure as e:
        log.error("Merge gate failed:\n%s", e)
        return EXIT_GATE_FAILED
    except ValidationTimeout as e:
        log.error("%s", e)
        return EXIT_GATE_FAILED
    except (ProviderError, MalformedResponseError) as e:
        log.error("Validation error: %s", e)
        return EXIT_PROVIDER_ERROR
    except (KeyboardInterrupt, ValidationCancelled):
        return EXIT_GATE_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
