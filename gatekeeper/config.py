"""Configuration loading from YAML and environment.

The GitHub token is taken from the config, the GITHUB_TOKEN environment
variable, or a file named by GITHUB_TOKEN_FILE (Docker secrets). Never put
real tokens in config files committed to the repo.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so secrets can be read from env/file
_current_env: dict[str, str] = {}


class GitHubConfig(BaseSettings):
    """GitHub API settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or GITHUB_TOKEN; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    request_timeout: int = Field(default=30, ge=1, description="HTTP timeout per request in seconds")


class GateConfig(BaseSettings):
    """Target repository, ref and job settings."""

    model_config = SettingsConfigDict(env_prefix="GATE_", extra="ignore")

    repository: str = Field(default="", description="Target repo e.g. octocat/hello-world")
    ref: str = Field(default="", description="Commit SHA (or branch/tag) to validate")
    self_job: str = Field(default="merge-gatekeeper", description="Name of the job running the gate")
    ignored: str = Field(default="", description="Comma-separated job names that never block the gate")
    timeout_seconds: int = Field(default=600, ge=1, description="Give up after this many seconds")
    interval_seconds: int = Field(default=5, ge=1, description="Seconds between validations")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    gate: GateConfig = Field(default_factory=GateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t.strip()
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Inside GitHub Actions, GITHUB_REPOSITORY and GITHUB_SHA fill in the
    repository and ref when neither the file nor GATE_* env sets them.
    """
    global _current_env

    _current_env = dict(os.environ)

    raw: dict[str, Any] = {}
    path = config_path or Path("gatekeeper.yaml")
    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
        raw = _substitute_env(raw)

    github = GitHubConfig(**(raw.get("github") or {}))
    gate = GateConfig(**(raw.get("gate") or {}))
    logging = LoggingConfig(**(raw.get("logging") or {}))

    if not gate.repository and _current_env.get("GITHUB_REPOSITORY"):
        gate = gate.model_copy(update={"repository": _current_env["GITHUB_REPOSITORY"]})
    if not gate.ref and _current_env.get("GITHUB_SHA"):
        gate = gate.model_copy(update={"ref": _current_env["GITHUB_SHA"]})

    return AppConfig(github=github, gate=gate, logging=logging)
