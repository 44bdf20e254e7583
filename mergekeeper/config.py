"""Configuration loading from YAML and environment.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo.
"""

from pathlib import Path
from typing import Any, List, Literal

import yaml
from pydantic import Field, field_validator
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


# Injected by load_config so validators can read env/file
_current_env: dict[str, str] = {}

Strategy = Literal["merge", "squash", "rebase"]
LabelStrategy = Literal["all", "atLeastOne"]


class GitHubConfig(BaseSettings):
    """GitHub API settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or workflow token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")


class MergeConfig(BaseSettings):
    """What to merge and when.

    Immutable once built. Retry timing has no defaults: a config without
    interval_seconds or timeout_seconds does not validate.
    """

    model_config = SettingsConfigDict(env_prefix="MERGE_", extra="ignore", frozen=True)

    owner: str = Field(description="Repository owner (user or organization)")
    repo: str = Field(description="Repository name without owner")
    pull_request_number: int = Field(ge=1, description="Pull request to merge")
    sha: str = Field(description="Head commit whose check runs gate the merge")
    title: str = Field(default="", description="Substring the PR title must contain")
    strategy: Strategy = Field(default="squash", description="merge, squash or rebase")
    # Merge calls always squash unless this is set
    honor_strategy: bool = Field(default=False, description="Use strategy for the merge call")
    comment: str = Field(default="", description="Comment posted before merging; empty to skip")
    dry_run: bool = Field(default=False, description="Run gates and comment but skip the merge call")
    check_status: bool = Field(default=True, description="Require all other check runs to succeed")
    fail_step: bool = Field(default=True, description="Fail the invocation on timeout or errors")
    ignore_labels: List[str] = Field(default_factory=list, description="Labels that block the merge")
    ignore_labels_strategy: LabelStrategy = Field(
        default="all", description="all: every label must be present to block; atLeastOne: any label blocks"
    )
    interval_seconds: float = Field(ge=0, description="Seconds between attempts")
    timeout_seconds: float = Field(ge=0, description="Total seconds to keep retrying")

    @field_validator("ignore_labels", mode="before")
    @classmethod
    def _split_labels(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @property
    def full_name(self) -> str:
        """owner/repo as used in API paths."""
        return f"{self.owner}/{self.repo}"


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
    merge: MergeConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        # Simple $VAR
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

    Without a config file every section is read from env alone
    (MERGE_*, GITHUB_*, LOGGING_*). Secrets: GITHUB_TOKEN or
    GITHUB_TOKEN_FILE.

    Raises:
        pydantic.ValidationError: required merge settings are missing or invalid.
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    raw: dict[str, Any] = {}
    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
        raw = _substitute_env(raw)

    github = GitHubConfig(**(raw.get("github") or {}))
    merge = MergeConfig(**(raw.get("merge") or {}))
    logging = LoggingConfig(**(raw.get("logging") or {}))

    return AppConfig(github=github, merge=merge, logging=logging)
