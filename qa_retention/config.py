"""Configuration loading from YAML and environment.

Environment variables win over YAML values, so the same image can run from
a CI job with only -e flags (GITHUB_TOKEN, GITHUB_OWNER, GITHUB_REPO,
RETENTION_HOURS, INACTIVITY_THRESHOLD_HOURS). Secrets (tokens) are taken from
environment variables or from files (Docker secrets). Never put real tokens
in config files committed to the repo.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from qa_retention.exceptions import ConfigError

LOG = logging.getLogger("qa_retention.config")

# Injected by load_config so validators can read env/file
_current_env: dict[str, str] = {}


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = os.environ.get(env_key)
    if value:
        return value.strip()
    file_path = os.environ.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


class BotConfig(BaseSettings):
    """Automation identity used to tell bot activity from human activity."""

    model_config = SettingsConfigDict(env_prefix="BOT_", extra="ignore")

    username: str = Field(default="github-actions[bot]", description="Login the bot posts comments as")
    aliases: list[str] = Field(
        default_factory=list,
        description="Other automation logins whose comments are not human activity (env: JSON list)",
    )

    @property
    def identities(self) -> list[str]:
        return [self.username, *self.aliases]


class GitHubConfig(BaseSettings):
    """GitHub API settings and target repository."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or Actions token; use env or secret file")
    owner: str | None = Field(default=None, description="Repository owner")
    repo: str | None = Field(default=None, description="Repository name")
    api_url: str = Field(default="https://api.github.com", description="API base URL")

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


class RetentionConfig(BaseSettings):
    """Retention policy thresholds (env names carry no prefix)."""

    model_config = SettingsConfigDict(extra="ignore")

    retention_hours: float = Field(default=48, description="Idle hours before a QA instance is warned")
    inactivity_threshold_hours: float = Field(
        default=24, description="Hours without activity after a warning before closing"
    )
    warning_label: str = Field(default="retention-warning", description="Label marking warned issues")
    title_marker: str = Field(default="QA-Instance ready", description="Title substring of QA instance issues")
    # Allow warning again in the same pass that removed a stale warning (env: REWARN_AFTER_RESCIND)
    rewarn_after_rescind: bool = Field(default=False, description="Re-warn in the pass that rescinds")


class RunnerConfig(BaseSettings):
    """Concurrency and fetch cache settings for one run."""

    model_config = SettingsConfigDict(env_prefix="RUNNER_", extra="ignore")

    max_workers: int = Field(default=4, ge=1, le=32, description="Parallel per-issue actions")
    cache_ttl_seconds: float = Field(default=300, gt=0, description="Lifetime of cached issue/comment listings")


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

    bot: BotConfig = Field(default_factory=BotConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    retention: RetentionConfig = Field(default_factory=RetentionConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
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
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def _section(cls: type[BaseSettings], raw: dict[str, Any] | None) -> Any:
    """Build a settings section from YAML values, dropping keys set in env.

    Init kwargs outrank env in pydantic-settings; removing them lets the
    environment override the file.
    """
    prefix = (cls.model_config.get("env_prefix") or "").upper()
    env_keys = {k.upper() for k in _current_env}
    values = {k: v for k, v in (raw or {}).items() if f"{prefix}{k}".upper() not in env_keys}
    return cls(**values)


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Missing file means defaults + env only. Secrets: GITHUB_TOKEN or
    GITHUB_TOKEN_FILE.
    """
    global _current_env
    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    raw = _substitute_env(raw)

    return AppConfig(
        bot=_section(BotConfig, raw.get("bot")),
        github=_section(GitHubConfig, raw.get("github")),
        retention=_section(RetentionConfig, raw.get("retention")),
        runner=_section(RunnerConfig, raw.get("runner")),
        logging=_section(LoggingConfig, raw.get("logging")),
    )


def _unset(value: str | None) -> bool:
    """Empty, or a ${VAR} placeholder left unresolved by load_config."""
    return not value or not value.strip() or value.startswith("$")


def validate_config(config: AppConfig) -> None:
    """Fail fast on missing or inconsistent settings.

    Raises:
        ConfigError: Describing the first problem found.
    """
    if not config.github_token_resolved:
        raise ConfigError("Missing required setting: GITHUB_TOKEN (or GITHUB_TOKEN_FILE)")
    if _unset(config.github.owner):
        raise ConfigError("Missing required setting: GITHUB_OWNER")
    if _unset(config.github.repo):
        raise ConfigError("Missing required setting: GITHUB_REPO")
    if not config.bot.username.strip():
        raise ConfigError("BOT_USERNAME must not be empty")

    retention = config.retention
    if retention.retention_hours <= 0:
        raise ConfigError("RETENTION_HOURS must be > 0")
    if retention.inactivity_threshold_hours <= 0:
        raise ConfigError("INACTIVITY_THRESHOLD_HOURS must be > 0")
    if retention.inactivity_threshold_hours >= retention.retention_hours:
        raise ConfigError("INACTIVITY_THRESHOLD_HOURS must be < RETENTION_HOURS")
    if not retention.warning_label.strip():
        raise ConfigError("WARNING_LABEL must not be empty")

    LOG.info(
        "Config OK | repo=%s | retention_hours=%s | inactivity_threshold_hours=%s",
        config.github.repository,
        retention.retention_hours,
        retention.inactivity_threshold_hours,
    )
