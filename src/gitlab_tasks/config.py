"""Configuration for the interactive task session.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_state_path() -> Path:
    return Path.home() / ".config" / "gitlab-tasks" / "config.json"


class TasksSettings(BaseSettings):
    """Settings for a task session.

    Environment variables:
    - GITLAB_TOKEN
    - GITLAB_HOST               (optional)
    - LOG_LEVEL                 (optional)
    - GITLAB_TASKS_LOG_FILE     (optional)
    - GITLAB_TASKS_STATE_PATH   (optional)
    - GITLAB_TIMEOUT_SECONDS    (optional)

    Notes:
        Tests can point at a specific env file via `TasksSettings(_env_file=path)`.
    """

    gitlab_token: str = Field(
        default="",
        validation_alias="GITLAB_TOKEN",
        description="Personal access token used for GitLab API authentication",
    )
    gitlab_host: str = Field(
        default="https://gitlab.com",
        validation_alias="GITLAB_HOST",
        description="GitLab instance URL (self-managed instances included)",
    )

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_file: Path | None = Field(
        default=None,
        validation_alias="GITLAB_TASKS_LOG_FILE",
        description="Write JSON logs to this file instead of stderr",
    )

    state_path: Path = Field(
        default_factory=_default_state_path,
        validation_alias="GITLAB_TASKS_STATE_PATH",
        description="File holding the last selected project, issue and iteration",
    )

    request_timeout: float | None = Field(
        default=None,
        validation_alias="GITLAB_TIMEOUT_SECONDS",
        description="HTTP timeout in seconds; unset means wait indefinitely",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_gitlab_auth(self) -> TasksSettings:
        if not self.gitlab_token.strip():
            raise ValueError("GITLAB_TOKEN is required")
        return self
