"""Run configuration for the batched PR reviewer.

Reads the GitHub Actions environment (and an optional .env file for local runs).
Build one ReviewConfig at the entry point and pass it to every component.
"""

import json
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.patterns import parse_patterns
from reviewagent.models.review_schemas import ReviewContext


class ConfigError(ValueError):
    """Configuration is missing or malformed."""


class ReviewConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
    )

    # Host
    github_token: str = Field(default="")
    github_repository: str = Field(default="")
    github_sha: str = Field(default="")
    github_base_ref: str = Field(default="")
    github_workspace: str = Field(default=".")
    github_event_path: Optional[str] = Field(default=None)
    pr_number: Optional[int] = Field(default=None)

    # File selection
    include_patterns: str = Field(default="")
    exclude_patterns: str = Field(default="")

    # Agent
    src_access_token: str = Field(default="")
    src_endpoint: str = Field(default="https://sourcegraph.com")
    agent_command: str = Field(default="cody")
    agent_model: Optional[str] = Field(default=None)
    agent_timeout: int = Field(default=600, ge=1)
    review_engine: Literal["cli", "pydantic_ai"] = Field(default="cli")
    llm_model: str = Field(default="openai:gpt-4o-mini")

    # Prompts
    programming_environment: str = Field(default="")
    custom_summary_prompt: str = Field(default="")
    guidelines_file: str = Field(default="PR-Review-Guidelines.md")

    # Pipeline
    batch_size: int = Field(default=5, ge=1)
    page_size: int = Field(default=100, ge=1, le=100)
    summary_chunk_size: int = Field(default=65000, ge=1)
    git_timeout: int = Field(default=120, ge=1)
    diff_remote: str = Field(default="origin")
    configure_git: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    @property
    def include_pattern_list(self) -> list[str]:
        return parse_patterns(self.include_patterns)

    @property
    def exclude_pattern_list(self) -> list[str]:
        return parse_patterns(self.exclude_patterns)

    @property
    def workspace(self) -> Path:
        return Path(self.github_workspace)

    @property
    def guidelines_path(self) -> Path:
        return self.workspace / self.guidelines_file


def load_config(**overrides) -> ReviewConfig:
    """Build the config from the environment, with explicit overrides taking precedence."""
    return ReviewConfig(**overrides)


def _pull_number_from_event(event_path: str) -> int:
    path = Path(event_path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read event payload {event_path}: {exc}") from exc

    number = (payload.get("pull_request") or {}).get("number") or payload.get("number")
    if number is None:
        raise ConfigError(f"Event payload {event_path} carries no pull request number")
    try:
        return int(number)
    except (TypeError, ValueError):
        raise ConfigError(f"Pull request number must be an integer, got: {number!r}")


def build_review_context(config: ReviewConfig) -> ReviewContext:
    """Derive the read-only PR coordinates for this run."""
    owner, sep, repo = config.github_repository.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise ConfigError(
            f"GITHUB_REPOSITORY must look like 'owner/repo', got: {config.github_repository!r}"
        )

    if config.pr_number is not None:
        pull_number = config.pr_number
    elif config.github_event_path:
        pull_number = _pull_number_from_event(config.github_event_path)
    else:
        raise ConfigError("No pull request number: set PR_NUMBER or GITHUB_EVENT_PATH")

    if pull_number <= 0:
        raise ConfigError(f"Invalid pull request number: {pull_number}")

    return ReviewContext(
        owner=owner,
        repo=repo,
        pull_number=pull_number,
        head_sha=config.github_sha,
        base_ref=config.github_base_ref,
    )
