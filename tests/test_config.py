"""Tests for reviewagent.config module."""

import json

import pytest
from pydantic import ValidationError

from reviewagent.config import ConfigError, ReviewConfig, build_review_context

ENV_KEYS = [
    "GITHUB_REPOSITORY", "GITHUB_SHA", "GITHUB_BASE_REF", "GITHUB_WORKSPACE",
    "GITHUB_EVENT_PATH", "PR_NUMBER", "INCLUDE_PATTERNS", "EXCLUDE_PATTERNS",
    "SRC_ACCESS_TOKEN", "SRC_ENDPOINT", "PROGRAMMING_ENVIRONMENT",
    "CUSTOM_SUMMARY_PROMPT", "BATCH_SIZE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestReviewConfig:
    def test_reads_environment(self, clean_env):
        clean_env.setenv("GITHUB_REPOSITORY", "acme/widgets")
        clean_env.setenv("GITHUB_BASE_REF", "develop")
        clean_env.setenv("INCLUDE_PATTERNS", " src/ , .py ")
        clean_env.setenv("EXCLUDE_PATTERNS", "")
        clean_env.setenv("SRC_ACCESS_TOKEN", "sgp_123")
        clean_env.setenv("PROGRAMMING_ENVIRONMENT", "Python 3.12")

        config = ReviewConfig(_env_file=None)

        assert config.github_repository == "acme/widgets"
        assert config.github_base_ref == "develop"
        assert config.include_pattern_list == ["src/", ".py"]
        assert config.exclude_pattern_list == []
        assert config.src_access_token == "sgp_123"
        assert config.programming_environment == "Python 3.12"

    def test_defaults(self, clean_env):
        config = ReviewConfig(_env_file=None)
        assert config.batch_size == 5
        assert config.page_size == 100
        assert config.summary_chunk_size == 65000
        assert config.src_endpoint == "https://sourcegraph.com"
        assert config.agent_command == "cody"
        assert config.review_engine == "cli"

    def test_guidelines_path(self, clean_env, tmp_path):
        config = ReviewConfig(_env_file=None, github_workspace=str(tmp_path))
        assert config.guidelines_path == tmp_path / "PR-Review-Guidelines.md"

    def test_rejects_zero_batch_size(self, clean_env):
        clean_env.setenv("BATCH_SIZE", "0")
        with pytest.raises(ValidationError):
            ReviewConfig(_env_file=None)


class TestBuildReviewContext:
    def test_from_explicit_number(self, clean_env):
        config = ReviewConfig(
            _env_file=None,
            github_repository="acme/widgets",
            github_sha="deadbeef",
            github_base_ref="main",
            pr_number=12,
        )
        context = build_review_context(config)
        assert (context.owner, context.repo, context.pull_number) == ("acme", "widgets", 12)
        assert context.head_sha == "deadbeef"
        assert context.base_ref == "main"
        assert context.full_name == "acme/widgets"

    def test_from_event_payload(self, clean_env, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"pull_request": {"number": 31}}))
        config = ReviewConfig(
            _env_file=None, github_repository="acme/widgets", github_event_path=str(event)
        )
        assert build_review_context(config).pull_number == 31

    def test_event_payload_top_level_number(self, clean_env, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"number": 4}))
        config = ReviewConfig(
            _env_file=None, github_repository="acme/widgets", github_event_path=str(event)
        )
        assert build_review_context(config).pull_number == 4

    def test_event_without_pr(self, clean_env, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"ref": "refs/heads/main"}))
        config = ReviewConfig(
            _env_file=None, github_repository="acme/widgets", github_event_path=str(event)
        )
        with pytest.raises(ConfigError):
            build_review_context(config)

    @pytest.mark.parametrize("repository", ["", "acme", "acme/", "/widgets", "a/b/c"])
    def test_bad_repository(self, clean_env, repository):
        config = ReviewConfig(_env_file=None, github_repository=repository, pr_number=1)
        with pytest.raises(ConfigError):
            build_review_context(config)

    def test_no_pr_number(self, clean_env):
        config = ReviewConfig(_env_file=None, github_repository="acme/widgets")
        with pytest.raises(ConfigError):
            build_review_context(config)
