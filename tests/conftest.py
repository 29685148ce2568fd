"""Shared fakes for the review pipeline tests."""

from pathlib import Path

import pytest

from reviewagent.config import ReviewConfig
from reviewagent.models.review_schemas import ChangedFile, ReviewContext


class FakeHost:
    """In-memory stand-in for GitHubService."""

    def __init__(self, pages=None, head_sha="abc1234def"):
        self.pages = pages or []
        self.head_sha = head_sha
        self.page_requests = []
        self.head_requests = 0
        self.review_comments = []
        self.reviews = []
        self.issue_comments = []
        self.fail_review = False
        self.fail_comment_paths = set()
        self.fail_issue_comment_at = set()
        self.issue_comment_attempts = 0

    def list_files_page(self, page):
        self.page_requests.append(page)
        if page - 1 < len(self.pages):
            return list(self.pages[page - 1])
        return []

    def get_head_commit(self):
        self.head_requests += 1
        return self.head_sha

    def create_review_comment(self, body, path, line, commit):
        if path in self.fail_comment_paths:
            raise RuntimeError(f"Validation Failed for {path}")
        self.review_comments.append({"body": body, "path": path, "line": line, "commit": commit})

    def create_review(self, body, event="COMMENT"):
        if self.fail_review:
            raise RuntimeError("review body too long")
        self.reviews.append({"body": body, "event": event})

    def create_issue_comment(self, body):
        attempt = self.issue_comment_attempts
        self.issue_comment_attempts += 1
        if attempt in self.fail_issue_comment_at:
            raise RuntimeError(f"comment {attempt} rejected")
        self.issue_comments.append(body)


class FakeEngine:
    """Records calls; replies from a list, a callable, or raises."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    def complete(self, instruction, input_text):
        self.calls.append((instruction, input_text))
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(instruction, input_text)
        return reply


def make_files(*names):
    return [ChangedFile(filename=n, patch="@@ -1 +1 @@") for n in names]


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "PR-Review-Guidelines.md").write_text("Review carefully.", encoding="utf-8")
    return tmp_path


@pytest.fixture
def config(workspace: Path) -> ReviewConfig:
    return ReviewConfig(
        _env_file=None,
        github_repository="acme/widgets",
        github_workspace=str(workspace),
        github_base_ref="main",
        pr_number=7,
    )


@pytest.fixture
def context() -> ReviewContext:
    return ReviewContext(owner="acme", repo="widgets", pull_number=7, head_sha="abc", base_ref="main")
