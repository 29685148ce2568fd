"""GitHubService - pull request API calls for the review run, using PyGithub."""

import logging
from typing import Optional

from github import Auth, Github
from github.Commit import Commit
from github.PaginatedList import PaginatedList
from github.PullRequest import PullRequest
from github.PullRequestComment import PullRequestComment

from reviewagent.models.review_schemas import ChangedFile, ReviewContext

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class GitHubService:
    """
    Handles the host calls of one review run, scoped to a single PR.

    Only the methods below are used by the pipeline, so tests can swap in
    any object with the same surface.
    """

    def __init__(
        self,
        token: str,
        context: ReviewContext,
        page_size: int = MAX_PAGE_SIZE,
        client: Optional[Github] = None,
    ):
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got: {page_size}")
        self.context = context
        self.page_size = page_size
        self._github = client or Github(auth=Auth.Token(token), per_page=page_size)
        self._repo = None
        self._pull: Optional[PullRequest] = None
        self._files: Optional[PaginatedList] = None

    @property
    def repository(self):
        if self._repo is None:
            self._repo = self._github.get_repo(self.context.full_name)
        return self._repo

    def _fetch_pull(self) -> PullRequest:
        self._pull = self.repository.get_pull(self.context.pull_number)
        return self._pull

    @property
    def pull(self) -> PullRequest:
        return self._pull or self._fetch_pull()

    def list_files_page(self, page: int) -> list[ChangedFile]:
        """
        One page (1-based) of the PR's changed files.

        An empty list means there are no more pages.
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got: {page}")
        if self._files is None:
            self._files = self.pull.get_files()
        # PaginatedList pages are 0-based
        return [
            ChangedFile(filename=f.filename, patch=f.patch)
            for f in self._files.get_page(page - 1)
        ]

    def get_head_commit(self) -> Commit:
        """Re-read the PR so comments anchor to its current head, not a cached one."""
        sha = self._fetch_pull().head.sha
        logger.info(f"PR #{self.context.pull_number} head is {sha[:7]}")
        return self.repository.get_commit(sha)

    def create_review_comment(self, body: str, path: str, line: int, commit: Commit) -> PullRequestComment:
        return self.pull.create_review_comment(body, commit, path, line=line)

    def create_review(self, body: str, event: str = "COMMENT"):
        return self.pull.create_review(body=body, event=event)

    def create_issue_comment(self, body: str):
        return self.pull.create_issue_comment(body)
