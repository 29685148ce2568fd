"""Pydantic models for the batched PR review run."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ChangedFile(BaseModel):
    """One file touched by the pull request, as reported by the host."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(description="Repository-relative path of the file")
    patch: str | None = Field(default=None, description="Host-provided patch (absent for binary/large files)")


class ReviewContext(BaseModel):
    """Pull request coordinates derived once at startup."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    pull_number: int
    head_sha: str = ""
    base_ref: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class FeedbackItem(BaseModel):
    """One inline comment parsed from agent output."""

    filename: str
    line: int = Field(ge=0, description="Anchor line (first number of the line spec)")
    text: str


class FailedBatch(BaseModel):
    """A batch whose diff or review could not be produced."""

    files: list[str] = Field(default_factory=list)
    error: str


class CommentOutcome(BaseModel):
    item: FeedbackItem
    posted: bool
    error: str | None = None


class BatchOutcome(BaseModel):
    """Result of processing one batch, kept in batch order."""

    index: int
    files: list[str] = Field(default_factory=list)
    review: str | None = None
    error: str | None = None
    comments: list[CommentOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def output(self) -> str:
        # Failed batches contribute an empty placeholder so counts stay aligned
        return self.review if self.succeeded and self.review is not None else ""


class ChunkOutcome(BaseModel):
    index: int
    posted: bool
    error: str | None = None


class PostOutcome(BaseModel):
    """How the final summary reached the pull request."""

    mode: Literal["review", "comments"]
    chunks: list[ChunkOutcome] = Field(default_factory=list)

    @property
    def chunks_posted(self) -> int:
        return sum(1 for c in self.chunks if c.posted)


class ReviewRunReport(BaseModel):
    """Everything one run produced, for logging and tests."""

    files: list[ChangedFile] = Field(default_factory=list)
    batches: list[BatchOutcome] = Field(default_factory=list)
    summary: str = ""
    post: PostOutcome | None = None

    @property
    def batch_outputs(self) -> list[str]:
        return [b.output for b in self.batches]

    @property
    def failed_batches(self) -> list[FailedBatch]:
        return [
            FailedBatch(files=b.files, error=b.error)
            for b in self.batches
            if not b.succeeded
        ]

    @property
    def comments_posted(self) -> int:
        return sum(1 for b in self.batches for c in b.comments if c.posted)
