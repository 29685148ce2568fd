"""Posts the final summary as one PR review, or as chunked comments when that fails."""

import logging
from typing import List

from reviewagent.models.review_schemas import ChunkOutcome, PostOutcome

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 65000


def chunk_summary(summary: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[str]:
    """
    Split ``summary`` into pieces of at most ``chunk_size`` characters.

    Joining the chunks gives back the original text; "" yields no chunks.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got: {chunk_size}")
    return [summary[i:i + chunk_size] for i in range(0, len(summary), chunk_size)]


class ReviewPoster:
    def __init__(self, host, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.host = host
        self.chunk_size = chunk_size

    def post_final_review(self, summary: str) -> PostOutcome:
        try:
            self.host.create_review(summary, event="COMMENT")
            logger.info("Successfully posted final review summary")
            return PostOutcome(mode="review")
        except Exception as exc:
            logger.warning(f"Error posting final review: {exc}")

        chunks = chunk_summary(summary, self.chunk_size)
        logger.info(f"Posting summary as {len(chunks)} comment(s)")

        outcomes: list[ChunkOutcome] = []
        for index, chunk in enumerate(chunks):
            try:
                self.host.create_issue_comment(chunk)
                logger.info(f"Posted review chunk {index + 1}/{len(chunks)} as comment")
                outcomes.append(ChunkOutcome(index=index, posted=True))
            except Exception as exc:
                logger.warning(f"Failed to post review chunk {index + 1}/{len(chunks)}: {exc}")
                outcomes.append(ChunkOutcome(index=index, posted=False, error=str(exc)))

        return PostOutcome(mode="comments", chunks=outcomes)
