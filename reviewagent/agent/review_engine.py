"""Per-batch review generation: guideline document as instruction, diff as input."""

import logging
from pathlib import Path

from reviewagent.agent.engine import TextCompletionEngine

logger = logging.getLogger(__name__)

NO_FEEDBACK_SENTINEL = "No review feedback generated"


class GuidelinesError(Exception):
    """The guideline document could not be loaded."""


def load_guidelines(path: Path) -> str:
    """Read the guideline document. There is no fallback text."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise GuidelinesError(f"Cannot read guidelines at {path}: {exc}") from exc


class ReviewEngine:
    def __init__(self, engine: TextCompletionEngine, guidelines_path: Path):
        self.engine = engine
        self.guidelines_path = Path(guidelines_path)

    def review(self, diff_text: str) -> str:
        """
        Review one diff.

        Returns the agent output, or NO_FEEDBACK_SENTINEL when the agent
        produced nothing. Errors (guidelines, agent) propagate.
        """
        guidelines = load_guidelines(self.guidelines_path)
        logger.info(f"Starting review with guidelines from: {self.guidelines_path}")
        logger.info(f"Diff string length: {len(diff_text)}")

        output = self.engine.complete(guidelines, diff_text)

        logger.info("Review generation completed")
        if not output.strip():
            return NO_FEEDBACK_SENTINEL
        return output
