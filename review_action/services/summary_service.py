"""
Summary Service
===============
Folds every batch review into one PR-level summary via the agent, with a
plain-text fallback that needs no further external calls.
"""

import logging
from typing import Sequence

from reviewagent.agent.engine import TextCompletionEngine
from reviewagent.agent.review_engine import load_guidelines
from reviewagent.config import ReviewConfig
from reviewagent.models.review_schemas import FailedBatch
from reviewagent.prompts import build_summary_prompt, failed_batches_note

logger = logging.getLogger(__name__)

FALLBACK_HEADER = "Code Review Summary:"
FALLBACK_NOTICE = (
    "Note: This is a simplified summary due to an error in the summary generation process."
)


def fallback_summary(
    batch_outputs: Sequence[str],
    failed_batches: Sequence[FailedBatch] = (),
) -> str:
    """Every batch output verbatim, framed by a visible notice. Never raises."""
    parts = [FALLBACK_HEADER, "\n\n".join(batch_outputs)]
    note = failed_batches_note(failed_batches)
    if note:
        parts.append(note)
    parts.append(FALLBACK_NOTICE)
    return "\n\n".join(parts)


class SummaryAggregator:
    def __init__(self, engine: TextCompletionEngine, config: ReviewConfig):
        self.engine = engine
        self.config = config

    def build_prompt(self, failed_batches: Sequence[FailedBatch] = ()) -> str:
        """
        The guideline document is only part of the custom prompt, so it is
        only loaded (and only required) when one is configured.
        """
        guidelines = None
        if self.config.custom_summary_prompt:
            guidelines = load_guidelines(self.config.guidelines_path)
        return build_summary_prompt(
            self.config.custom_summary_prompt,
            self.config.programming_environment,
            guidelines,
            failed_batches,
        )

    def generate_summary(
        self,
        batch_outputs: Sequence[str],
        failed_batches: Sequence[FailedBatch] = (),
    ) -> str:
        logger.info(f"Programming environment: {self.config.programming_environment or '-'}")
        logger.info(f"Custom prompt: {'yes' if self.config.custom_summary_prompt else 'no'}")

        prompt = self.build_prompt(failed_batches)

        try:
            summary = self.engine.complete(prompt, "\n".join(batch_outputs))
        except Exception as exc:
            logger.warning(f"Error generating summary: {exc}")
            return fallback_summary(batch_outputs, failed_batches)

        if not summary.strip():
            logger.warning("Summary agent returned no output, using fallback summary")
            return fallback_summary(batch_outputs, failed_batches)
        return summary
