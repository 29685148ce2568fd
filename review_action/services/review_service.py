"""
PR Review Service
=================
Orchestrates the batched review of one pull request:
  1. Page through the PR's changed files, filtering each page as it arrives
  2. Split the kept files into fixed-size batches
  3. Per batch: git diff -> agent review -> inline comments
  4. Fold all batch reviews into one summary
  5. Post the summary as a review (chunked comments if that fails)

A failing batch, comment or chunk is recorded and skipped; only discovery
and configuration failures stop the run.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

from common.batching import make_batches
from common.feedback_parser import normalize_feedback, parse_feedback
from common.git_client import GitDiffProvider
from common.patterns import PatternMatcher
from review_action.services.review_poster import ReviewPoster
from review_action.services.summary_service import SummaryAggregator
from reviewagent.agent.engine import TextCompletionEngine
from reviewagent.agent.review_engine import ReviewEngine
from reviewagent.config import ReviewConfig
from reviewagent.models.review_schemas import (
    BatchOutcome,
    ChangedFile,
    CommentOutcome,
    ReviewContext,
    ReviewRunReport,
)

logger = logging.getLogger(__name__)


# ==========================================================================
# File discovery
# ==========================================================================

def list_changed_files(host, matcher: PatternMatcher) -> List[ChangedFile]:
    """
    Collect the PR's reviewable files.

    Pages are requested until one comes back empty; no total count is
    assumed. Each page is filtered before it is added. Host errors propagate.
    """
    kept: List[ChangedFile] = []
    page = 1
    while True:
        files = host.list_files_page(page)
        if not files:
            break
        selected = matcher.filter_files(files)
        logger.info(f"Page {page}: {len(files)} file(s), {len(selected)} kept")
        kept.extend(selected)
        page += 1
    return kept


# ==========================================================================
# Batch processing
# ==========================================================================

def process_batch(
    batch: Sequence[ChangedFile],
    base_ref: str,
    diff_provider: GitDiffProvider,
    review_engine: ReviewEngine,
) -> str:
    """Diff and review one batch as a unit. Any failure propagates to the caller."""
    diff_text = diff_provider.diff_for([f.filename for f in batch], base_ref)
    return review_engine.review(diff_text)


def post_inline_comments(host, feedback: Union[str, Iterable[str]]) -> List[CommentOutcome]:
    """
    Post one inline comment per feedback line in ``feedback``.

    The PR head is fetched once per call. Every comment is attempted on its
    own; failures are logged and recorded, never raised.
    """
    items = [item for blob in normalize_feedback(feedback) for item in parse_feedback(blob)]
    if not items:
        logger.info("No inline feedback lines found")
        return []

    try:
        commit = host.get_head_commit()
    except Exception as exc:
        logger.warning(f"Could not resolve PR head, skipping {len(items)} inline comment(s): {exc}")
        return [CommentOutcome(item=item, posted=False, error=str(exc)) for item in items]

    outcomes: List[CommentOutcome] = []
    for item in items:
        try:
            host.create_review_comment(item.text, item.filename, item.line, commit)
            logger.info(f"Successfully created comment for {item.filename} at line {item.line}")
            outcomes.append(CommentOutcome(item=item, posted=True))
        except Exception as exc:
            logger.warning(
                f"Skipping comment for {item.filename}:{item.line} due to error: {exc}"
            )
            outcomes.append(CommentOutcome(item=item, posted=False, error=str(exc)))
    return outcomes


def review_batches(
    batches: Sequence[Sequence[ChangedFile]],
    context: ReviewContext,
    host,
    diff_provider: GitDiffProvider,
    review_engine: ReviewEngine,
) -> List[BatchOutcome]:
    """One outcome per batch, in order, whatever happens to each batch."""
    outcomes: List[BatchOutcome] = []

    for index, batch in enumerate(batches):
        filenames = [f.filename for f in batch]
        logger.info(f"Starting batch {index + 1}/{len(batches)} with files: {', '.join(filenames)}")

        try:
            review = process_batch(batch, context.base_ref, diff_provider, review_engine)
        except Exception as exc:
            logger.warning(f"Error processing batch {index + 1}: {exc}")
            outcomes.append(BatchOutcome(index=index, files=filenames, error=str(exc)))
            continue

        logger.info(f"Received review feedback for batch {index + 1}")
        comments = post_inline_comments(host, review)
        posted = sum(1 for c in comments if c.posted)
        logger.info(f"Created {posted}/{len(comments)} inline comment(s) for batch {index + 1}")

        outcomes.append(
            BatchOutcome(index=index, files=filenames, review=review, comments=comments)
        )
        logger.info(f"Finished processing batch with {len(batch)} files")

    return outcomes


# ==========================================================================
# Main pipeline
# ==========================================================================

def execute_pr_review(
    config: ReviewConfig,
    context: ReviewContext,
    host,
    engine: TextCompletionEngine,
    diff_provider: Optional[GitDiffProvider] = None,
) -> ReviewRunReport:
    """Run the whole review for ``context`` and return what happened."""
    logger.info(f"Starting PR review for {context.full_name}#{context.pull_number}")

    if diff_provider is None:
        diff_provider = GitDiffProvider(
            config.workspace, remote=config.diff_remote, timeout=config.git_timeout
        )
    review_engine = ReviewEngine(engine, config.guidelines_path)
    matcher = PatternMatcher(
        include=config.include_pattern_list, exclude=config.exclude_pattern_list
    )

    # ── Step 1: Discover files ────────────────────────────────────────
    logger.info("Fetching changed files...")
    files = list_changed_files(host, matcher)
    logger.info(f"Found {len(files)} files to review")
    for f in files:
        logger.info(f"  {f.filename}")

    # ── Step 2: Batch ─────────────────────────────────────────────────
    batches = make_batches(files, config.batch_size)
    logger.info(f"Created {len(batches)} review batches with batch size: {config.batch_size}")

    # ── Step 3: Review each batch ─────────────────────────────────────
    report = ReviewRunReport(files=files)
    report.batches = review_batches(batches, context, host, diff_provider, review_engine)

    # ── Step 4: Summarize ─────────────────────────────────────────────
    logger.info("Generating review summary...")
    aggregator = SummaryAggregator(engine, config)
    report.summary = aggregator.generate_summary(report.batch_outputs, report.failed_batches)
    logger.info("Generated summary successfully")

    # ── Step 5: Post ──────────────────────────────────────────────────
    logger.info("Posting final review...")
    poster = ReviewPoster(host, chunk_size=config.summary_chunk_size)
    report.post = poster.post_final_review(report.summary)
    logger.info(f"Review posted to PR #{context.pull_number} as {report.post.mode}")

    failed = len(report.failed_batches)
    if failed:
        logger.info(f"Note: {failed} batches failed but the review run continued")
    return report
