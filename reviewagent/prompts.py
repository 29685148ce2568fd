"""Prompts for the PR summary step."""

from typing import Sequence

from reviewagent.models.review_schemas import FailedBatch

DEFAULT_SUMMARY_PROMPT = (
    "Create a concise, well-structured summary of all code review feedback. "
    "Focus on key patterns, important findings, and actionable recommendations "
    "as well as testing recommendations. Group similar feedback items together."
)


def environment_rule(programming_environment: str) -> str:
    if not programming_environment:
        return ""
    return f"Follow best practices for {programming_environment}."


def guidelines_rule(guidelines: str) -> str:
    return f"Follow these guidelines for crafting the summary: {guidelines}."


def snippet_rule(programming_environment: str) -> str:
    if programming_environment:
        return (
            f"Provide code snippets if applicable in {programming_environment} "
            "following the platform's best practices."
        )
    return "Provide code snippets if applicable following the platform's best practices."


def failed_batches_note(failed_batches: Sequence[FailedBatch]) -> str:
    """Tell the summarizer which files were never reviewed."""
    if not failed_batches:
        return ""
    lines = [f"Note: {len(failed_batches)} review batch(es) failed and were not reviewed:"]
    for batch in failed_batches:
        lines.append(f"- {', '.join(batch.files)} ({batch.error})")
    lines.append("Mention these files as unreviewed in the summary.")
    return "\n".join(lines)


def build_summary_prompt(
    custom_prompt: str,
    programming_environment: str,
    guidelines: str | None,
    failed_batches: Sequence[FailedBatch] = (),
) -> str:
    """
    Custom prompt + environment rule + guideline rule when a custom prompt
    is configured, otherwise the default instruction. Failed-batch notes are
    appended in both cases.
    """
    if custom_prompt:
        parts = [custom_prompt, environment_rule(programming_environment)]
        if guidelines is not None:
            parts.append(guidelines_rule(guidelines))
    else:
        parts = [DEFAULT_SUMMARY_PROMPT, snippet_rule(programming_environment)]

    prompt = " ".join(p for p in parts if p)
    note = failed_batches_note(failed_batches)
    return f"{prompt}\n\n{note}" if note else prompt
