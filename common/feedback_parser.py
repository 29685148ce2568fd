"""Extract inline feedback items from free-form agent output.

The agent is asked to emit one line per finding, shaped exactly as::

    File: <path>, Line(s): <line spec>, Feedback: <text>

Anything else (preamble, prose, markdown) is not feedback and is skipped.
"""

import logging
import re
from typing import Iterable, List, Optional, Union

from reviewagent.models.review_schemas import FeedbackItem

logger = logging.getLogger(__name__)

FEEDBACK_LINE_RE = re.compile(r"^File: ([^,]+), Line\(s\): ([^,]+), Feedback: (.+)$")
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


def parse_line_spec(spec: str) -> Optional[int]:
    """
    Return the anchor line for a line spec.

    Only the leading integer is used, so "10-12" anchors at 10 and
    "7, 9" never reaches here (the comma ends the field). Returns None
    when the spec does not start with a number.
    """
    match = _LEADING_INT_RE.match(spec)
    if not match:
        return None
    return int(match.group(1))


def parse_feedback_line(line: str) -> Optional[FeedbackItem]:
    """Parse one line; None when it is not a feedback line."""
    match = FEEDBACK_LINE_RE.match(line)
    if not match:
        return None

    filename, line_spec, text = match.groups()
    line_number = parse_line_spec(line_spec)
    if line_number is None:
        logger.warning(f"Skipping feedback with unusable line spec {line_spec!r}: {line}")
        return None

    return FeedbackItem(filename=filename, line=line_number, text=text)


def parse_feedback(text: str) -> List[FeedbackItem]:
    """
    All feedback items in one blob, in line-appearance order.

    Lines break on LF (with an optional CR before it) only; form feeds and
    Unicode separators inside feedback text stay part of that line.
    """
    items: List[FeedbackItem] = []
    for line in str(text).split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        item = parse_feedback_line(line)
        if item is not None:
            items.append(item)
    return items


def normalize_feedback(feedback: Union[str, Iterable[str]]) -> List[str]:
    """Accept a single blob or a sequence of blobs."""
    if isinstance(feedback, str):
        return [feedback]
    return [str(blob) for blob in feedback]
