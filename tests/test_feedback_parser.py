"""Tests for common.feedback_parser module."""

import pytest

from common.feedback_parser import (
    normalize_feedback,
    parse_feedback,
    parse_feedback_line,
    parse_line_spec,
)
from reviewagent.models.review_schemas import FeedbackItem


class TestParseFeedbackLine:
    def test_well_formed_line(self):
        item = parse_feedback_line("File: a.js, Line(s): 5, Feedback: fix this")
        assert item == FeedbackItem(filename="a.js", line=5, text="fix this")

    def test_prose_is_skipped(self):
        assert parse_feedback_line("This is not in the expected format") is None

    def test_leading_text_is_not_feedback(self):
        assert parse_feedback_line("- File: a.js, Line(s): 5, Feedback: x") is None

    def test_feedback_text_may_contain_commas(self):
        item = parse_feedback_line("File: src/x.py, Line(s): 12, Feedback: rename a, b and c")
        assert item.text == "rename a, b and c"

    def test_range_anchors_at_first_line(self):
        item = parse_feedback_line("File: a.js, Line(s): 10-12, Feedback: dup")
        assert item.line == 10

    def test_non_numeric_line_spec_skipped(self):
        assert parse_feedback_line("File: a.js, Line(s): N/A, Feedback: dup") is None

    def test_empty_feedback_text_is_not_a_match(self):
        assert parse_feedback_line("File: a.js, Line(s): 3, Feedback: ") is None


class TestParseLineSpec:
    def test_plain(self):
        assert parse_line_spec("42") == 42

    def test_leading_space(self):
        assert parse_line_spec(" 8") == 8

    def test_range(self):
        assert parse_line_spec("3-9") == 3

    def test_garbage(self):
        assert parse_line_spec("L3") is None


class TestParseFeedback:
    def test_keeps_order_and_skips_prose(self):
        text = (
            "Here is my review:\n"
            "File: a.js, Line(s): 3, Feedback: first\n"
            "\n"
            "Some commentary.\n"
            "File: b.js, Line(s): 9, Feedback: second\r\n"
        )
        items = parse_feedback(text)
        assert [(i.filename, i.line, i.text) for i in items] == [
            ("a.js", 3, "first"),
            ("b.js", 9, "second"),
        ]

    def test_crlf_output_strips_carriage_return(self):
        items = parse_feedback("File: a.js, Line(s): 3, Feedback: first\r\nFile: b.js, Line(s): 4, Feedback: second\r\n")
        assert [i.text for i in items] == ["first", "second"]

    @pytest.mark.parametrize("separator", ["\x0c", "\x1c", "\x1d", "\x1e", "\x85", "\u2028", "\u2029", "\r"])
    def test_only_lf_ends_a_line(self, separator):
        text = f"File: a.js, Line(s): 3, Feedback: use const{separator}not var\n"
        items = parse_feedback(text)
        assert len(items) == 1
        assert items[0].text == f"use const{separator}not var"

    def test_sentinel_yields_nothing(self):
        assert parse_feedback("No review feedback generated") == []


class TestNormalizeFeedback:
    def test_single_blob(self):
        assert normalize_feedback("abc") == ["abc"]

    def test_sequence(self):
        assert normalize_feedback(["a", "b"]) == ["a", "b"]
