from __future__ import annotations

import unittest

from difftide.diff.records import LineRecord
from difftide.highlight.highlighter import FONT_BOLD, FONT_ITALIC, HighlightToken
from difftide.model import RenderCollapsedSection, RenderLine
from difftide.projection import font_style_name, project_line, project_records, split_marked


def spans(tokens: list) -> list[tuple[str, bool]]:  # noqa: ANN001
    return [(token.content, token.marked) for token in tokens]


class SplitMarkedTests(unittest.TestCase):
    def test_splits_where_mark_state_changes(self) -> None:
        token = HighlightToken("hello", color="#ffffff")
        self.assertEqual(spans(split_marked(token, 0, {1, 2})), [("h", False), ("el", True), ("lo", False)])

    def test_uses_the_token_column_offset(self) -> None:
        token = HighlightToken("ab")
        self.assertEqual(spans(split_marked(token, 10, {11})), [("a", False), ("b", True)])

    def test_fully_marked_token_stays_whole(self) -> None:
        token = HighlightToken("abc", font_style=FONT_BOLD)
        result = split_marked(token, 0, {0, 1, 2})
        self.assertEqual(spans(result), [("abc", True)])
        self.assertEqual(result[0].font_style, "bold")


class ProjectLineTests(unittest.TestCase):
    def test_marks_span_multiple_tokens(self) -> None:
        record = LineRecord(
            kind="added",
            new_line_number=1,
            marks={4, 5},
            tokens=[HighlightToken("x"), HighlightToken(" = "), HighlightToken("10")],
        )
        line = project_line(record)
        self.assertEqual(spans(line.tokens), [("x", False), (" = ", False), ("10", True)])
        self.assertEqual(line.text, "x = 10")

    def test_unmarked_line_keeps_tokens(self) -> None:
        record = LineRecord(kind="default", new_line_number=3, tokens=[HighlightToken("pass", font_style=FONT_ITALIC)])
        line = project_line(record)
        self.assertEqual(line.tokens[0].font_style, "italic")
        self.assertFalse(line.tokens[0].marked)
        self.assertEqual(line.new_line_number, 3)

    def test_font_style_precedence(self) -> None:
        self.assertEqual(font_style_name(FONT_ITALIC | FONT_BOLD), "italic")
        self.assertIsNone(font_style_name(0))


class ProjectRecordsTests(unittest.TestCase):
    def test_collapsed_groups_and_current_index(self) -> None:
        group = [LineRecord(kind="default", old_line_number=n, new_line_number=n) for n in (1, 2)]
        records = [
            LineRecord(kind="default", collapse_group=group),
            LineRecord(kind="current", old_line_number=3, new_line_number=3),
            LineRecord(kind="upcoming", old_line_number=4),
        ]
        items, current = project_records(records, lambda count: f"{count} hidden")
        self.assertEqual(current, 1)
        section = items[0]
        assert isinstance(section, RenderCollapsedSection)
        self.assertEqual((section.collapsed_count, section.separator_text), (2, "2 hidden"))
        self.assertEqual([line.old_line_number for line in section.lines], [1, 2])
        self.assertIsInstance(items[2], RenderLine)

    def test_no_current_line_outside_streaming(self) -> None:
        _, current = project_records([LineRecord(kind="default", new_line_number=1)])
        self.assertIsNone(current)


if __name__ == "__main__":
    unittest.main()
