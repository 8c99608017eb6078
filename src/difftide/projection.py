"""Project line records into render items with marked token spans."""

from __future__ import annotations

from typing import Callable

from difftide.diff.records import LineRecord
from difftide.highlight.highlighter import FONT_BOLD, FONT_ITALIC, FONT_UNDERLINE, HighlightToken
from difftide.model import FontStyle, RenderCollapsedSection, RenderItem, RenderLine, RenderToken


def font_style_name(bits: int) -> FontStyle | None:
    if bits & FONT_ITALIC:
        return "italic"
    if bits & FONT_BOLD:
        return "bold"
    if bits & FONT_UNDERLINE:
        return "underline"
    return None


def split_marked(token: HighlightToken, start_column: int, marks: set[int]) -> list[RenderToken]:
    """Slice ``token`` wherever the mark state changes.

    ``start_column`` is the token's column within its line.
    """

    style = font_style_name(token.font_style)
    spans: list[RenderToken] = []
    span_start = 0
    for offset in range(1, len(token.content) + 1):
        at_end = offset == len(token.content)
        in_mark = (start_column + span_start) in marks
        if at_end or ((start_column + offset) in marks) != in_mark:
            spans.append(
                RenderToken(
                    content=token.content[span_start:offset],
                    color=token.color,
                    font_style=style,
                    marked=in_mark,
                )
            )
            span_start = offset
    return spans


def project_line(record: LineRecord) -> RenderLine:
    tokens: list[RenderToken] = []
    column = 0
    for token in record.tokens:
        if record.marks:
            tokens.extend(split_marked(token, column, record.marks))
        elif token.content:
            tokens.append(
                RenderToken(
                    content=token.content,
                    color=token.color,
                    font_style=font_style_name(token.font_style),
                )
            )
        column += len(token.content)
    return RenderLine(
        kind=record.kind,
        tokens=tokens,
        old_line_number=record.old_line_number,
        new_line_number=record.new_line_number,
        special_text=record.special_text,
    )


def project_records(
    records: list[LineRecord],
    separator: Callable[[int], str] | None = None,
) -> tuple[list[RenderItem], int | None]:
    items: list[RenderItem] = []
    current_index: int | None = None
    for record in records:
        if record.collapse_group is not None:
            count = len(record.collapse_group)
            items.append(
                RenderCollapsedSection(
                    collapsed_count=count,
                    lines=[project_line(inner) for inner in record.collapse_group],
                    separator_text=separator(count) if separator is not None else "",
                )
            )
            continue
        line = project_line(record)
        if line.kind == "current":
            current_index = len(items)
        items.append(line)
    return items, current_index
