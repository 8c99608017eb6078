"""Attach syntax tokens to line records by line index."""

from __future__ import annotations

from typing import Iterable, Iterator

from difftide.diff.records import LineRecord
from difftide.highlight.highlighter import HighlightResult

_BEFORE_KINDS = frozenset({"removed", "upcoming"})


def iter_records(records: Iterable[LineRecord]) -> Iterator[LineRecord]:
    for record in records:
        if record.collapse_group is not None:
            yield from record.collapse_group
        else:
            yield record


def assign_tokens(
    records: Iterable[LineRecord],
    *,
    after: HighlightResult,
    before: HighlightResult | None = None,
) -> None:
    for record in iter_records(records):
        if record.kind in _BEFORE_KINDS:
            source = before if before is not None else after
            number = record.old_line_number
        else:
            source = after
            number = record.new_line_number
        record.tokens = source.line(number - 1) if number is not None else []
