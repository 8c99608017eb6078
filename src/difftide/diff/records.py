"""Expand aligned hunks into the unified sequence of line records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal

from difftide.diff.hunks import DiffFunc, Hunk, diff_words

if TYPE_CHECKING:
    from difftide.highlight.highlighter import HighlightToken

LineKind = Literal["default", "added", "removed", "current", "upcoming"]


@dataclass(slots=True)
class LineRecord:
    kind: LineKind
    old_line_number: int | None = None
    new_line_number: int | None = None
    # 0-based columns of changed characters within a modified line.
    marks: set[int] = field(default_factory=set)
    tokens: list[HighlightToken] = field(default_factory=list)
    special_text: str | None = None
    collapse_group: list[LineRecord] | None = None

    @property
    def is_collapsed(self) -> bool:
        return self.collapse_group is not None


@dataclass(slots=True)
class RecordSequence:
    records: list[LineRecord]
    next_old_line: int
    next_new_line: int


class SpanState(Enum):
    IN_FROM_LINE = "in-from-line"
    IN_TO_LINE = "in-to-line"
    IN_EQUAL_SPAN = "in-equal-span"

    @classmethod
    def for_hunk(cls, hunk: Hunk) -> SpanState:
        if hunk.removed:
            return cls.IN_FROM_LINE
        if hunk.added:
            return cls.IN_TO_LINE
        return cls.IN_EQUAL_SPAN


@dataclass(slots=True)
class LineCursor:
    """Position within one side of a modified block."""

    kind: LineKind
    line_number: int
    records: list[LineRecord] = field(default_factory=list)
    column: int = 0

    def __post_init__(self) -> None:
        self.records.append(self._new_record())

    def _new_record(self) -> LineRecord:
        if self.kind == "removed":
            return LineRecord(kind="removed", old_line_number=self.line_number)
        return LineRecord(kind="added", new_line_number=self.line_number)

    @property
    def record(self) -> LineRecord:
        return self.records[-1]

    def mark(self, length: int) -> None:
        self.record.marks.update(range(self.column, self.column + length))
        self.column += length

    def skip(self, length: int) -> None:
        self.column += length

    def next_line(self) -> None:
        self.line_number += 1
        self.column = 0
        self.records.append(self._new_record())


class ModifiedBlock:
    """Paints word-level marks across a removed hunk and its replacement.

    Two cursors walk the word diff in parallel: word-diff text that is only on
    the "from" side moves and marks the removed cursor, text only on the "to"
    side moves and marks the added cursor, and shared text moves both without
    marking. An embedded newline moves the affected cursors to the start of
    their next line.
    """

    def __init__(self, removed: Hunk, added: Hunk, *, old_line: int, new_line: int) -> None:
        self.removed = removed
        self.added = added
        self.from_cursor = LineCursor(kind="removed", line_number=old_line)
        self.to_cursor = LineCursor(kind="added", line_number=new_line)

    def _cursors(self, state: SpanState) -> tuple[LineCursor, ...]:
        if state is SpanState.IN_FROM_LINE:
            return (self.from_cursor,)
        if state is SpanState.IN_TO_LINE:
            return (self.to_cursor,)
        return (self.from_cursor, self.to_cursor)

    def feed(self, hunk: Hunk) -> None:
        state = SpanState.for_hunk(hunk)
        cursors = self._cursors(state)
        segments = hunk.value.split("\n")
        for index, segment in enumerate(segments):
            for cursor in cursors:
                if state is SpanState.IN_EQUAL_SPAN:
                    cursor.skip(len(segment))
                else:
                    cursor.mark(len(segment))
            if index < len(segments) - 1:
                for cursor in cursors:
                    cursor.next_line()

    def run(self, word_diff: DiffFunc = diff_words) -> list[LineRecord]:
        old = self.removed.value.removesuffix("\n")
        new = self.added.value.removesuffix("\n")
        for hunk in word_diff(old, new):
            self.feed(hunk)
        return self.from_cursor.records + self.to_cursor.records


def build_records(hunks: list[Hunk], *, word_diff: DiffFunc = diff_words) -> RecordSequence:
    records: list[LineRecord] = []
    old_line = 1
    new_line = 1

    index = 0
    while index < len(hunks):
        hunk = hunks[index]
        following = hunks[index + 1] if index + 1 < len(hunks) else None

        if hunk.removed and following is not None and following.added:
            block = ModifiedBlock(hunk, following, old_line=old_line, new_line=new_line)
            records.extend(block.run(word_diff))
            old_line += hunk.count
            new_line += following.count
            index += 2
            continue

        for _ in range(hunk.count):
            if hunk.added:
                records.append(LineRecord(kind="added", new_line_number=new_line))
                new_line += 1
            elif hunk.removed:
                records.append(LineRecord(kind="removed", old_line_number=old_line))
                old_line += 1
            else:
                records.append(LineRecord(kind="default", old_line_number=old_line, new_line_number=new_line))
                old_line += 1
                new_line += 1
        index += 1

    return RecordSequence(records=records, next_old_line=old_line, next_new_line=new_line)


def build_plain_records(line_count: int) -> RecordSequence:
    records = [LineRecord(kind="default", new_line_number=number) for number in range(1, line_count + 1)]
    return RecordSequence(records=records, next_old_line=1, next_new_line=line_count + 1)
