"""Streaming overlay: the live line and the preview of what comes next."""

from __future__ import annotations

from difftide.diff.align import Alignment
from difftide.diff.records import LineRecord, RecordSequence


def apply_streaming_overlay(sequence: RecordSequence, alignment: Alignment | None = None) -> int | None:
    """Mark the last record as current and append upcoming preview lines.

    Returns the index of the current record, or ``None`` when nothing was
    produced.
    """

    records = sequence.records
    if not records:
        return None

    current_index = len(records) - 1
    current = records[current_index]
    current.kind = "current"
    if current.old_line_number is None:
        current.old_line_number = sequence.next_old_line
        sequence.next_old_line += 1

    if alignment is None:
        return current_index

    for offset in range(len(alignment.preview_lines)):
        records.append(LineRecord(kind="upcoming", old_line_number=alignment.preview_start + offset))
    sequence.next_old_line = max(
        sequence.next_old_line,
        alignment.preview_start + len(alignment.preview_lines),
    )
    return current_index
