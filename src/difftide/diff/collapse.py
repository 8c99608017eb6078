"""Fold long runs of unchanged lines into collapsed groups."""

from __future__ import annotations

from difftide.diff.records import LineRecord

DEFAULT_COLLAPSE_PADDING = 3


def _run_end(records: list[LineRecord], start: int) -> int:
    end = start
    while end < len(records) and records[end].kind == "default":
        end += 1
    return end


def collapse_unchanged(records: list[LineRecord], padding: int = DEFAULT_COLLAPSE_PADDING) -> list[LineRecord]:
    """Replace interior runs of ``default`` records with a single group record.

    ``padding`` unchanged lines stay visible next to each change; a run that
    touches the start or the end of the sequence is only trimmed on its
    inner edge.
    """

    reduced: list[LineRecord] = []
    index = 0
    total = len(records)
    while index < total:
        if records[index].kind != "default":
            reduced.append(records[index])
            index += 1
            continue

        run_start = index
        run_end = _run_end(records, run_start)
        start = run_start if run_start == 0 else run_start + padding
        end = run_end if run_end == total else run_end - padding

        if end <= start:
            reduced.extend(records[run_start:run_end])
        else:
            reduced.extend(records[run_start:start])
            reduced.append(LineRecord(kind="default", collapse_group=records[start:end]))
            reduced.extend(records[end:run_end])
        index = run_end
    return reduced
