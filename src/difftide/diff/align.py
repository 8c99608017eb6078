"""Line-hunk alignment between the before and after texts."""

from __future__ import annotations

from dataclasses import dataclass, field

from difftide.diff.hunks import DiffFunc, Hunk, diff_lines
from difftide.diff.text import SourceText

STREAMING_LOOKAHEAD = 3


@dataclass(slots=True)
class Alignment:
    hunks: list[Hunk]
    preview_lines: list[str] = field(default_factory=list)
    # 1-based line in the before text where ``preview_lines`` begins.
    preview_start: int = 1


def _join(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def _old_line_of(hunks: list[Hunk], index: int) -> int:
    return 1 + sum(hunk.count for hunk in hunks[:index] if not hunk.added)


def align(
    before: SourceText,
    after: SourceText,
    *,
    streaming: bool = False,
    line_diff: DiffFunc = diff_lines,
) -> Alignment:
    if not streaming:
        return Alignment(
            hunks=line_diff(before.content, after.content),
            preview_start=before.line_count + 1,
        )

    # Only a short lookahead of the before text is diffed while streaming.
    limit = after.line_count + STREAMING_LOOKAHEAD
    head, rest = before.lines[:limit], before.lines[limit:]
    alignment = Alignment(
        hunks=line_diff(_join(head), after.content),
        preview_lines=list(rest),
        preview_start=len(head) + 1,
    )
    reclassify_unreached(alignment)
    return alignment


def reclassify_unreached(alignment: Alignment) -> None:
    """Move trailing removals the stream has not reached yet into the preview.

    A removed hunk followed by a final added hunk means the added text is the
    line being written and the removed text is still ahead of it. A lone
    trailing removal is likewise content the stream has not reached.
    """

    hunks = alignment.hunks
    if len(hunks) >= 2 and hunks[-1].added and hunks[-2].removed:
        added = hunks[-1]
        start = _old_line_of(hunks, len(hunks) - 2)
        removed = hunks.pop(-2)
        removed_lines = removed.lines()
        covered = 0
        if removed.value.startswith(added.value.removesuffix("\n")):
            covered = min(added.count, len(removed_lines))
        alignment.preview_lines = removed_lines[covered:] + alignment.preview_lines
        alignment.preview_start = start + covered
    elif hunks and hunks[-1].removed:
        start = _old_line_of(hunks, len(hunks) - 1)
        removed = hunks.pop()
        alignment.preview_lines = removed.lines() + alignment.preview_lines
        alignment.preview_start = start
