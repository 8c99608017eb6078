"""Line and word diff primitives built on difflib."""

from __future__ import annotations

import difflib
import re
from dataclasses import dataclass
from typing import Callable, Sequence

_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")
_WORD_RE = re.compile(r"\w+|[^\S\n]+|\n|[^\w\s]")


@dataclass(slots=True)
class Hunk:
    value: str
    count: int = 0
    added: bool = False
    removed: bool = False

    def same_kind(self, other: Hunk) -> bool:
        return self.added == other.added and self.removed == other.removed

    def lines(self) -> list[str]:
        """Lines of the hunk without their terminating newlines."""

        return self.value.removesuffix("\n").split("\n") if self.value else []


DiffFunc = Callable[[str, str], list[Hunk]]


def split_lines(text: str) -> list[str]:
    return _LINE_RE.findall(text)


def split_words(text: str) -> list[str]:
    return _WORD_RE.findall(text)


def _diff_tokens(old: Sequence[str], new: Sequence[str], *, count_lines: bool) -> list[Hunk]:
    hunks: list[Hunk] = []

    def push(tokens: Sequence[str], *, added: bool = False, removed: bool = False) -> None:
        if not tokens:
            return
        value = "".join(tokens)
        count = len(tokens) if count_lines else 0
        hunk = Hunk(value=value, count=count, added=added, removed=removed)
        if hunks and hunks[-1].same_kind(hunk):
            hunks[-1].value += hunk.value
            hunks[-1].count += hunk.count
            return
        hunks.append(hunk)

    matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            push(old[i1:i2])
        else:
            # Replacements are reported remove-then-add.
            push(old[i1:i2], removed=True)
            push(new[j1:j2], added=True)
    return hunks


def diff_lines(old: str, new: str) -> list[Hunk]:
    return _diff_tokens(split_lines(old), split_lines(new), count_lines=True)


def diff_words(old: str, new: str) -> list[Hunk]:
    return _diff_tokens(split_words(old), split_words(new), count_lines=False)
