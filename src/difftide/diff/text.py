"""Newline normalization and geometry for the two compared texts."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class SourceText:
    content: str
    had_trailing_newline: bool
    lines: list[str]

    @classmethod
    def from_raw(cls, raw: str) -> SourceText:
        had_trailing_newline = raw.endswith("\n")
        content = raw if had_trailing_newline else raw + "\n"
        return cls(
            content=content,
            had_trailing_newline=had_trailing_newline,
            lines=content[:-1].split("\n"),
        )

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass(slots=True)
class NormalizedTexts:
    after: SourceText
    before: SourceText | None
    max_columns: int
    max_lines: int

    @property
    def line_digits(self) -> int:
        return len(str(self.max_lines))

    @property
    def eof_newline_changed(self) -> bool:
        return self.before is not None and self.before.had_trailing_newline != self.after.had_trailing_newline


def normalize_texts(after: str, before: str | None = None) -> NormalizedTexts:
    after_text = SourceText.from_raw(after)
    before_text = SourceText.from_raw(before) if before is not None else None

    sides = [after_text] if before_text is None else [after_text, before_text]
    # One extra column of right padding, one extra line for the digit width.
    max_columns = max(len(line) for side in sides for line in side.lines) + 1
    max_lines = max(side.line_count for side in sides) + 1
    return NormalizedTexts(
        after=after_text,
        before=before_text,
        max_columns=max_columns,
        max_lines=max_lines,
    )
