"""Renderer-facing output model."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Literal

LineKind = Literal["default", "added", "removed", "current", "upcoming"]
FontStyle = Literal["italic", "bold", "underline"]


@dataclass(slots=True)
class RenderToken:
    content: str
    color: str | None = None
    font_style: FontStyle | None = None
    # Set on text that differs from its counterpart in a modified line.
    marked: bool = False


@dataclass(slots=True)
class RenderLine:
    kind: LineKind
    tokens: list[RenderToken] = field(default_factory=list)
    old_line_number: int | None = None
    new_line_number: int | None = None
    special_text: str | None = None

    @property
    def text(self) -> str:
        return "".join(token.content for token in self.tokens)


@dataclass(slots=True)
class RenderCollapsedSection:
    collapsed_count: int
    lines: list[RenderLine]
    separator_text: str
    kind: Literal["collapsed"] = "collapsed"


RenderItem = RenderLine | RenderCollapsedSection


@dataclass(slots=True)
class ThemeColors:
    foreground: str
    background: str
    inserted_line_background: str
    inserted_text_background: str
    removed_line_background: str
    removed_text_background: str
    line_number_foreground: str
    current_line_background: str


@dataclass(slots=True)
class TokenizedCode:
    items: list[RenderItem]
    colors: ThemeColors
    line_digits: int
    max_cols: int
    is_diff: bool
    is_streaming: bool
    current_line_index: int | None = None

    def lines(self) -> list[RenderLine]:
        return [item for item in self.items if isinstance(item, RenderLine)]

    def expand(self, indices: Iterable[int] = ()) -> list[RenderItem]:
        """Items with the collapsed sections at ``indices`` replaced by their lines."""

        expanded = set(indices)
        result: list[RenderItem] = []
        for index, item in enumerate(self.items):
            if isinstance(item, RenderCollapsedSection) and index in expanded:
                result.extend(item.lines)
            else:
                result.append(item)
        return result

    def collapsed_indices(self) -> list[int]:
        return [index for index, item in enumerate(self.items) if isinstance(item, RenderCollapsedSection)]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
