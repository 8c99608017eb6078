"""Terminal rendering of tokenized code with rich styles."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Iterable, Literal

from rich.console import Console, ConsoleOptions, RenderResult
from rich.style import Style
from rich.text import Text

from difftide.highlight.highlighter import Highlighter
from difftide.model import RenderCollapsedSection, RenderItem, RenderLine, ThemeColors, TokenizedCode
from difftide.options import TokenizeOptions
from difftide.pipeline import tokenize
from difftide.runtime_logging import get_runtime_logger

DEFAULT_STREAMING_WINDOW = 20

LineNumbers = bool | Literal["both"]

_ANNOTATIONS = {"added": "+ ", "removed": "- ", "current": "▶ "}


@dataclass(slots=True)
class LinePainter:
    colors: ThemeColors
    line_digits: int
    max_cols: int
    is_diff: bool
    line_numbers: LineNumbers = False
    streaming: bool = False

    @classmethod
    def for_code(cls, code: TokenizedCode, *, line_numbers: LineNumbers = False) -> LinePainter:
        return cls(
            colors=code.colors,
            line_digits=code.line_digits,
            max_cols=code.max_cols,
            is_diff=code.is_diff,
            line_numbers=line_numbers,
            streaming=code.is_streaming,
        )

    def _backgrounds(self, line: RenderLine) -> tuple[str, str]:
        colors = self.colors
        if line.kind == "added":
            return colors.inserted_line_background, colors.inserted_text_background
        if line.kind == "removed":
            return colors.removed_line_background, colors.removed_text_background
        if line.kind == "current":
            return colors.current_line_background, colors.current_line_background
        return colors.background, colors.background

    def _numbers(self, line: RenderLine) -> list[int | None]:
        old, new = line.old_line_number, line.new_line_number
        if not self.is_diff:
            return [new] if self.line_numbers else []

        numbers: list[int | None] = []
        if self.line_numbers == "both":
            numbers = [old, new]
            if line.kind == "added":
                numbers[0] = None
            elif line.kind in ("removed", "upcoming"):
                numbers[1] = None
        elif self.line_numbers:
            numbers = [new if self.streaming else old]
            if line.kind == "added":
                numbers[0] = None
        return numbers

    def prefix(self, line: RenderLine) -> str:
        columns = "".join(f"{number or '':<{self.line_digits}} " for number in self._numbers(line))
        annotation = _ANNOTATIONS.get(line.kind, "  ") if self.is_diff else ""
        return f" {columns}{annotation}"

    def paint_line(self, line: RenderLine) -> Text:
        line_bg, marked_bg = self._backgrounds(line)
        muted = Style(color=self.colors.line_number_foreground, bgcolor=line_bg)

        text = Text(self.prefix(line), style=muted, end="")
        if line.kind == "upcoming":
            text.append(line.text, style=muted)
        elif line.special_text:
            text.append(line.special_text, style=muted)
        else:
            for token in line.tokens:
                text.append(
                    token.content,
                    style=Style(
                        color=token.color or self.colors.foreground,
                        bgcolor=marked_bg if token.marked else line_bg,
                        italic=token.font_style == "italic" or None,
                        bold=token.font_style == "bold" or None,
                        underline=token.font_style == "underline" or None,
                    ),
                )
        used = len(line.special_text or line.text)
        text.append(" " * max(0, self.max_cols - used), style=Style(bgcolor=line_bg))
        return text

    def paint_section(self, section: RenderCollapsedSection) -> list[Text]:
        width = len(self.prefix(RenderLine(kind="default")))
        style = Style(color=self.colors.line_number_foreground, bgcolor=self.colors.background)
        return [
            Text(" " * width + part.ljust(self.max_cols), style=style, end="")
            for part in section.separator_text.split("\n")
        ]

    def paint(self, items: Iterable[RenderItem]) -> list[Text]:
        lines: list[Text] = []
        for item in items:
            if isinstance(item, RenderCollapsedSection):
                lines.extend(self.paint_section(item))
            else:
                lines.append(self.paint_line(item))
        return lines


def streaming_window(lines: list[Text], current_index: int, window: int) -> list[Text]:
    start = max(0, current_index - window // 2)
    if start + window > len(lines):
        start = max(0, len(lines) - window)
    return lines[start : start + window]


def render_lines(
    code: TokenizedCode,
    *,
    line_numbers: LineNumbers = False,
    window: int | None = None,
    expanded: Iterable[int] = (),
) -> list[Text]:
    painter = LinePainter.for_code(code, line_numbers=line_numbers)
    lines = painter.paint(code.expand(expanded))
    if code.is_streaming and code.current_line_index is not None:
        lines = streaming_window(lines, code.current_line_index, window or DEFAULT_STREAMING_WINDOW)
    return lines


def to_ansi(lines: Iterable[Text]) -> str:
    console = Console(
        file=io.StringIO(),
        force_terminal=True,
        color_system="truecolor",
        highlight=False,
        emoji=False,
        markup=False,
        legacy_windows=False,
    )
    with console.capture() as capture:
        for line in lines:
            console.print(line, soft_wrap=True)
    return capture.get()


class TokenizedCodeView:
    """Rich renderable for a :class:`TokenizedCode`."""

    def __init__(
        self,
        code: TokenizedCode,
        *,
        line_numbers: LineNumbers = False,
        window: int | None = None,
        expanded: Iterable[int] = (),
    ) -> None:
        self.code = code
        self.line_numbers = line_numbers
        self.window = window
        self.expanded = set(expanded)

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:  # noqa: ARG002
        lines = render_lines(
            self.code,
            line_numbers=self.line_numbers,
            window=self.window,
            expanded=self.expanded,
        )
        yield Text("\n").join(lines)


async def render_ansi(options: TokenizeOptions, highlighter: Highlighter | None = None) -> str:
    """Render ``options`` to an ANSI string ending in a newline."""

    code = await tokenize(options, highlighter)
    window = None if isinstance(options.streaming, bool) else options.streaming
    lines = render_lines(code, line_numbers=options.line_numbers, window=window)
    get_runtime_logger().debug("render.ansi", lines=len(lines), streaming=code.is_streaming)
    return to_ansi(lines)
