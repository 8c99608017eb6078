"""Scrollable view of tokenized code with expandable collapsed sections."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from difftide.model import TokenizedCode
from difftide.ui.ansi import LineNumbers, TokenizedCodeView


class CodeView(VerticalScroll):
    DEFAULT_CSS = """
    CodeView {
        height: 1fr;
        border: round $surface-lighten-2;
    }

    CodeView > #code {
        width: auto;
    }
    """

    def __init__(self, *, line_numbers: LineNumbers = "both", id: str | None = None) -> None:
        self.line_numbers = line_numbers
        self.code: TokenizedCode | None = None
        self.window: int | None = None
        self.expanded: set[int] = set()
        super().__init__(id=id)

    def compose(self) -> ComposeResult:
        yield Static("", id="code")

    def show(self, code: TokenizedCode, *, window: int | None = None) -> None:
        self.code = code
        self.window = window
        self.expanded = set()
        self._refresh_code()

    def toggle_section(self, index: int) -> bool:
        if self.code is None or index not in self.code.collapsed_indices():
            return False
        self.expanded.symmetric_difference_update({index})
        self._refresh_code()
        return True

    def expand_all(self) -> None:
        if self.code is None:
            return
        self.expanded = set(self.code.collapsed_indices())
        self._refresh_code()

    def _refresh_code(self) -> None:
        if self.code is None:
            return
        view = TokenizedCodeView(
            self.code,
            line_numbers=self.line_numbers,
            window=self.window,
            expanded=self.expanded,
        )
        self.query_one("#code", Static).update(view)
