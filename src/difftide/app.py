"""Textual application replaying a file as a simulated code stream."""

from __future__ import annotations

import asyncio
import random
from pathlib import Path

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from difftide.config.models import AppSettings
from difftide.config.store import SettingsStore
from difftide.highlight.highlighter import Highlighter, create_highlighter
from difftide.highlight.languages import resolve_lang
from difftide.options import CollapseConfig, TokenizeOptions
from difftide.pipeline import build_tokenized_code
from difftide.runtime_logging import configure_runtime_logging, get_runtime_logger
from difftide.widgets.code_view import CodeView


class StreamingDemoApp(App[None]):
    TITLE = "difftide"
    SUB_TITLE = "streaming diff preview"

    BINDINGS = [
        ("s", "start_stream", "Stream"),
        ("c", "toggle_collapse", "Collapse"),
        ("e", "expand_all", "Expand"),
        ("q", "quit", "Quit"),
    ]

    CSS = """
    Screen {
        layout: vertical;
    }

    #status {
        height: 1;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        *,
        before: str,
        after: str,
        file_path: str | None = None,
        settings: AppSettings | None = None,
        seed: int | None = None,
        log_level: str | None = None,
        log_file: str | Path | None = None,
    ) -> None:
        self.before = before
        self.after = after
        self.file_path = file_path
        if log_level is not None or log_file is not None:
            configure_runtime_logging(level=log_level, log_file=log_file)
        self.logger = get_runtime_logger().bind(component="app")
        self.settings = settings or SettingsStore().load()
        self.lang = resolve_lang(None, file_path)
        self.collapse = self.settings.diff.collapse_unchanged
        self.streaming = False
        self.highlighter: Highlighter | None = None
        self._rng = random.Random(seed)
        self.logger.info("app.initialized", file_path=file_path, lang=self.lang)
        super().__init__()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("idle", id="status")
        yield CodeView(line_numbers=self.settings.appearance.line_numbers_option(), id="view")
        yield Footer()

    async def on_mount(self) -> None:
        self.highlighter = await create_highlighter(langs=[self.lang], themes=[self.settings.appearance.theme])
        self.show_final()

    @property
    def view(self) -> CodeView:
        return self.query_one("#view", CodeView)

    def _set_status(self, text: str) -> None:
        self.query_one("#status", Static).update(text)

    def _options(self, code: str, *, streaming: bool | int = False) -> TokenizeOptions:
        diff = self.settings.diff
        collapse: bool | CollapseConfig = False
        if self.collapse:
            collapse = CollapseConfig.from_template(diff.separator, padding=diff.collapse_padding)
        return TokenizeOptions(
            code=code,
            diff_with=self.before,
            theme=self.settings.appearance.theme,
            collapse_unchanged=collapse,
            streaming=streaming,
        )

    def show_final(self) -> None:
        if self.highlighter is None:
            return
        code = build_tokenized_code(self._options(self.after), self.highlighter, lang=self.lang)
        self.view.show(code)
        self._set_status(f"{len(code.collapsed_indices())} collapsed section(s)")

    async def stream(self) -> None:
        assert self.highlighter is not None
        config = self.settings.streaming
        total = len(self.after)
        length = 0
        self.logger.info("app.stream.start", total_chars=total)
        while length < total:
            length += self._rng.randint(config.chunk_min, max(config.chunk_min, config.chunk_max))
            partial = self.after[:length]
            code = build_tokenized_code(
                self._options(partial, streaming=config.window),
                self.highlighter,
                lang=self.lang,
            )
            self.view.show(code, window=config.window)
            self._set_status(f"streaming {min(100, round(length / max(total, 1) * 100))}%")
            await asyncio.sleep(self._rng.randint(0, config.delay_ms_max) / 1000)

        self.streaming = False
        self.logger.info("app.stream.finished")
        self.show_final()

    def action_start_stream(self) -> None:
        if self.streaming or self.highlighter is None:
            return
        self.streaming = True
        self.run_worker(self.stream(), exclusive=True, group="stream")

    def action_toggle_collapse(self) -> None:
        self.collapse = not self.collapse
        if not self.streaming:
            self.show_final()

    def action_expand_all(self) -> None:
        self.view.expand_all()
