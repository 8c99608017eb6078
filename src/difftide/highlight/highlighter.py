"""Pygments-backed syntax tokenizer producing per-line token arrays."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Iterable

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.style import Style
from pygments.token import Token
from pygments.util import ClassNotFound

from difftide.highlight.languages import PLAIN_TEXT
from difftide.highlight.themes import Theme, ThemeNotFound, load_style, theme_from_style
from difftide.runtime_logging import get_runtime_logger

FONT_ITALIC = 1
FONT_BOLD = 2
FONT_UNDERLINE = 4

FALLBACK_STYLE = "default"


@dataclass(slots=True)
class HighlightToken:
    content: str
    color: str | None = None
    font_style: int = 0


@dataclass(slots=True)
class HighlightResult:
    tokens: list[list[HighlightToken]] = field(default_factory=list)
    fg: str | None = None
    bg: str | None = None

    def line(self, index: int) -> list[HighlightToken]:
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return []


class Highlighter:
    """Caches lexers and themes and turns text into coloured line tokens.

    ``code_to_tokens`` writes to the caches only when it meets a language,
    theme or style it has not seen before, and only reads them afterwards.
    Callers that share one instance across threads should load every language
    and theme up front, for example via :func:`create_highlighter`.
    """

    def __init__(self) -> None:
        self._lexers: dict[str, Lexer] = {}
        self._themes: dict[str, Theme] = {}
        self._styles: dict[str, type[Style]] = {}
        self.logger = get_runtime_logger().bind(component="highlighter")

    @property
    def loaded_languages(self) -> list[str]:
        return sorted(self._lexers)

    @property
    def loaded_themes(self) -> list[str]:
        return sorted(self._themes)

    def load_language(self, lang: str) -> Lexer:
        lexer = self._lexers.get(lang)
        if lexer is not None:
            return lexer
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            self.logger.debug("language.fallback", lang=lang)
            lexer = get_lexer_by_name(PLAIN_TEXT)
        self._lexers[lang] = lexer
        return lexer

    def load_theme(self, theme: Theme | str) -> Theme:
        if isinstance(theme, str):
            return self.get_theme(theme)
        if self._themes.get(theme.name) is not theme:
            self._themes[theme.name] = theme
        self._style_for(theme)
        return theme

    def get_theme(self, name: str) -> Theme:
        theme = self._themes.get(name)
        if theme is None:
            theme = theme_from_style(name)
            self._themes[name] = theme
        return theme

    def _style_for(self, theme: Theme) -> type[Style]:
        style = self._styles.get(theme.style_name)
        if style is not None:
            return style
        try:
            style = load_style(theme.style_name)
        except ThemeNotFound:
            self.logger.debug("theme.style_fallback", theme=theme.name, style=theme.style_name)
            style = load_style(FALLBACK_STYLE)
        self._styles[theme.style_name] = style
        return style

    def code_to_tokens(self, code: str, *, theme: Theme | str, lang: str) -> HighlightResult:
        """Split ``code`` into per-line tokens.

        The lexer sees ``code`` unprocessed, so carriage returns stay part of
        their line exactly as the diff sees them.
        """

        resolved = self.load_theme(theme)
        style = self._style_for(resolved)
        lexer = self.load_language(lang)

        lines: list[list[HighlightToken]] = [[]]
        for _, token_type, value in lexer.get_tokens_unprocessed(code):
            info = style.style_for_token(token_type)
            color = f"#{info['color']}" if info["color"] else None
            font_style = (
                (FONT_ITALIC if info["italic"] else 0)
                | (FONT_BOLD if info["bold"] else 0)
                | (FONT_UNDERLINE if info["underline"] else 0)
            )
            for index, part in enumerate(value.split("\n")):
                if index:
                    lines.append([])
                if part:
                    lines[-1].append(HighlightToken(content=part, color=color, font_style=font_style))

        foreground = style.style_for_token(Token.Text)["color"]
        return HighlightResult(
            tokens=lines,
            fg=f"#{foreground}" if foreground else None,
            bg=style.background_color or None,
        )


async def create_highlighter(
    *,
    langs: Iterable[str] = (),
    themes: Iterable[Theme | str] = (),
) -> Highlighter:
    highlighter = Highlighter()
    langs = list(langs)
    themes = list(themes)

    def load() -> None:
        for lang in langs:
            highlighter.load_language(lang)
        for theme in themes:
            highlighter.load_theme(theme)

    await asyncio.to_thread(load)
    highlighter.logger.debug(
        "highlighter.created",
        langs=highlighter.loaded_languages,
        themes=highlighter.loaded_themes,
    )
    return highlighter
