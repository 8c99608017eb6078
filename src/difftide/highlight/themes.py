"""Themes and the resolved colour palette handed to renderers."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field
from pygments.style import Style
from pygments.styles import get_all_styles, get_style_by_name
from pygments.token import Token
from pygments.util import ClassNotFound
from rich.color import blend_rgb
from rich.color_triplet import ColorTriplet

from difftide.model import ThemeColors
from difftide.runtime_logging import get_runtime_logger

DEFAULT_THEME = "monokai"
DEFAULT_INSERT_BG = "#17975f33"
DEFAULT_REMOVE_BG = "#df404733"

EDITOR_FOREGROUND = "editor.foreground"
EDITOR_BACKGROUND = "editor.background"
INSERTED_LINE_BG = "diffEditor.insertedLineBackground"
INSERTED_TEXT_BG = "diffEditor.insertedTextBackground"
REMOVED_LINE_BG = "diffEditor.removedLineBackground"
REMOVED_TEXT_BG = "diffEditor.removedTextBackground"
LINE_NUMBER_FG = "editorLineNumber.foreground"

_HEX_RE = re.compile(r"#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})")
_BLACK = ColorTriplet(0, 0, 0)
_WHITE = ColorTriplet(255, 255, 255)


class ThemeNotFound(LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown theme: {name}")


class Theme(BaseModel):
    name: str
    style: str | None = Field(default=None, description="Pygments style used for token colours")
    colors: dict[str, str] = Field(default_factory=dict)

    @property
    def style_name(self) -> str:
        return self.style or self.name

    def color(self, key: str) -> str | None:
        value = self.colors.get(key)
        if value is None:
            return None
        if parse_color(value) is None:
            get_runtime_logger().debug("theme.color_fallback", theme=self.name, key=key, value=value)
            return None
        return value


def available_themes() -> list[str]:
    return sorted(get_all_styles())


def load_style(name: str) -> type[Style]:
    try:
        return get_style_by_name(name)
    except ClassNotFound as exc:
        raise ThemeNotFound(name) from exc


def theme_from_style(name: str) -> Theme:
    style = load_style(name)
    colors: dict[str, str] = {}
    foreground = style.style_for_token(Token.Text)["color"]
    if foreground:
        colors[EDITOR_FOREGROUND] = f"#{foreground}"
    if parse_color(style.background_color):
        colors[EDITOR_BACKGROUND] = style.background_color
    if parse_color(style.line_number_color):
        colors[LINE_NUMBER_FG] = style.line_number_color
    return Theme(name=name, style=name, colors=colors)


def parse_color(value: str | None) -> tuple[ColorTriplet, float] | None:
    if not value:
        return None
    match = _HEX_RE.fullmatch(value.strip())
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) in (3, 4):
        digits = "".join(char * 2 for char in digits)
    red, green, blue = (int(digits[pos : pos + 2], 16) for pos in (0, 2, 4))
    alpha = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
    return ColorTriplet(red, green, blue), alpha


def flatten_colors(*layers: str | None) -> str:
    """Composite colour layers, topmost first, into one opaque hex colour."""

    color: ColorTriplet | None = None
    for layer in reversed(layers):
        parsed = parse_color(layer)
        if parsed is None:
            continue
        triplet, alpha = parsed
        if alpha < 1:
            color = blend_rgb(color or _BLACK, triplet, alpha)
        else:
            color = triplet
    return (color or _BLACK).hex


def mix_colors(base: str | None, other: str | None, amount: float) -> str:
    parsed_base = parse_color(base)
    parsed_other = parse_color(other)
    return blend_rgb(
        parsed_base[0] if parsed_base else _BLACK,
        parsed_other[0] if parsed_other else _WHITE,
        amount,
    ).hex


def build_theme_colors(theme: Theme, foreground: str | None, background: str | None) -> ThemeColors:
    inserted_line = theme.color(INSERTED_LINE_BG) or DEFAULT_INSERT_BG
    removed_line = theme.color(REMOVED_LINE_BG) or DEFAULT_REMOVE_BG
    return ThemeColors(
        foreground=flatten_colors(foreground),
        background=flatten_colors(background),
        inserted_line_background=flatten_colors(inserted_line, background),
        inserted_text_background=flatten_colors(
            theme.color(INSERTED_TEXT_BG) or DEFAULT_INSERT_BG,
            inserted_line,
            background,
        ),
        removed_line_background=flatten_colors(removed_line, background),
        removed_text_background=flatten_colors(
            theme.color(REMOVED_TEXT_BG) or DEFAULT_REMOVE_BG,
            removed_line,
            background,
        ),
        line_number_foreground=flatten_colors(
            theme.color(LINE_NUMBER_FG) or mix_colors(background, foreground, 0.5),
            background,
        ),
        current_line_background=flatten_colors(mix_colors(background, foreground, 0.2), background),
    )
