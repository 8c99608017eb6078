"""Typed options accepted by the tokenize pipeline."""

from __future__ import annotations

from typing import Callable, Literal

from pydantic import BaseModel, ConfigDict, Field

from difftide.diff.collapse import DEFAULT_COLLAPSE_PADDING
from difftide.highlight.themes import DEFAULT_THEME, Theme


def default_separator(count: int) -> str:
    return f"--- {count} unchanged ---"


class CollapseConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    padding: int = Field(default=DEFAULT_COLLAPSE_PADDING, ge=0)
    separator: Callable[[int], str] = Field(default=default_separator)

    @classmethod
    def from_template(cls, template: str, padding: int = DEFAULT_COLLAPSE_PADDING) -> CollapseConfig:
        return cls(padding=padding, separator=lambda count: template.format(count=count))


class TokenizeOptions(BaseModel):
    code: str
    diff_with: str | None = Field(default=None, description="Text to diff against")
    lang: str | None = None
    file_path: str | None = Field(default=None, description="Used for language detection when lang is unset")
    theme: Theme | str = DEFAULT_THEME
    collapse_unchanged: bool | CollapseConfig = False
    # An integer also sets the streaming window height for renderers.
    streaming: bool | int = False
    line_numbers: bool | Literal["both"] = False

    @property
    def is_diff(self) -> bool:
        return self.diff_with is not None

    @property
    def is_streaming(self) -> bool:
        return bool(self.streaming)

    def collapse_config(self) -> CollapseConfig | None:
        if not self.collapse_unchanged or not self.is_diff or self.is_streaming:
            return None
        if isinstance(self.collapse_unchanged, CollapseConfig):
            return self.collapse_unchanged
        return CollapseConfig()
