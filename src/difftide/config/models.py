"""Settings schema for difftide."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

LineNumberMode = Literal["off", "on", "both"]


class AppearanceSettings(BaseModel):
    theme: str = Field(default="monokai", description="Pygments style name")
    line_numbers: LineNumberMode = Field(default="both")

    def line_numbers_option(self) -> bool | Literal["both"]:
        if self.line_numbers == "both":
            return "both"
        return self.line_numbers == "on"


class DiffSettings(BaseModel):
    collapse_unchanged: bool = Field(default=True)
    collapse_padding: int = Field(default=3, ge=0, le=1000)
    separator: str = Field(default="--- {count} unchanged ---")

    @field_validator("separator")
    @classmethod
    def validate_separator(cls, value: str) -> str:
        if "{count}" not in value:
            raise ValueError("separator must contain a {count} placeholder")
        return value


class StreamingSettings(BaseModel):
    window: int = Field(default=20, ge=1, le=1000)
    chunk_min: int = Field(default=15, ge=1)
    chunk_max: int = Field(default=30, ge=1)
    delay_ms_max: int = Field(default=30, ge=0)


class AppSettings(BaseModel):
    schema_version: int = Field(default=1)
    appearance: AppearanceSettings = Field(default_factory=AppearanceSettings)
    diff: DiffSettings = Field(default_factory=DiffSettings)
    streaming: StreamingSettings = Field(default_factory=StreamingSettings)
