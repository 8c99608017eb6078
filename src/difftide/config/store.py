"""Persist difftide settings as JSON under the user config directory."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from difftide.config.models import AppSettings
from difftide.paths import settings_path
from difftide.runtime_logging import get_runtime_logger


def _set_dotted(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    *parents, leaf = dotted_key.split(".")
    section = data
    for name in parents:
        section = section.get(name)  # type: ignore[assignment]
        if not isinstance(section, dict):
            raise KeyError(f"Unknown setting path: {dotted_key}")
    if leaf not in section:
        raise KeyError(f"Unknown setting path: {dotted_key}")
    section[leaf] = value


class SettingsStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or settings_path()
        self.logger = get_runtime_logger().bind(component="settings")

    @property
    def backup_path(self) -> Path:
        return self.path.with_suffix(".corrupt.json")

    def load(self) -> AppSettings:
        """Read settings, writing defaults when the file is missing or unreadable."""

        if not self.path.exists():
            return self._reset()

        raw = self.path.read_text(encoding="utf-8")
        try:
            return AppSettings.model_validate_json(raw)
        except ValidationError as exc:
            self.backup_path.write_text(raw, encoding="utf-8")
            self.logger.warning(
                "settings.corrupt",
                path=str(self.path),
                backup=str(self.backup_path),
                errors=exc.error_count(),
            )
            return self._reset()

    def _reset(self) -> AppSettings:
        settings = AppSettings()
        self.save(settings)
        return settings

    def save(self, settings: AppSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(settings.model_dump(mode="json"), indent=2, sort_keys=True)
        self.path.write_text(f"{payload}\n", encoding="utf-8")

    def update(self, dotted_key: str, value: Any) -> AppSettings:
        """Set one value such as ``diff.collapse_padding`` and persist it."""

        data = self.load().model_dump()
        _set_dotted(data, dotted_key, value)
        updated = AppSettings.model_validate(data)
        self.save(updated)
        self.logger.info("settings.updated", key=dotted_key)
        return updated
