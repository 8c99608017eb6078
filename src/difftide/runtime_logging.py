"""Structured JSONL runtime logging for difftide.

Every entry is one JSON object per line with ``ts``, ``level``, ``event`` and
``pid`` keys plus whatever fields the caller passes. Loggers created through
:meth:`RuntimeLogger.bind` share the parent's sink and lock.
"""

from __future__ import annotations

import json
import os
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Iterator, Literal

from difftide.paths import log_dir

LogLevel = Literal["off", "error", "warning", "info", "debug"]

LEVEL_ENV = "DIFFTIDE_LOG_LEVEL"
FILE_ENV = "DIFFTIDE_LOG_FILE"
DEFAULT_LEVEL: LogLevel = "warning"

_SEVERITY: dict[str, int] = {"debug": 10, "info": 20, "warning": 30, "error": 40, "off": 100}
_ALIASES = {"warn": "warning", "none": "off", "disabled": "off", "0": "off"}

_runtime_logger: "RuntimeLogger | None" = None


def parse_level(value: str | None, default: LogLevel = DEFAULT_LEVEL) -> LogLevel:
    if not value:
        return default
    normalized = value.strip().lower()
    normalized = _ALIASES.get(normalized, normalized)
    if normalized not in _SEVERITY:
        return default
    return normalized  # type: ignore[return-value]


def resolve_log_file(path: str | Path | None) -> Path:
    if path is None:
        return log_dir() / "difftide.runtime.jsonl"
    return Path(path).expanduser().resolve()


@dataclass(slots=True)
class RuntimeLogger:
    level: LogLevel
    sink_path: Path
    context: dict[str, Any] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def enabled(self, level: str) -> bool:
        threshold = _SEVERITY.get(self.level, _SEVERITY[DEFAULT_LEVEL])
        if threshold >= _SEVERITY["off"]:
            return False
        return _SEVERITY.get(level, _SEVERITY["debug"]) >= threshold

    def bind(self, **fields: Any) -> RuntimeLogger:
        """Child logger that adds ``fields`` to every entry."""

        return replace(self, context={**self.context, **fields}, _lock=self._lock)

    def log(self, level: str, event: str, **fields: Any) -> None:
        if not self.enabled(level):
            return
        entry = {
            **self.context,
            **fields,
            "ts": datetime.now(UTC).isoformat(),
            "level": level,
            "event": event,
            "pid": os.getpid(),
        }
        self._write(json.dumps(entry, sort_keys=True, default=str))

    def _write(self, line: str) -> None:
        with self._lock:
            self.sink_path.parent.mkdir(parents=True, exist_ok=True)
            with self.sink_path.open("a", encoding="utf-8") as handle:
                handle.write(f"{line}\n")

    def debug(self, event: str, **fields: Any) -> None:
        self.log("debug", event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self.log("info", event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self.log("warning", event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self.log("error", event, **fields)

    @contextmanager
    def timed(self, event: str, level: str = "debug", **fields: Any) -> Iterator[dict[str, Any]]:
        """Log ``event`` with ``elapsed_ms`` once the block exits.

        The yielded dict can be filled with extra fields while the block runs.
        Nothing is logged when the block raises.
        """

        extra: dict[str, Any] = dict(fields)
        started = time.perf_counter()
        yield extra
        extra["elapsed_ms"] = round((time.perf_counter() - started) * 1000, 3)
        self.log(level, event, **extra)


def _disabled_logger() -> RuntimeLogger:
    return RuntimeLogger(level="off", sink_path=Path(os.devnull))


def configure_runtime_logging(
    *,
    level: str | None = None,
    log_file: str | Path | None = None,
) -> RuntimeLogger:
    """Install the process-wide logger.

    Explicit arguments win over ``DIFFTIDE_LOG_LEVEL`` / ``DIFFTIDE_LOG_FILE``.
    """

    global _runtime_logger

    effective_level = parse_level(level or os.getenv(LEVEL_ENV))
    if effective_level == "off":
        _runtime_logger = _disabled_logger()
        return _runtime_logger

    sink = resolve_log_file(log_file or os.getenv(FILE_ENV))
    _runtime_logger = RuntimeLogger(level=effective_level, sink_path=sink)
    _runtime_logger.info("logging.configured", configured_level=effective_level, sink_path=str(sink))
    return _runtime_logger


def get_runtime_logger() -> RuntimeLogger:
    if _runtime_logger is None:
        return configure_runtime_logging()
    return _runtime_logger
