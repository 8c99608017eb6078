from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from difftide.runtime_logging import configure_runtime_logging, get_runtime_logger, parse_level


class RuntimeLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        configure_runtime_logging(level="off")

    def test_writes_jsonl_and_filters_by_level(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "runtime.jsonl"
            logger = configure_runtime_logging(level="info", log_file=path)
            bound = logger.bind(component="highlighter")
            bound.debug("debug.hidden", foo="bar")
            bound.info("info.visible", foo="bar")

            lines = path.read_text(encoding="utf-8").splitlines()
            self.assertGreaterEqual(len(lines), 2)  # includes logging.configured event
            payloads = [json.loads(line) for line in lines]
            visible = next(item for item in payloads if item["event"] == "info.visible")
            self.assertEqual(visible["component"], "highlighter")
            self.assertFalse(any(item["event"] == "debug.hidden" for item in payloads))

    def test_uses_environment_variables(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "from-env.jsonl"
            with patch.dict(
                os.environ,
                {"DIFFTIDE_LOG_LEVEL": "debug", "DIFFTIDE_LOG_FILE": str(path)},
                clear=False,
            ):
                logger = configure_runtime_logging()
                logger.debug("env.debug", alpha=1)

            lines = path.read_text(encoding="utf-8").splitlines()
            payloads = [json.loads(line) for line in lines]
            self.assertTrue(any(item["event"] == "env.debug" for item in payloads))

    def test_timed_block_logs_elapsed_and_extra_fields(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "timed.jsonl"
            logger = configure_runtime_logging(level="debug", log_file=path)
            with logger.timed("work.done", lang="python") as extra:
                extra["items"] = 3

            payloads = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
            event = next(item for item in payloads if item["event"] == "work.done")
            self.assertEqual(event["lang"], "python")
            self.assertEqual(event["items"], 3)
            self.assertGreaterEqual(event["elapsed_ms"], 0)

    def test_timed_block_skips_logging_on_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "timed.jsonl"
            logger = configure_runtime_logging(level="debug", log_file=path)
            with self.assertRaises(ValueError):
                with logger.timed("work.done"):
                    raise ValueError("boom")

            events = [json.loads(line)["event"] for line in path.read_text(encoding="utf-8").splitlines()]
            self.assertNotIn("work.done", events)

    def test_bound_logger_adds_context(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bound.jsonl"
            logger = configure_runtime_logging(level="debug", log_file=path)
            logger.bind(component="pipeline").debug("tokenize.start", chars=4)
            logger.debug("plain.event")

            payloads = {item["event"]: item for item in map(json.loads, path.read_text(encoding="utf-8").splitlines())}
            self.assertEqual(payloads["tokenize.start"]["component"], "pipeline")
            self.assertEqual(payloads["tokenize.start"]["chars"], 4)
            self.assertNotIn("component", payloads["plain.event"])

    def test_off_disables_the_shared_logger(self) -> None:
        configure_runtime_logging(level="off")
        self.assertFalse(get_runtime_logger().enabled("error"))

    def test_parse_level_aliases(self) -> None:
        self.assertEqual(parse_level("WARN"), "warning")
        self.assertEqual(parse_level("none"), "off")
        self.assertEqual(parse_level("loud", default="info"), "info")


if __name__ == "__main__":
    unittest.main()
