from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from difftide.config.models import AppearanceSettings, AppSettings
from difftide.config.store import SettingsStore
from difftide.options import CollapseConfig, TokenizeOptions
from difftide.runtime_logging import configure_runtime_logging


class SettingsStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        configure_runtime_logging(level="off")

    def test_load_save_update_roundtrip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            store = SettingsStore(path)

            settings = store.load()
            self.assertTrue(path.exists())
            self.assertEqual(settings.schema_version, 1)

            updated = store.update("diff.collapse_padding", 5)
            self.assertEqual(updated.diff.collapse_padding, 5)

            reloaded = store.load()
            self.assertEqual(reloaded.diff.collapse_padding, 5)

    def test_unknown_key_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = SettingsStore(Path(tmp) / "settings.json")
            with self.assertRaises(KeyError):
                store.update("diff.nope", 1)
            with self.assertRaises(KeyError):
                store.update("nope.padding", 1)

    def test_separator_requires_count_placeholder(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = SettingsStore(Path(tmp) / "settings.json")
            with self.assertRaises(ValidationError):
                store.update("diff.separator", "hidden lines")

    def test_corrupt_file_is_backed_up_and_reset(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            path.write_text("{not json", encoding="utf-8")

            settings = SettingsStore(path).load()

            self.assertEqual(settings, AppSettings())
            self.assertEqual(path.with_suffix(".corrupt.json").read_text(encoding="utf-8"), "{not json")
            self.assertEqual(json.loads(path.read_text(encoding="utf-8"))["schema_version"], 1)

    def test_line_number_modes(self) -> None:
        self.assertEqual(AppearanceSettings(line_numbers="both").line_numbers_option(), "both")
        self.assertIs(AppearanceSettings(line_numbers="on").line_numbers_option(), True)
        self.assertIs(AppearanceSettings(line_numbers="off").line_numbers_option(), False)


class TokenizeOptionsTests(unittest.TestCase):
    def test_collapse_only_applies_to_finished_diffs(self) -> None:
        self.assertIsNone(TokenizeOptions(code="a", collapse_unchanged=True).collapse_config())
        self.assertIsNone(
            TokenizeOptions(code="a", diff_with="b", collapse_unchanged=True, streaming=True).collapse_config()
        )
        config = TokenizeOptions(code="a", diff_with="b", collapse_unchanged=True).collapse_config()
        assert config is not None
        self.assertEqual(config.padding, 3)
        self.assertEqual(config.separator(4), "--- 4 unchanged ---")

    def test_collapse_template(self) -> None:
        config = CollapseConfig.from_template("{count} lines hidden", padding=1)
        self.assertEqual(config.padding, 1)
        self.assertEqual(config.separator(7), "7 lines hidden")

    def test_negative_padding_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            CollapseConfig(padding=-1)

    def test_streaming_window_counts_as_streaming(self) -> None:
        self.assertTrue(TokenizeOptions(code="a", streaming=12).is_streaming)
        self.assertFalse(TokenizeOptions(code="a").is_streaming)
        self.assertFalse(TokenizeOptions(code="a").is_diff)
        self.assertTrue(TokenizeOptions(code="a", diff_with="").is_diff)


if __name__ == "__main__":
    unittest.main()
