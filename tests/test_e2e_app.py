from __future__ import annotations

import unittest
import warnings
from typing import Callable

from textual.pilot import Pilot
from textual.widgets import Static

from difftide.app import StreamingDemoApp
from difftide.config.models import AppSettings, DiffSettings, StreamingSettings
from difftide.model import TokenizedCode

warnings.filterwarnings("ignore", category=ResourceWarning)

BEFORE = "".join(f"def f{n}():\n    return {n}\n" for n in range(1, 16))
AFTER = BEFORE.replace("return 8\n", "return 800\n")


class StreamingDemoAppTests(unittest.IsolatedAsyncioTestCase):
    def _make_app(self, **settings_overrides: object) -> StreamingDemoApp:
        settings = AppSettings(
            diff=DiffSettings(collapse_padding=2),
            streaming=StreamingSettings(chunk_min=120, chunk_max=120, delay_ms_max=0, window=8),
            **settings_overrides,
        )
        return StreamingDemoApp(before=BEFORE, after=AFTER, file_path="demo.py", settings=settings, seed=7, log_level="off")

    async def _wait_for(self, pilot: Pilot, condition: Callable[[], bool]) -> None:
        for _ in range(100):
            if condition():
                return
            await pilot.pause(0.05)
        self.fail("condition not reached")

    async def test_final_diff_is_shown_collapsed(self) -> None:
        app = self._make_app()
        async with app.run_test() as pilot:
            await self._wait_for(pilot, lambda: app.view.code is not None)
            code = app.view.code
            assert code is not None
            self.assertEqual(len(code.collapsed_indices()), 2)
            self.assertIn("2 collapsed", str(app.query_one("#status", Static).render()))

    async def test_expand_and_toggle_collapse(self) -> None:
        app = self._make_app()
        async with app.run_test() as pilot:
            await self._wait_for(pilot, lambda: app.view.code is not None)
            code = app.view.code
            assert code is not None
            first = code.collapsed_indices()[0]

            self.assertTrue(app.view.toggle_section(first))
            self.assertEqual(app.view.expanded, {first})
            self.assertFalse(app.view.toggle_section(first + 1))

            await pilot.press("e")
            self.assertEqual(app.view.expanded, set(code.collapsed_indices()))

            await pilot.press("c")
            await pilot.pause()
            self.assertFalse(app.collapse)
            refreshed = app.view.code
            assert refreshed is not None
            self.assertEqual(refreshed.collapsed_indices(), [])

    async def test_stream_replays_chunks_then_shows_final(self) -> None:
        app = self._make_app()
        async with app.run_test() as pilot:
            await self._wait_for(pilot, lambda: app.view.code is not None)
            shown: list[TokenizedCode] = []
            original_show = app.view.show

            def record(code: TokenizedCode, *, window: int | None = None) -> None:
                shown.append(code)
                original_show(code, window=window)

            app.view.show = record  # type: ignore[method-assign]
            await pilot.press("s")
            await self._wait_for(pilot, lambda: bool(shown) and not app.streaming)

            streamed = shown[:-1]
            self.assertGreater(len(streamed), 1)
            for code in streamed:
                self.assertTrue(code.is_streaming)
                self.assertEqual([item.kind for item in code.items].count("current"), 1)
            self.assertFalse(shown[-1].is_streaming)
            self.assertEqual(len(shown[-1].collapsed_indices()), 2)


if __name__ == "__main__":
    unittest.main()
