"""Tests for the foreground event loop wiring."""

from __future__ import annotations

import contextlib
import unittest
from pathlib import Path
from unittest import mock

from fastgit import runtime
from fastgit.app import App
from fastgit.config import FastgitConfig
from fastgit.ui_theme import PLAIN_THEME


class _FakeTerminal:
    def __init__(self) -> None:
        self.writes: list[str] = []
        self.raw_entered = 0

    def size(self) -> tuple[int, int]:
        return 80, 24

    def write(self, payload: str) -> None:
        self.writes.append(payload)

    @contextlib.contextmanager
    def raw_mode(self):
        self.raw_entered += 1
        yield


class RuntimeLoopTests(unittest.TestCase):
    def setUp(self) -> None:
        self.app = App(Path("/repo"), settings=FastgitConfig(), theme=PLAIN_THEME, no_color=True)
        self.app.state.tree.rebuild(["a.txt", "b.txt"])
        self.app.state.is_git_repo = True
        self.terminal = _FakeTerminal()

    def test_idle_ticks_drain_and_refresh_then_quit(self) -> None:
        with (
            mock.patch("fastgit.runtime.read_key", side_effect=["", "j", "q"]),
            mock.patch.object(self.app, "maybe_refresh") as maybe_refresh,
            mock.patch.object(self.app, "drain_push_results", return_value=False) as drain,
        ):
            runtime.run_main_loop(self.app, self.terminal, stdin_fd=0)  # type: ignore[arg-type]

        self.assertEqual(maybe_refresh.call_count, 1)
        self.assertEqual(drain.call_count, 1)
        self.assertEqual(self.app.state.tree.selected, 1)
        self.assertEqual(self.terminal.raw_entered, 1)

    def test_renders_only_when_dirty(self) -> None:
        with (
            mock.patch("fastgit.runtime.read_key", side_effect=["", "", "j", "q"]),
            mock.patch.object(self.app, "maybe_refresh"),
            mock.patch.object(self.app, "drain_push_results", return_value=False),
        ):
            runtime.run_main_loop(self.app, self.terminal, stdin_fd=0)  # type: ignore[arg-type]

        self.assertEqual(len(self.terminal.writes), 2)
        self.assertTrue(self.terminal.writes[0].startswith("\033[H"))
        self.assertIn("▶", self.terminal.writes[1])


if __name__ == "__main__":
    unittest.main()
