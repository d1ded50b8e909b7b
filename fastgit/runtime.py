"""Main interactive loop for the terminal UI.

Each iteration syncs the tree viewport, renders when dirty, then waits for
one key with a short timeout so idle ticks can drain push results and run
periodic rescans.
"""

from __future__ import annotations

import logging
import os
import sys

from .app import App
from .input import read_key
from .render import compose_screen, tree_visible_rows
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_POLL_TIMEOUT_MS = 100


def run_main_loop(app: App, terminal: TerminalController, stdin_fd: int) -> None:
    """Run until a quit key is handled."""
    state = app.state
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while True:
            width, height = terminal.size()
            if (width, height) != last_size:
                last_size = (width, height)
                state.dirty = True

            prev_tree_start = state.tree_start
            app.sync_tree_scroll(tree_visible_rows(height))
            if state.tree_start != prev_tree_start:
                state.dirty = True

            if state.dirty:
                terminal.write(compose_screen(state, width, height, app.theme))
                state.dirty = False

            key = read_key(stdin_fd, timeout_ms=KEY_POLL_TIMEOUT_MS)
            if key == "":
                app.drain_push_results()
                app.maybe_refresh()
                continue
            if not app.handle_key(key):
                logger.debug("quit requested")
                return


def run_app(app: App) -> None:
    """Start ``app`` on the controlling terminal."""
    if not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        raise SystemExit("fastgit needs an interactive terminal.")
    app.start()
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    run_main_loop(app, terminal, stdin_fd)
