"""Application controller wiring user actions to the tree and git collaborators.

``App`` owns the ``AppState`` and is only ever driven from the foreground
loop. Git work that can block for long (push) runs on a worker whose results
are applied here when drained.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path, PurePosixPath

from . import git_ops
from .config import FastgitConfig, save_keep_expanded_on_rescan
from .file_tree import FileTree, clamp_selection, next_wrapped_index, previous_wrapped_index
from .git_diff import colorize_diff_lines, load_file_diff
from .git_status import STATUS_INDEX_MASK, scan_status
from .highlight import DEFAULT_STYLE
from .key_registry import KeyComboBinding, KeyComboRegistry
from .push_worker import PushScheduler
from .state import (
    WINDOW_BRANCHES,
    WINDOW_COUNT,
    WINDOW_DIFF,
    WINDOW_LOG,
    WINDOW_TREE,
    AppState,
    BranchTab,
    Dialog,
    DialogType,
)
from .ui_theme import DEFAULT_THEME, UITheme
from .watch import build_git_watch_signature

logger = logging.getLogger(__name__)


class App:
    """Foreground controller for one browsing session."""

    def __init__(
        self,
        start_path: Path,
        settings: FastgitConfig | None = None,
        theme: UITheme | None = None,
        style: str = DEFAULT_STYLE,
        no_color: bool = False,
        push_scheduler: PushScheduler | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or FastgitConfig()
        self.theme = theme or DEFAULT_THEME
        self.style = style
        self.no_color = no_color
        self._clock = clock
        self.push_scheduler = push_scheduler or PushScheduler(git_ops.push)
        self.state = AppState(
            start_path=start_path.resolve(),
            tree=FileTree(keep_expanded=self.settings.keep_expanded_on_rescan),
        )
        self._normal_keys = self._build_normal_keys()

    @property
    def tree(self) -> FileTree:
        return self.state.tree

    @property
    def timeout(self) -> float:
        return self.settings.git_timeout_seconds

    # -- rescans -----------------------------------------------------------

    def start(self) -> None:
        """Initial scan plus branch/log panels."""
        self.rescan(force=True)
        self.refresh_repo_panels()
        self.preview_selection()

    def rescan(self, force: bool = False) -> bool:
        """Refresh statuses and rebuild the tree when the changed-path set moved.

        Returns whether anything visible changed.
        """
        state = self.state
        scan = scan_status(state.start_path, self.timeout)
        state.last_rescan = self._clock()

        if not scan.is_repo:
            changed = force or state.is_git_repo or bool(state.statuses)
            state.is_git_repo = False
            state.repo_root = None
            state.git_dir = None
            state.statuses = {}
            if changed:
                state.tree.rebuild([])
                self._clear_diff()
                state.dirty = True
            return changed

        state.is_git_repo = True
        state.repo_root = scan.repo_root
        state.git_dir = scan.git_dir
        state.tree.root_dir = scan.repo_root
        statuses_changed = scan.statuses != state.statuses
        path_set_changed = set(scan.statuses) != set(state.statuses)
        state.statuses = dict(scan.statuses)

        if force or path_set_changed:
            logger.debug("rebuilding tree from %d changed paths", len(scan.statuses))
            state.tree.rebuild(scan.changed_paths())
        if statuses_changed and state.selected_file is not None:
            if state.selected_file in state.statuses:
                self.load_diff(state.selected_file, reset_scroll=False)
            else:
                self._clear_diff()
        if force or statuses_changed:
            state.dirty = True
        return force or statuses_changed

    def refresh_repo_panels(self) -> None:
        """Reload branch, remote, current-branch and log data."""
        state = self.state
        state.git_signature = build_git_watch_signature(state.git_dir)
        if state.repo_root is None:
            state.branches = []
            state.remotes = []
            state.current_branch = ""
            state.commit_log = []
        else:
            state.branches = git_ops.list_local_branches(state.repo_root, self.timeout)
            state.remotes = git_ops.list_remotes(state.repo_root, self.timeout)
            state.current_branch = git_ops.current_branch(state.repo_root, self.timeout)
            state.commit_log = git_ops.commit_log(state.repo_root, self.settings.commit_log_limit, self.timeout)
        state.branch_selected = clamp_selection(state.branch_selected, len(state.branches))
        state.remote_selected = clamp_selection(state.remote_selected, len(state.remotes))
        state.commit_log_scroll = max(0, min(state.commit_log_scroll, len(state.commit_log) - 1))
        state.dirty = True

    def maybe_refresh(self) -> None:
        """Idle hook: periodic rescan plus panel refresh on git metadata changes."""
        state = self.state
        if self._clock() - state.last_rescan >= self.settings.rescan_interval_seconds:
            self.rescan()
        signature = build_git_watch_signature(state.git_dir)
        if signature != state.git_signature:
            self.refresh_repo_panels()

    def drain_push_results(self) -> bool:
        outcomes = self.push_scheduler.drain_results()
        for outcome in outcomes:
            state = self.state
            state.push_in_progress = False
            result = outcome.result
            if result.ok:
                state.dialog = Dialog(
                    DialogType.SUCCESS,
                    "Push Successful",
                    ("Your changes have been pushed to remote", "", "Press any key to continue"),
                )
            else:
                state.dialog = Dialog(
                    DialogType.WARNING,
                    "Push Failed",
                    (result.message, "", "Press any key to continue"),
                    width=70,
                )
            state.dirty = True
        if outcomes:
            self.refresh_repo_panels()
        return bool(outcomes)

    # -- tree ----------------------------------------------------------------

    def sync_tree_scroll(self, visible_rows: int) -> None:
        """Keep the selected row inside the tree viewport."""
        state = self.state
        visible_rows = max(1, visible_rows)
        selected = state.tree.selected
        start = state.tree_start
        if selected is None:
            start = 0
        elif selected < start:
            start = selected
        elif selected >= start + visible_rows:
            start = selected - visible_rows + 1
        state.tree_start = max(0, min(start, len(state.tree.rows) - visible_rows))

    def _clear_diff(self) -> None:
        state = self.state
        state.selected_file = None
        state.diff_lines = []
        state.diff_display = []
        state.diff_scroll = 0

    def load_diff(self, path: PurePosixPath, reset_scroll: bool = True) -> None:
        state = self.state
        if state.repo_root is None:
            return
        state.selected_file = path
        state.diff_lines = load_file_diff(state.repo_root, path, state.statuses.get(path), self.timeout)
        state.diff_display = colorize_diff_lines(
            state.diff_lines,
            path,
            theme=self.theme,
            style=self.style,
            no_color=self.no_color,
        )
        if reset_scroll:
            state.diff_scroll = 0
        else:
            state.diff_scroll = max(0, min(state.diff_scroll, len(state.diff_lines) - 1))
        state.dirty = True

    def preview_selection(self) -> None:
        """Show the diff of the selected file row, if any."""
        row = self.tree.selected_row()
        if row is None or row.is_dir:
            return
        if row.path != self.state.selected_file:
            self.load_diff(row.path)

    def select_file(self) -> None:
        """Enter on the tree: toggle a directory, or open a file's diff."""
        row = self.tree.selected_row()
        if row is None:
            return
        if row.is_dir:
            self.tree.toggle_expand()
        else:
            self.load_diff(row.path)
            self.state.window_index = WINDOW_DIFF
        self.state.dirty = True

    def toggle_stage(self) -> None:
        state = self.state
        row = self.tree.selected_row()
        if state.repo_root is None or row is None or row.is_dir:
            state.status_message = "select a file to stage"
            state.dirty = True
            return
        result = git_ops.toggle_stage(state.repo_root, row.path, state.statuses.get(row.path), self.timeout)
        state.status_message = result.message
        state.dirty = True
        self.rescan()

    def toggle_keep_expanded(self) -> None:
        tree = self.tree
        tree.keep_expanded = not tree.keep_expanded
        save_keep_expanded_on_rescan(tree.keep_expanded)
        mode = "kept" if tree.keep_expanded else "reset"
        self.state.status_message = f"expanded folders are {mode} on rescan"
        self.state.dirty = True

    # -- commit / push -------------------------------------------------------

    def open_commit_dialog(self) -> None:
        self.state.commit_draft.clear()
        self.state.show_commit_dialog = True
        self.state.dirty = True

    def close_commit_dialog(self) -> None:
        self.state.commit_draft.clear()
        self.state.show_commit_dialog = False
        self.state.dirty = True

    def has_staged_changes(self) -> bool:
        return any(flags & STATUS_INDEX_MASK for flags in self.state.statuses.values())

    def submit_commit(self) -> None:
        state = self.state
        draft = state.commit_draft
        if not draft.is_ready():
            state.status_message = "commit summary is empty"
            state.dirty = True
            return
        if state.repo_root is None or not self.has_staged_changes():
            self.close_commit_dialog()
            state.dialog = Dialog(
                DialogType.WARNING,
                "Commit Failed",
                ("No staged files found", "Please stage files first"),
            )
            return

        result = git_ops.commit(state.repo_root, draft.summary, draft.description)
        self.close_commit_dialog()
        if result.ok:
            state.dialog = Dialog(
                DialogType.SUCCESS,
                "Commit Successful",
                ("Your changes have been committed", "", "Press any key to continue"),
            )
        else:
            state.dialog = Dialog(DialogType.ERROR, "Commit Failed", (result.message,))
        self.rescan()
        self.refresh_repo_panels()

    def start_push(self) -> None:
        state = self.state
        if state.repo_root is None:
            state.status_message = "not a git repository"
        elif self.push_scheduler.schedule(state.repo_root) is None:
            state.status_message = "push already running"
        else:
            state.push_in_progress = True
        state.dirty = True

    # -- branches ------------------------------------------------------------

    def branch_tab_toggle(self) -> None:
        state = self.state
        state.branch_tab = BranchTab.REMOTE if state.branch_tab is BranchTab.LOCAL else BranchTab.LOCAL
        state.dirty = True

    def branch_move(self, direction: int) -> None:
        state = self.state
        step = next_wrapped_index if direction > 0 else previous_wrapped_index
        if state.branch_tab is BranchTab.LOCAL:
            state.branch_selected = step(state.branch_selected, len(state.branches))
        else:
            state.remote_selected = step(state.remote_selected, len(state.remotes))
        state.dirty = True

    def checkout_selected_branch(self) -> None:
        state = self.state
        if state.repo_root is None or state.branch_tab is not BranchTab.LOCAL or state.branch_selected is None:
            return
        branch = state.branches[state.branch_selected]
        if branch == state.current_branch:
            state.status_message = f"already on {branch}"
            state.dirty = True
            return
        result = git_ops.checkout_branch(state.repo_root, branch)
        if result.ok:
            state.dialog = Dialog(DialogType.SUCCESS, "Checkout", (result.message, "", "Press any key to continue"))
        else:
            state.dialog = Dialog(
                DialogType.WARNING,
                "Checkout Failed",
                (result.message, "", "Press any key to continue"),
                width=70,
            )
        self.rescan(force=True)
        self.refresh_repo_panels()

    # -- scrolling / focus ---------------------------------------------------

    def diff_scroll_down(self) -> None:
        state = self.state
        if state.diff_scroll + 1 < len(state.diff_lines):
            state.diff_scroll += 1
            state.dirty = True

    def diff_scroll_up(self) -> None:
        state = self.state
        if state.diff_scroll > 0:
            state.diff_scroll -= 1
            state.dirty = True

    def log_scroll(self, delta: int) -> None:
        state = self.state
        state.commit_log_scroll = max(0, min(state.commit_log_scroll + delta, len(state.commit_log) - 1))
        state.dirty = True

    def increase_window(self) -> None:
        self.state.window_index = (self.state.window_index + 1) % WINDOW_COUNT
        self.state.dirty = True

    def decrease_window(self) -> None:
        self.state.window_index = (self.state.window_index - 1) % WINDOW_COUNT
        self.state.dirty = True

    def move(self, direction: int) -> None:
        """Up/Down: act on whichever panel has focus."""
        window = self.state.window_index
        if window == WINDOW_TREE:
            if direction > 0:
                self.tree.next()
            else:
                self.tree.previous()
            self.preview_selection()
        elif window == WINDOW_LOG:
            self.log_scroll(direction)
        elif window == WINDOW_BRANCHES:
            self.branch_move(direction)
        elif direction > 0:
            self.diff_scroll_down()
        else:
            self.diff_scroll_up()
        self.state.dirty = True

    def _tree_only(self, action: Callable[[], object]) -> Callable[[], bool]:
        def run() -> bool:
            if self.state.window_index != WINDOW_TREE:
                return False
            action()
            self.preview_selection()
            self.state.dirty = True
            return True

        return run

    def activate(self) -> None:
        window = self.state.window_index
        if window == WINDOW_TREE:
            self.select_file()
        elif window == WINDOW_BRANCHES:
            self.checkout_selected_branch()

    def leave_focus(self) -> None:
        if self.state.window_index == WINDOW_DIFF:
            self.state.window_index = WINDOW_TREE
            self.state.dirty = True

    def toggle_help(self) -> None:
        self.state.show_help = not self.state.show_help
        self.state.dirty = True

    # -- key dispatch ----------------------------------------------------------

    def _build_normal_keys(self) -> KeyComboRegistry:
        tree = self.state.tree
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("TAB",), self.increase_window),
            KeyComboBinding(("BACKTAB",), self.decrease_window),
            KeyComboBinding(("DOWN", "j"), lambda: self.move(1)),
            KeyComboBinding(("UP", "k"), lambda: self.move(-1)),
            KeyComboBinding(("LEFT", "h"), self._tree_only(tree.collapse_or_select_parent)),
            KeyComboBinding(("RIGHT", "l"), self._tree_only(tree.toggle_expand)),
            KeyComboBinding(("n",), self._tree_only(lambda: tree.select_next_file(1))),
            KeyComboBinding(("N",), self._tree_only(lambda: tree.select_next_file(-1))),
            KeyComboBinding(("+",), self._tree_only(tree.expand_all)),
            KeyComboBinding(("-",), self._tree_only(tree.collapse_all)),
            KeyComboBinding(("ENTER",), self.activate),
            KeyComboBinding(("ESC",), self.leave_focus),
            KeyComboBinding((" ",), self.toggle_stage),
            KeyComboBinding(("s",), lambda: self.rescan(force=True)),
            KeyComboBinding(("c",), self.open_commit_dialog),
            KeyComboBinding(("p",), self.start_push),
            KeyComboBinding(("b",), self.branch_tab_toggle),
            KeyComboBinding(("K",), self.toggle_keep_expanded),
            KeyComboBinding(("?",), self.toggle_help),
        )

    def _handle_commit_key(self, key: str) -> None:
        draft = self.state.commit_draft
        if key == "ESC":
            self.close_commit_dialog()
        elif key == "TAB":
            draft.toggle_focus()
        elif key == "ENTER":
            self.submit_commit()
        elif key == "BACKSPACE":
            draft.backspace()
        elif key == "DELETE":
            draft.delete()
        elif key == "LEFT":
            draft.move_cursor(-1)
        elif key == "RIGHT":
            draft.move_cursor(1)
        elif len(key) == 1 and key.isprintable():
            draft.insert(key)
        self.state.dirty = True

    def handle_key(self, key: str) -> bool:
        """Handle one key token; return ``False`` when the session should end."""
        state = self.state
        if key == "CTRL_C":
            return False
        if state.dialog is not None:
            state.dialog = None
            state.dirty = True
            return True
        if state.show_commit_dialog:
            self._handle_commit_key(key)
            return True
        if state.show_help:
            state.show_help = False
            state.dirty = True
            return True
        if key == "q":
            return False
        self._normal_keys.dispatch(key)
        return True
