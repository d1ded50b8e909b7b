"""Key-driven state transitions for the ``App`` controller.

Git collaborators are patched so these tests exercise only the controller's
wiring between the tree, the diff pane, dialogs and the push worker.
"""

from __future__ import annotations

import unittest
from pathlib import Path, PurePosixPath
from unittest import mock

from fastgit.app import App
from fastgit.config import FastgitConfig
from fastgit.git_diff import DiffLine, DiffLineKind
from fastgit.git_runner import GitResult
from fastgit.git_status import STATUS_INDEX_MODIFIED, STATUS_WT_MODIFIED, STATUS_WT_NEW, StatusScan
from fastgit.push_worker import PushOutcome, PushRequest
from fastgit.state import WINDOW_BRANCHES, WINDOW_DIFF, WINDOW_LOG, WINDOW_TREE, BranchTab, DialogType

REPO = Path("/repo")


class _FakePushScheduler:
    def __init__(self) -> None:
        self.scheduled: list[Path] = []
        self.pending: list[PushOutcome] = []
        self.running = False

    def schedule(self, repo_root: Path) -> int | None:
        if self.running:
            return None
        self.running = True
        self.scheduled.append(repo_root)
        return len(self.scheduled)

    def finish(self, result: GitResult) -> None:
        self.running = False
        request = PushRequest(request_id=len(self.scheduled), repo_root=self.scheduled[-1])
        self.pending.append(PushOutcome(request=request, result=result))

    def drain_results(self) -> list[PushOutcome]:
        out, self.pending = self.pending, []
        return out


def _selected_path(app: App) -> str | None:
    row = app.tree.selected_row()
    return None if row is None else str(row.path)


class AppTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.now = 100.0
        self.signature = "sig-1"
        self.repo_root: Path | None = REPO
        self.statuses = {
            PurePosixPath("src/a.py"): STATUS_WT_MODIFIED,
            PurePosixPath("src/b.py"): STATUS_INDEX_MODIFIED,
            PurePosixPath("README.md"): STATUS_WT_NEW,
        }

        def fake_scan(_path: Path, _timeout: float) -> StatusScan:
            if self.repo_root is None:
                return StatusScan(repo_root=None)
            return StatusScan(repo_root=self.repo_root, git_dir=REPO / ".git", statuses=dict(self.statuses))

        self.diff_lines = [
            DiffLine(DiffLineKind.HEADER, "@@ -1 +1 @@"),
            DiffLine(DiffLineKind.DELETE, "-old"),
            DiffLine(DiffLineKind.ADD, "+new"),
        ]
        self.mocks: dict[str, mock.MagicMock] = {}
        targets = {
            "scan_status": mock.patch("fastgit.app.scan_status", side_effect=fake_scan),
            "load_file_diff": mock.patch("fastgit.app.load_file_diff", side_effect=lambda *_a: list(self.diff_lines)),
            "signature": mock.patch("fastgit.app.build_git_watch_signature", side_effect=lambda _d: self.signature),
            "save_keep": mock.patch("fastgit.app.save_keep_expanded_on_rescan"),
            "branches": mock.patch("fastgit.git_ops.list_local_branches", return_value=["feature", "main"]),
            "remotes": mock.patch("fastgit.git_ops.list_remotes", return_value=[("origin", "git@host:repo.git")]),
            "current": mock.patch("fastgit.git_ops.current_branch", return_value="main"),
            "log": mock.patch("fastgit.git_ops.commit_log", return_value=["abc123 first", "def456 second"]),
            "toggle_stage": mock.patch("fastgit.git_ops.toggle_stage", return_value=GitResult(True, "staged src/a.py")),
            "commit": mock.patch("fastgit.git_ops.commit", return_value=GitResult(True, "committed")),
            "checkout": mock.patch("fastgit.git_ops.checkout_branch", return_value=GitResult(True, "switched")),
        }
        for name, patcher in targets.items():
            self.mocks[name] = patcher.start()
            self.addCleanup(patcher.stop)

        self.scheduler = _FakePushScheduler()
        self.app = App(
            REPO,
            settings=FastgitConfig(rescan_interval_seconds=1.0),
            no_color=True,
            push_scheduler=self.scheduler,  # type: ignore[arg-type]
            clock=lambda: self.now,
        )
        self.app.start()

    def press(self, *keys: str) -> None:
        for key in keys:
            self.assertTrue(self.app.handle_key(key))


class StartupAndTreeTests(AppTestCase):
    def test_start_builds_collapsed_tree_and_repo_panels(self) -> None:
        state = self.app.state
        self.assertTrue(state.is_git_repo)
        self.assertEqual([str(row.path) for row in state.tree.rows], ["src", "README.md"])
        self.assertEqual(state.tree.selected, 0)
        self.assertEqual(state.branches, ["feature", "main"])
        self.assertEqual(state.current_branch, "main")
        self.assertEqual(state.commit_log, ["abc123 first", "def456 second"])
        self.assertEqual(state.branch_selected, 0)
        self.assertEqual(state.git_signature, "sig-1")

    def test_enter_on_directory_toggles_and_moving_previews_file_diff(self) -> None:
        self.press("ENTER")
        self.assertEqual([str(row.path) for row in self.app.tree.rows], ["src", "src/a.py", "src/b.py", "README.md"])
        self.assertEqual(self.app.state.window_index, WINDOW_TREE)

        self.press("j")
        self.assertEqual(_selected_path(self.app), "src/a.py")
        self.assertEqual(self.app.state.selected_file, PurePosixPath("src/a.py"))
        self.mocks["load_file_diff"].assert_called_with(
            REPO, PurePosixPath("src/a.py"), STATUS_WT_MODIFIED, self.app.timeout
        )
        self.assertEqual(self.app.state.diff_display, ["@@ -1 +1 @@", "-old", "+new"])

    def test_enter_on_file_focuses_diff_and_escape_returns_to_tree(self) -> None:
        self.press("k")
        self.assertEqual(_selected_path(self.app), "README.md")
        self.press("ENTER")
        self.assertEqual(self.app.state.window_index, WINDOW_DIFF)

        self.press("j", "j", "j")
        self.assertEqual(self.app.state.diff_scroll, 2)
        self.press("k")
        self.assertEqual(self.app.state.diff_scroll, 1)

        self.press("ESC")
        self.assertEqual(self.app.state.window_index, WINDOW_TREE)

    def test_left_collapses_and_right_expands_only_in_tree_window(self) -> None:
        self.press("l")
        self.assertEqual(len(self.app.tree), 4)
        self.press("j", "h")
        self.assertEqual(_selected_path(self.app), "src")
        self.press("h")
        self.assertEqual(len(self.app.tree), 2)

        self.press("TAB", "l")
        self.assertEqual(len(self.app.tree), 2)

    def test_next_file_and_expand_collapse_all(self) -> None:
        self.press("+")
        self.assertEqual(len(self.app.tree), 4)
        self.press("n")
        self.assertEqual(_selected_path(self.app), "src/a.py")
        self.press("n", "n", "N")
        self.assertEqual(_selected_path(self.app), "src/b.py")
        self.press("-")
        self.assertEqual(len(self.app.tree), 2)

    def test_sync_tree_scroll_keeps_selection_visible(self) -> None:
        self.statuses = {PurePosixPath(f"f{idx:02d}.txt"): STATUS_WT_NEW for idx in range(20)}
        self.app.rescan()
        state = self.app.state

        state.tree.select(15)
        self.app.sync_tree_scroll(5)
        self.assertEqual(state.tree_start, 11)
        state.tree.select(3)
        self.app.sync_tree_scroll(5)
        self.assertEqual(state.tree_start, 3)
        state.tree.previous()
        state.tree.select(0)
        state.tree.previous()
        self.app.sync_tree_scroll(5)
        self.assertEqual(state.tree_start, 15)


class RescanTests(AppTestCase):
    def test_rescan_with_same_paths_keeps_expansion(self) -> None:
        self.press("ENTER")
        self.statuses[PurePosixPath("src/a.py")] = STATUS_INDEX_MODIFIED

        changed = self.app.rescan()

        self.assertTrue(changed)
        self.assertEqual(len(self.app.tree), 4)
        self.assertEqual(self.app.state.statuses[PurePosixPath("src/a.py")], STATUS_INDEX_MODIFIED)

    def test_rescan_with_new_paths_rebuilds_tree(self) -> None:
        self.press("ENTER")
        self.statuses[PurePosixPath("docs/guide.md")] = STATUS_WT_NEW

        self.app.rescan()

        self.assertEqual([str(row.path) for row in self.app.tree.rows], ["docs", "src", "README.md"])
        self.assertEqual(self.app.tree.selected, 0)

    def test_forced_rescan_key_resets_expansion(self) -> None:
        self.press("ENTER", "s")
        self.assertEqual(len(self.app.tree), 2)

    def test_unchanged_rescan_reports_nothing(self) -> None:
        self.assertFalse(self.app.rescan())

    def test_leaving_repository_clears_view(self) -> None:
        self.repo_root = None
        self.app.rescan()

        state = self.app.state
        self.assertFalse(state.is_git_repo)
        self.assertEqual(state.tree.rows, [])
        self.assertIsNone(state.tree.selected)
        self.assertEqual(state.statuses, {})

    def test_maybe_refresh_waits_for_interval_and_watches_git_metadata(self) -> None:
        scans = self.mocks["scan_status"].call_count
        self.now += 0.5
        self.app.maybe_refresh()
        self.assertEqual(self.mocks["scan_status"].call_count, scans)

        self.now += 1.0
        self.app.maybe_refresh()
        self.assertEqual(self.mocks["scan_status"].call_count, scans + 1)

        log_calls = self.mocks["log"].call_count
        self.signature = "sig-2"
        self.app.maybe_refresh()
        self.assertEqual(self.mocks["log"].call_count, log_calls + 1)
        self.assertEqual(self.app.state.git_signature, "sig-2")
        self.assertEqual(self.mocks["scan_status"].call_count, scans + 1)

    def test_keep_expanded_toggle_persists_preference(self) -> None:
        self.press("K")
        self.assertTrue(self.app.tree.keep_expanded)
        self.mocks["save_keep"].assert_called_once_with(True)

        self.press("ENTER")
        self.statuses[PurePosixPath("src/c.py")] = STATUS_WT_NEW
        self.app.rescan()
        self.assertEqual(len(self.app.tree), 5)


class GitActionTests(AppTestCase):
    def test_space_stages_selected_file(self) -> None:
        self.press("ENTER", "j", " ")

        self.mocks["toggle_stage"].assert_called_once_with(
            REPO, PurePosixPath("src/a.py"), STATUS_WT_MODIFIED, self.app.timeout
        )
        self.assertEqual(self.app.state.status_message, "staged src/a.py")

    def test_space_on_directory_does_not_stage(self) -> None:
        self.press(" ")
        self.mocks["toggle_stage"].assert_not_called()
        self.assertEqual(self.app.state.status_message, "select a file to stage")

    def test_commit_dialog_collects_summary_and_description(self) -> None:
        self.press("c")
        self.assertTrue(self.app.state.show_commit_dialog)
        self.press("F", "i", "x", "TAB", "b", "o", "d", "y", "ENTER")

        self.mocks["commit"].assert_called_once_with(REPO, "Fix", "body")
        state = self.app.state
        self.assertFalse(state.show_commit_dialog)
        assert state.dialog is not None
        self.assertIs(state.dialog.dialog_type, DialogType.SUCCESS)
        self.assertEqual(state.commit_draft.summary, "")

        self.press("x")
        self.assertIsNone(state.dialog)

    def test_commit_without_staged_changes_warns(self) -> None:
        self.statuses = {PurePosixPath("a.txt"): STATUS_WT_MODIFIED}
        self.app.rescan()
        self.press("c", "m", "s", "g", "ENTER")

        self.mocks["commit"].assert_not_called()
        dialog = self.app.state.dialog
        assert dialog is not None
        self.assertIs(dialog.dialog_type, DialogType.WARNING)
        self.assertEqual(dialog.lines, ("No staged files found", "Please stage files first"))

    def test_commit_with_empty_summary_stays_open(self) -> None:
        self.press("c", "ENTER")
        self.assertTrue(self.app.state.show_commit_dialog)
        self.assertEqual(self.app.state.status_message, "commit summary is empty")
        self.press("ESC")
        self.assertFalse(self.app.state.show_commit_dialog)

    def test_commit_failure_shows_error_dialog(self) -> None:
        self.mocks["commit"].return_value = GitResult(False, "hook rejected")
        self.press("c", "x", "ENTER")

        dialog = self.app.state.dialog
        assert dialog is not None
        self.assertIs(dialog.dialog_type, DialogType.ERROR)
        self.assertEqual(dialog.lines, ("hook rejected",))

    def test_push_runs_in_background_and_reports_on_drain(self) -> None:
        self.press("p")
        self.assertTrue(self.app.state.push_in_progress)
        self.assertEqual(self.scheduler.scheduled, [REPO])

        self.press("p")
        self.assertEqual(self.app.state.status_message, "push already running")

        self.assertFalse(self.app.drain_push_results())
        self.scheduler.finish(GitResult(True, "pushed to remote"))
        self.assertTrue(self.app.drain_push_results())

        state = self.app.state
        self.assertFalse(state.push_in_progress)
        assert state.dialog is not None
        self.assertIs(state.dialog.dialog_type, DialogType.SUCCESS)

    def test_failed_push_shows_git_message(self) -> None:
        self.press("p")
        self.scheduler.finish(GitResult(False, "rejected: non-fast-forward"))
        self.app.drain_push_results()

        dialog = self.app.state.dialog
        assert dialog is not None
        self.assertIs(dialog.dialog_type, DialogType.WARNING)
        self.assertIn("rejected: non-fast-forward", dialog.lines)


class WindowAndBranchTests(AppTestCase):
    def test_tab_cycles_windows_and_wraps(self) -> None:
        order = []
        for _ in range(4):
            self.press("TAB")
            order.append(self.app.state.window_index)
        self.assertEqual(order, [WINDOW_LOG, WINDOW_BRANCHES, WINDOW_DIFF, WINDOW_TREE])
        self.press("BACKTAB")
        self.assertEqual(self.app.state.window_index, WINDOW_DIFF)

    def test_log_window_scrolls_within_bounds(self) -> None:
        self.press("TAB", "j", "j", "j")
        self.assertEqual(self.app.state.commit_log_scroll, 1)
        self.press("k", "k")
        self.assertEqual(self.app.state.commit_log_scroll, 0)

    def test_branch_selection_wraps_and_enter_checks_out(self) -> None:
        self.press("TAB", "TAB")
        self.assertEqual(self.app.state.window_index, WINDOW_BRANCHES)
        self.press("k")
        self.assertEqual(self.app.state.branch_selected, 1)
        self.press("j")
        self.assertEqual(self.app.state.branch_selected, 0)

        self.press("ENTER")
        self.mocks["checkout"].assert_called_once_with(REPO, "feature")
        dialog = self.app.state.dialog
        assert dialog is not None
        self.assertIs(dialog.dialog_type, DialogType.SUCCESS)

    def test_enter_on_current_branch_is_noop(self) -> None:
        self.press("TAB", "TAB", "j", "ENTER")
        self.mocks["checkout"].assert_not_called()
        self.assertEqual(self.app.state.status_message, "already on main")

    def test_b_switches_between_local_and_remote_tabs(self) -> None:
        self.press("b")
        self.assertIs(self.app.state.branch_tab, BranchTab.REMOTE)
        self.press("TAB", "TAB", "j", "ENTER")
        self.assertEqual(self.app.state.remote_selected, 0)
        self.mocks["checkout"].assert_not_called()
        self.press("b")
        self.assertIs(self.app.state.branch_tab, BranchTab.LOCAL)

    def test_help_and_quit(self) -> None:
        self.press("?")
        self.assertTrue(self.app.state.show_help)
        self.press("q")
        self.assertFalse(self.app.state.show_help)

        self.assertFalse(self.app.handle_key("q"))
        self.assertFalse(self.app.handle_key("CTRL_C"))


if __name__ == "__main__":
    unittest.main()
