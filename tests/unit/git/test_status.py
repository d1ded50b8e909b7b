"""Tests for porcelain parsing and status icon/color classification."""

from __future__ import annotations

import unittest
from pathlib import Path, PurePosixPath
from unittest import mock

from fastgit import git_status
from fastgit.git_status import (
    STATUS_CONFLICTED,
    STATUS_INDEX_DELETED,
    STATUS_INDEX_MODIFIED,
    STATUS_INDEX_NEW,
    STATUS_INDEX_RENAMED,
    STATUS_WT_DELETED,
    STATUS_WT_MODIFIED,
    STATUS_WT_NEW,
    STATUS_WT_RENAMED,
    STATUS_WT_TYPECHANGE,
    StatusScan,
    flags_for_porcelain,
    iter_porcelain_records,
    status_color,
    status_icon,
)
from fastgit.ui_theme import DEFAULT_THEME


class PorcelainParsingTests(unittest.TestCase):
    def test_flags_for_porcelain_combines_index_and_worktree_columns(self) -> None:
        self.assertEqual(flags_for_porcelain("??"), STATUS_WT_NEW)
        self.assertEqual(flags_for_porcelain(" M"), STATUS_WT_MODIFIED)
        self.assertEqual(flags_for_porcelain("M "), STATUS_INDEX_MODIFIED)
        self.assertEqual(flags_for_porcelain("MM"), STATUS_INDEX_MODIFIED | STATUS_WT_MODIFIED)
        self.assertEqual(flags_for_porcelain("A "), STATUS_INDEX_NEW)
        self.assertEqual(flags_for_porcelain("D "), STATUS_INDEX_DELETED)
        self.assertEqual(flags_for_porcelain(" D"), STATUS_WT_DELETED)
        self.assertEqual(flags_for_porcelain("R "), STATUS_INDEX_RENAMED)
        self.assertEqual(flags_for_porcelain("UU"), STATUS_CONFLICTED)
        self.assertEqual(flags_for_porcelain("!"), 0)

    def test_iter_porcelain_records_skips_rename_source_token(self) -> None:
        output = " M src/a.py\0R  new.py\0old.py\0?? notes.txt\0"

        self.assertEqual(
            iter_porcelain_records(output),
            [(" M", "src/a.py"), ("R ", "new.py"), ("??", "notes.txt")],
        )

    def test_iter_porcelain_records_keeps_spaces_in_paths(self) -> None:
        self.assertEqual(iter_porcelain_records("?? dir/with space.txt\0"), [("??", "dir/with space.txt")])

    def test_scan_status_outside_repository_is_empty(self) -> None:
        with mock.patch.object(git_status, "resolve_repo_and_git_dir", return_value=(None, None)):
            scan = git_status.scan_status(Path("/nowhere"))

        self.assertFalse(scan.is_repo)
        self.assertEqual(scan.changed_paths(), [])

    def test_status_scan_helpers(self) -> None:
        scan = StatusScan(
            repo_root=Path("/repo"),
            statuses={PurePosixPath("a.py"): STATUS_WT_MODIFIED, PurePosixPath("b.py"): STATUS_INDEX_NEW},
        )
        self.assertTrue(scan.is_repo)
        self.assertEqual(scan.changed_paths(), [PurePosixPath("a.py"), PurePosixPath("b.py")])


class StatusPresentationTests(unittest.TestCase):
    def test_any_index_bit_shows_staged_icon(self) -> None:
        self.assertEqual(status_icon(STATUS_INDEX_MODIFIED | STATUS_WT_MODIFIED), "S")
        self.assertEqual(status_icon(STATUS_INDEX_NEW), "S")

    def test_worktree_icons_follow_priority(self) -> None:
        self.assertEqual(status_icon(STATUS_WT_MODIFIED | STATUS_WT_DELETED), "M")
        self.assertEqual(status_icon(STATUS_WT_NEW), "N")
        self.assertEqual(status_icon(STATUS_WT_DELETED), "D")
        self.assertEqual(status_icon(STATUS_WT_RENAMED), "R")
        self.assertEqual(status_icon(STATUS_WT_TYPECHANGE), "T")
        self.assertEqual(status_icon(STATUS_CONFLICTED), "??")
        self.assertEqual(status_icon(None), "??")

    def test_colors_use_theme_palette(self) -> None:
        theme = DEFAULT_THEME
        self.assertEqual(status_color(STATUS_INDEX_MODIFIED, theme), theme.status_staged)
        self.assertEqual(status_color(STATUS_WT_NEW, theme), theme.status_new)
        self.assertEqual(status_color(STATUS_WT_MODIFIED, theme), theme.status_modified)
        self.assertEqual(status_color(STATUS_WT_DELETED, theme), theme.status_deleted)
        self.assertEqual(status_color(STATUS_WT_RENAMED, theme), theme.status_renamed)
        self.assertEqual(status_color(STATUS_CONFLICTED, theme), theme.status_other)
        self.assertEqual(status_color(None, theme), theme.tree_file_default)


if __name__ == "__main__":
    unittest.main()
