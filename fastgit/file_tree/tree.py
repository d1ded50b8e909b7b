"""Navigable path tree: rebuild, projection, selection, expand/collapse.

``FileTree`` turns an unordered list of root-relative paths into a sorted
node hierarchy and keeps a flat projection of the visible rows plus an
optional selection index into it. Every public method leaves the tree,
projection and selection mutually consistent and none of them raise.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePath, PurePosixPath

from .navigation import (
    clamp_selection,
    next_file_row_index,
    next_wrapped_index,
    parent_row_index,
    previous_wrapped_index,
    settle_selection,
)
from .node import FileNode
from .types import TreeRow

ROOT_PATH = PurePosixPath(".")


def normalize_tree_path(path: str | PurePath, root_dir: PurePath | None = None) -> PurePosixPath | None:
    """Convert ``path`` to a root-relative POSIX path.

    Absolute paths under ``root_dir`` are made relative to it. Empty paths
    normalize to ``None`` and are skipped by callers.
    """
    if isinstance(path, PurePath):
        text = path.as_posix()
    else:
        text = str(path).replace("\\", "/")
    text = text.rstrip("/")
    if not text:
        return None
    candidate = PurePosixPath(text)
    if candidate.is_absolute() and root_dir is not None:
        root_posix = PurePosixPath(PurePath(root_dir).as_posix())
        try:
            candidate = candidate.relative_to(root_posix)
        except ValueError:
            pass
    if not candidate.parts or candidate == ROOT_PATH:
        return None
    return candidate


def project_rows(root: FileNode) -> list[TreeRow]:
    """Flatten ``root`` into visible rows, descending only into expanded dirs."""
    rows: list[TreeRow] = []

    def walk(node: FileNode, depth: int) -> None:
        rows.append(TreeRow(node.path, depth, node.is_dir, node.expanded))
        if node.expanded:
            for child in node.children:
                walk(child, depth + 1)

    for child in root.children:
        walk(child, 0)
    return rows


class FileTree:
    """Tree model plus its visible projection and selection cursor."""

    def __init__(self, root_dir: PurePath | None = None, keep_expanded: bool = False) -> None:
        self.root_dir = root_dir
        self.keep_expanded = keep_expanded
        self.root = FileNode(ROOT_PATH, is_dir=True)
        self.root.expanded = True
        self.rows: list[TreeRow] = []
        self.selected: int | None = None

    def __len__(self) -> int:
        return len(self.rows)

    def rebuild(self, paths: Iterable[str | PurePath]) -> None:
        """Replace every node with a fresh tree built from ``paths``.

        Expansion state is discarded unless ``keep_expanded`` is set, in which
        case directories that survive the rebuild keep their flag and the
        selection follows the previously selected path.
        """
        previous_expanded = self.root.expanded_paths() if self.keep_expanded else set()
        previous_row = self.selected_row() if self.keep_expanded else None

        self.root.children = []
        for raw_path in paths:
            path = normalize_tree_path(raw_path, self.root_dir)
            if path is None:
                continue
            self.root.insert(path.parts)

        for expanded_path in previous_expanded:
            node = self.root.find(expanded_path)
            if node is not None and node.is_dir:
                node.expanded = True

        self.rows = project_rows(self.root)
        if previous_row is not None:
            self.selected = settle_selection(self.rows, previous_row.path, self.selected)
        else:
            self.selected = 0 if self.rows else None

    def refresh(self) -> None:
        """Recompute the projection and settle selection onto the same path."""
        previous_row = self.selected_row()
        previous_index = self.selected
        self.rows = project_rows(self.root)
        self.selected = settle_selection(
            self.rows,
            previous_row.path if previous_row is not None else None,
            previous_index,
        )

    def find_node(self, path: str | PurePath) -> FileNode | None:
        target = normalize_tree_path(path, self.root_dir)
        if target is None:
            return self.root
        return self.root.find(target)

    def selected_row(self) -> TreeRow | None:
        if self.selected is None or not 0 <= self.selected < len(self.rows):
            return None
        return self.rows[self.selected]

    def select(self, index: int) -> None:
        self.selected = clamp_selection(index, len(self.rows))

    def next(self) -> None:
        self.selected = next_wrapped_index(self.selected, len(self.rows))

    def previous(self) -> None:
        self.selected = previous_wrapped_index(self.selected, len(self.rows))

    def select_next_file(self, direction: int) -> bool:
        """Move to the next visible file row in ``direction``; return whether it moved."""
        idx = next_file_row_index(self.rows, self.selected, direction)
        if idx is None:
            return False
        self.selected = idx
        return True

    def toggle_expand(self) -> None:
        """Flip expansion of the selected directory row."""
        row = self.selected_row()
        if row is None or not row.is_dir:
            return
        node = self.root.find(row.path)
        if node is None:
            return
        node.expanded = not node.expanded
        self.refresh()

    def collapse_or_select_parent(self) -> None:
        """Collapse the selected expanded directory, else jump to its parent row."""
        row = self.selected_row()
        if row is None or self.selected is None:
            return
        if row.is_dir:
            node = self.root.find(row.path)
            if node is not None and node.expanded:
                node.expanded = False
                self.refresh()
                return
        parent_idx = parent_row_index(self.rows, self.selected)
        if parent_idx is not None:
            self.selected = parent_idx

    def _set_expanded_everywhere(self, expanded: bool) -> None:
        for node in self.root.iter_nodes():
            if node.is_dir:
                node.expanded = expanded
        self.refresh()

    def expand_all(self) -> None:
        self._set_expanded_everywhere(True)

    def collapse_all(self) -> None:
        self._set_expanded_everywhere(False)
