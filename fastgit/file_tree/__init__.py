"""Hierarchical path-tree view model.

Builds a sorted node tree from flat root-relative paths, projects it into
visible rows and keeps a selection cursor coherent across changes.
"""

from __future__ import annotations

from .navigation import (
    clamp_selection,
    index_of_path,
    next_file_row_index,
    next_wrapped_index,
    parent_row_index,
    previous_wrapped_index,
    settle_selection,
)
from .node import FileNode
from .tree import FileTree, normalize_tree_path, project_rows
from .types import TreeRow

__all__ = [
    "FileNode",
    "FileTree",
    "TreeRow",
    "clamp_selection",
    "index_of_path",
    "next_file_row_index",
    "next_wrapped_index",
    "normalize_tree_path",
    "parent_row_index",
    "previous_wrapped_index",
    "project_rows",
    "settle_selection",
]
