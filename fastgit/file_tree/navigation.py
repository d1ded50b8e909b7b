"""Selection index helpers over a projected row list.

All helpers are pure: they take the current rows/selection and return the
next selection without mutating anything.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from .types import TreeRow


def next_wrapped_index(selected: int | None, count: int) -> int | None:
    """Advance one row, wrapping from the last row back to the first."""
    if count <= 0:
        return None
    if selected is None or selected >= count - 1:
        return 0
    return selected + 1


def previous_wrapped_index(selected: int | None, count: int) -> int | None:
    """Retreat one row, wrapping from the first row to the last."""
    if count <= 0:
        return None
    if selected is None:
        return 0
    if selected <= 0 or selected > count - 1:
        return count - 1
    return selected - 1


def clamp_selection(selected: int | None, count: int) -> int | None:
    """Force ``selected`` into ``[0, count)`` or ``None`` for an empty list."""
    if count <= 0:
        return None
    if selected is None:
        return 0
    return max(0, min(selected, count - 1))


def index_of_path(rows: list[TreeRow], path: PurePosixPath) -> int | None:
    for idx, row in enumerate(rows):
        if row.path == path:
            return idx
    return None


def settle_selection(
    rows: list[TreeRow],
    previous_path: PurePosixPath | None,
    previous_index: int | None,
) -> int | None:
    """Re-establish selection after the projection changed shape.

    Keeps the previously selected path when it is still visible, otherwise
    clamps the old index into the new bounds.
    """
    if previous_path is not None:
        idx = index_of_path(rows, previous_path)
        if idx is not None:
            return idx
    return clamp_selection(previous_index, len(rows))


def parent_row_index(rows: list[TreeRow], selected: int) -> int | None:
    """Return the nearest preceding row that is shallower than ``selected``."""
    if selected < 0 or selected >= len(rows):
        return None
    depth = rows[selected].depth
    idx = selected - 1
    while idx >= 0:
        if rows[idx].depth < depth:
            return idx
        idx -= 1
    return None


def next_file_row_index(rows: list[TreeRow], selected: int | None, direction: int) -> int | None:
    """Return the next non-directory row in ``direction`` without wrapping."""
    if not rows or direction == 0:
        return None
    step = 1 if direction > 0 else -1
    idx = (selected if selected is not None else -step) + step
    while 0 <= idx < len(rows):
        if not rows[idx].is_dir:
            return idx
        idx += step
    return None
