"""Tree row datatypes shared by the tree model and renderers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath


@dataclass(frozen=True)
class TreeRow:
    """One visible row of the projected tree (root-relative path)."""

    path: PurePosixPath
    depth: int
    is_dir: bool
    expanded: bool = False

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)
