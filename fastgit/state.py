"""Mutable UI state owned by the foreground loop."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from .commit_message import CommitDraft
from .file_tree import FileTree
from .git_diff import DiffLine

WINDOW_TREE = 0
WINDOW_LOG = 1
WINDOW_BRANCHES = 2
WINDOW_DIFF = 3
WINDOW_COUNT = 4
WINDOW_TITLES = ("Tree", "Log", "Branches", "Diff")


class BranchTab(enum.Enum):
    LOCAL = "local"
    REMOTE = "remote"


class DialogType(enum.Enum):
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"
    SUCCESS = "success"


@dataclass(frozen=True)
class Dialog:
    """A modal message box dismissed by any key."""

    dialog_type: DialogType
    title: str
    lines: tuple[str, ...]
    width: int = 60


@dataclass
class AppState:
    start_path: Path
    tree: FileTree
    repo_root: Path | None = None
    git_dir: Path | None = None
    is_git_repo: bool = False
    statuses: dict[PurePosixPath, int] = field(default_factory=dict)
    window_index: int = WINDOW_TREE
    tree_start: int = 0
    selected_file: PurePosixPath | None = None
    diff_lines: list[DiffLine] = field(default_factory=list)
    diff_display: list[str] = field(default_factory=list)
    diff_scroll: int = 0
    commit_log: list[str] = field(default_factory=list)
    commit_log_scroll: int = 0
    current_branch: str = ""
    branch_tab: BranchTab = BranchTab.LOCAL
    branches: list[str] = field(default_factory=list)
    branch_selected: int | None = None
    remotes: list[tuple[str, str]] = field(default_factory=list)
    remote_selected: int | None = None
    commit_draft: CommitDraft = field(default_factory=CommitDraft)
    show_commit_dialog: bool = False
    dialog: Dialog | None = None
    push_in_progress: bool = False
    show_help: bool = False
    status_message: str = ""
    dirty: bool = True
    git_signature: str = ""
    last_rescan: float = 0.0
