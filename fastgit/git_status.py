"""Working-copy status scan and per-path status classification.

Parses ``git status --porcelain=v1 -z`` into libgit2-style status bit flags
keyed by repository-relative path. The changed-path list feeds the file
tree rebuild; the flags drive the tree's status icons and colors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from .git_runner import DEFAULT_GIT_TIMEOUT_SECONDS, resolve_repo_and_git_dir, run_git
from .ui_theme import DEFAULT_THEME, UITheme

STATUS_INDEX_NEW = 1 << 0
STATUS_INDEX_MODIFIED = 1 << 1
STATUS_INDEX_DELETED = 1 << 2
STATUS_INDEX_RENAMED = 1 << 3
STATUS_INDEX_TYPECHANGE = 1 << 4
STATUS_WT_NEW = 1 << 7
STATUS_WT_MODIFIED = 1 << 8
STATUS_WT_DELETED = 1 << 9
STATUS_WT_TYPECHANGE = 1 << 10
STATUS_WT_RENAMED = 1 << 11
STATUS_CONFLICTED = 1 << 15

STATUS_INDEX_MASK = (
    STATUS_INDEX_NEW
    | STATUS_INDEX_MODIFIED
    | STATUS_INDEX_DELETED
    | STATUS_INDEX_RENAMED
    | STATUS_INDEX_TYPECHANGE
)

_INDEX_CODES = {
    "A": STATUS_INDEX_NEW,
    "C": STATUS_INDEX_NEW,
    "M": STATUS_INDEX_MODIFIED,
    "D": STATUS_INDEX_DELETED,
    "R": STATUS_INDEX_RENAMED,
    "T": STATUS_INDEX_TYPECHANGE,
}
_WORKTREE_CODES = {
    "M": STATUS_WT_MODIFIED,
    "D": STATUS_WT_DELETED,
    "R": STATUS_WT_RENAMED,
    "T": STATUS_WT_TYPECHANGE,
}
_UNMERGED_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}


def flags_for_porcelain(code: str) -> int:
    """Translate a two-letter porcelain ``XY`` code into status flags."""
    if code == "??":
        return STATUS_WT_NEW
    if code in _UNMERGED_CODES:
        return STATUS_CONFLICTED
    if len(code) != 2:
        return 0
    return _INDEX_CODES.get(code[0], 0) | _WORKTREE_CODES.get(code[1], 0)


def iter_porcelain_records(output: str) -> list[tuple[str, str]]:
    """Split ``-z`` porcelain output into ``(code, path)`` records."""
    records: list[tuple[str, str]] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue
        if len(token) < 4 or token[2] != " ":
            continue

        code = token[:2]
        records.append((code, token[3:]))

        # Renames and copies carry the source path as an extra token.
        if "R" in code or "C" in code:
            index += 1

    return records


@dataclass(frozen=True)
class StatusScan:
    """Result of one working-copy rescan."""

    repo_root: Path | None
    git_dir: Path | None = None
    statuses: dict[PurePosixPath, int] = field(default_factory=dict)

    @property
    def is_repo(self) -> bool:
        return self.repo_root is not None

    def changed_paths(self) -> list[PurePosixPath]:
        return list(self.statuses)


def scan_status(path: Path, timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS) -> StatusScan:
    """Collect per-file status flags for the repository containing ``path``."""
    repo_root, git_dir = resolve_repo_and_git_dir(path, timeout_seconds)
    if repo_root is None:
        return StatusScan(repo_root=None)

    proc = run_git(
        repo_root,
        ["status", "--porcelain=v1", "-z", "--untracked-files=all"],
        timeout_seconds,
    )
    if proc is None or proc.returncode != 0:
        return StatusScan(repo_root=repo_root, git_dir=git_dir)

    statuses: dict[PurePosixPath, int] = {}
    for code, rel_path in iter_porcelain_records(proc.stdout):
        rel_path = rel_path.rstrip("/")
        if not rel_path or code == "!!":
            continue
        key = PurePosixPath(rel_path)
        statuses[key] = statuses.get(key, 0) | flags_for_porcelain(code)
    return StatusScan(repo_root=repo_root, git_dir=git_dir, statuses=statuses)


def status_icon(flags: int | None) -> str:
    """Short status label: ``S`` for anything staged, else the worktree change."""
    if not flags:
        return "??"
    if flags & STATUS_INDEX_MASK:
        return "S"
    if flags & STATUS_WT_MODIFIED:
        return "M"
    if flags & STATUS_WT_NEW:
        return "N"
    if flags & STATUS_WT_DELETED:
        return "D"
    if flags & STATUS_WT_RENAMED:
        return "R"
    if flags & STATUS_WT_TYPECHANGE:
        return "T"
    return "??"


def status_color(flags: int | None, theme: UITheme | None = None) -> str:
    """ANSI color for a status; unknown paths use the default file color."""
    active_theme = theme or DEFAULT_THEME
    if flags is None:
        return active_theme.tree_file_default
    if flags & STATUS_INDEX_MASK:
        return active_theme.status_staged
    if flags & STATUS_WT_NEW:
        return active_theme.status_new
    if flags & STATUS_WT_MODIFIED:
        return active_theme.status_modified
    if flags & STATUS_WT_DELETED:
        return active_theme.status_deleted
    if flags & STATUS_WT_RENAMED:
        return active_theme.status_renamed
    return active_theme.status_other
