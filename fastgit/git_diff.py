"""Per-file diff loading and line classification."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .git_runner import DEFAULT_GIT_TIMEOUT_SECONDS, run_git
from .git_status import STATUS_INDEX_MASK, STATUS_WT_NEW
from .highlight import DEFAULT_STYLE, colorize_code_lines, sanitize_terminal_text
from .ui_theme import DEFAULT_THEME, UITheme

_HEADER_PREFIXES = ("diff ", "index ", "--- ", "+++ ", "@@", "new file mode", "deleted file mode", "similarity ", "rename ")


class DiffLineKind(enum.Enum):
    ADD = "add"
    DELETE = "delete"
    CONTEXT = "context"
    HEADER = "header"


@dataclass(frozen=True)
class DiffLine:
    kind: DiffLineKind
    content: str


def classify_diff_line(line: str) -> DiffLineKind:
    if line.startswith(_HEADER_PREFIXES):
        return DiffLineKind.HEADER
    if line.startswith("+"):
        return DiffLineKind.ADD
    if line.startswith("-"):
        return DiffLineKind.DELETE
    return DiffLineKind.CONTEXT


def parse_diff_text(diff_text: str) -> list[DiffLine]:
    return [DiffLine(classify_diff_line(line), line) for line in sanitize_terminal_text(diff_text).splitlines()]


def _diff_stdout(repo_root: Path, args: list[str], timeout_seconds: float) -> str:
    proc = run_git(repo_root, args, timeout_seconds)
    # ``--no-index`` exits with 1 when the inputs differ.
    if proc is None or proc.returncode not in (0, 1):
        return ""
    return proc.stdout


def load_file_diff(
    repo_root: Path,
    rel_path: PurePosixPath,
    flags: int | None,
    timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS,
) -> list[DiffLine]:
    """Load the diff for one changed file.

    Untracked files diff against an empty file; staged-only files show the
    index diff; anything else diffs the working copy against ``HEAD`` with a
    staged/unstaged fallback for repositories without a first commit.
    """
    path_arg = str(rel_path)
    status = flags or 0
    if status == STATUS_WT_NEW:
        diff_text = _diff_stdout(
            repo_root,
            ["diff", "--no-color", "--no-index", "--", "/dev/null", path_arg],
            timeout_seconds,
        )
        return parse_diff_text(diff_text)

    if status & STATUS_INDEX_MASK and not status & ~STATUS_INDEX_MASK:
        diff_text = _diff_stdout(repo_root, ["diff", "--cached", "--no-color", "--", path_arg], timeout_seconds)
        return parse_diff_text(diff_text)

    diff_text = _diff_stdout(repo_root, ["diff", "--no-color", "HEAD", "--", path_arg], timeout_seconds)
    if not diff_text:
        staged_text = _diff_stdout(repo_root, ["diff", "--cached", "--no-color", "--", path_arg], timeout_seconds)
        unstaged_text = _diff_stdout(repo_root, ["diff", "--no-color", "--", path_arg], timeout_seconds)
        diff_text = staged_text or unstaged_text
    return parse_diff_text(diff_text)


def colorize_diff_lines(
    diff_lines: list[DiffLine],
    path: PurePosixPath,
    theme: UITheme | None = None,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> list[str]:
    """Render classified diff lines into display strings for the diff pane."""
    if no_color:
        return [line.content for line in diff_lines]

    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    code_indices = [idx for idx, line in enumerate(diff_lines) if line.kind is not DiffLineKind.HEADER]
    code_bodies = [diff_lines[idx].content[1:] for idx in code_indices]
    colored_bodies = dict(zip(code_indices, colorize_code_lines(code_bodies, path, style)))
    marker_colors = {
        DiffLineKind.ADD: active_theme.diff_add,
        DiffLineKind.DELETE: active_theme.diff_delete,
        DiffLineKind.CONTEXT: active_theme.diff_context,
    }

    out: list[str] = []
    for idx, line in enumerate(diff_lines):
        if line.kind is DiffLineKind.HEADER:
            out.append(f"{active_theme.diff_header}{line.content}{reset}")
            continue
        marker = line.content[:1]
        body = colored_bodies.get(idx, line.content[1:])
        out.append(f"{marker_colors[line.kind]}{marker}{reset}{body}")
    return out
