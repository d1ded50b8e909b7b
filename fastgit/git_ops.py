"""Mutating git operations and branch/remote/log queries for the host UI."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from .git_runner import DEFAULT_GIT_TIMEOUT_SECONDS, GitResult, run_git, run_git_action
from .git_status import STATUS_INDEX_MASK

PUSH_TIMEOUT_SECONDS = 120.0
# Commit hooks and large checkouts outlast the status-scan timeout.
COMMIT_TIMEOUT_SECONDS = 120.0
CHECKOUT_TIMEOUT_SECONDS = 60.0

# git and ssh must not prompt on the terminal the UI holds in raw mode.
NON_INTERACTIVE_ENV = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_SSH_COMMAND": "ssh -o BatchMode=yes",
}


def _has_head(repo_root: Path, timeout_seconds: float) -> bool:
    proc = run_git(repo_root, ["rev-parse", "--verify", "--quiet", "HEAD"], timeout_seconds)
    return proc is not None and proc.returncode == 0


def toggle_stage(
    repo_root: Path,
    rel_path: PurePosixPath,
    flags: int | None,
    timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS,
) -> GitResult:
    """Unstage ``rel_path`` when it has staged changes, otherwise stage it."""
    path_arg = str(rel_path)
    if (flags or 0) & STATUS_INDEX_MASK:
        if _has_head(repo_root, timeout_seconds):
            args = ["restore", "--staged", "--", path_arg]
        else:
            args = ["rm", "--cached", "--quiet", "--", path_arg]
        return run_git_action(repo_root, args, timeout_seconds, f"unstaged {path_arg}")
    return run_git_action(repo_root, ["add", "--all", "--", path_arg], timeout_seconds, f"staged {path_arg}")


def commit(
    repo_root: Path,
    summary: str,
    description: str = "",
    timeout_seconds: float = COMMIT_TIMEOUT_SECONDS,
) -> GitResult:
    """Commit the index with ``summary`` and an optional body paragraph."""
    summary = summary.strip()
    if not summary:
        return GitResult(False, "commit summary is empty")
    args = ["commit", "--quiet", "-m", summary]
    if description.strip():
        args.extend(["-m", description.strip()])
    return run_git_action(repo_root, args, timeout_seconds, "committed")


def push(repo_root: Path, timeout_seconds: float = PUSH_TIMEOUT_SECONDS) -> GitResult:
    return run_git_action(
        repo_root,
        ["push", "--quiet"],
        timeout_seconds,
        "pushed to remote",
        extra_env=NON_INTERACTIVE_ENV,
    )


def current_branch(repo_root: Path, timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS) -> str:
    """Return the checked-out branch name, a short hash when detached, or ``""``."""
    proc = run_git(repo_root, ["symbolic-ref", "--quiet", "--short", "HEAD"], timeout_seconds)
    if proc is not None and proc.returncode == 0 and proc.stdout.strip():
        return proc.stdout.strip()
    proc = run_git(repo_root, ["rev-parse", "--short", "HEAD"], timeout_seconds)
    if proc is not None and proc.returncode == 0:
        return proc.stdout.strip()
    return ""


def list_local_branches(repo_root: Path, timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS) -> list[str]:
    proc = run_git(repo_root, ["for-each-ref", "--format=%(refname:short)", "refs/heads"], timeout_seconds)
    if proc is None or proc.returncode != 0:
        return []
    return sorted(line.strip() for line in proc.stdout.splitlines() if line.strip())


def list_remotes(repo_root: Path, timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS) -> list[tuple[str, str]]:
    """Return ``(name, fetch_url)`` pairs for configured remotes."""
    proc = run_git(repo_root, ["remote", "-v"], timeout_seconds)
    if proc is None or proc.returncode != 0:
        return []
    remotes: dict[str, str] = {}
    for line in proc.stdout.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        if len(parts) >= 3 and parts[2] != "(fetch)":
            continue
        remotes.setdefault(parts[0], parts[1])
    return sorted(remotes.items())


def checkout_branch(repo_root: Path, branch: str, timeout_seconds: float = CHECKOUT_TIMEOUT_SECONDS) -> GitResult:
    return run_git_action(repo_root, ["checkout", "--quiet", branch], timeout_seconds, f"switched to {branch}")


def commit_log(repo_root: Path, limit: int = 200, timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS) -> list[str]:
    """Return ``git log --graph --oneline`` lines, newest first."""
    proc = run_git(
        repo_root,
        ["log", "--graph", "--oneline", "--decorate", "--no-color", f"--max-count={max(1, limit)}"],
        timeout_seconds,
    )
    if proc is None or proc.returncode != 0:
        return []
    return proc.stdout.splitlines()
