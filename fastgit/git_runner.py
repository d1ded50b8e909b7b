"""Thin ``git`` subprocess wrapper shared by the status, diff and ops modules.

Commands never raise on git failures: a missing binary, a timeout or a
non-repository directory all surface as ``None`` results that callers turn
into empty views or status-line messages.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_GIT_TIMEOUT_SECONDS = 2.0


class GitError(RuntimeError):
    """Raised where a git failure must propagate instead of degrading."""


@dataclass(frozen=True)
class GitResult:
    """Outcome of a mutating git command, shown to the user as ``message``."""

    ok: bool
    message: str = ""


def run_git(
    cwd: Path,
    args: list[str],
    timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS,
    capture_stderr: bool = False,
    extra_env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str] | None:
    """Run ``git -C cwd *args`` and return the completed process or ``None``.

    ``extra_env`` is layered over the inherited environment.
    """
    env = {**os.environ, **extra_env} if extra_env else None
    try:
        return subprocess.run(
            ["git", "-C", str(cwd), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE if capture_stderr else subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
            env=env,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git %s failed in %s: %s", " ".join(args), cwd, exc)
        return None


def run_git_action(
    cwd: Path,
    args: list[str],
    timeout_seconds: float,
    success_message: str,
    extra_env: Mapping[str, str] | None = None,
) -> GitResult:
    """Run a mutating git command and fold its outcome into a ``GitResult``."""
    proc = run_git(cwd, args, timeout_seconds, capture_stderr=True, extra_env=extra_env)
    if proc is None:
        return GitResult(False, f"git {args[0]} could not run")
    if proc.returncode != 0:
        detail = (proc.stderr or proc.stdout or "").strip().splitlines()
        message = detail[-1] if detail else f"git {args[0]} exited with {proc.returncode}"
        logger.info("git %s failed: %s", args[0], message)
        return GitResult(False, message)
    return GitResult(True, success_message)


def resolve_repo_and_git_dir(
    path: Path,
    timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS,
) -> tuple[Path | None, Path | None]:
    """Resolve the working-copy root and git dir containing ``path``.

    Returns ``(None, None)`` when git is unavailable or ``path`` is not inside
    a repository.
    """
    proc = run_git(path, ["rev-parse", "--show-toplevel", "--git-dir"], timeout_seconds)
    if proc is None or proc.returncode != 0:
        return None, None

    lines = [line.strip() for line in proc.stdout.splitlines() if line.strip()]
    if len(lines) < 2:
        return None, None

    repo_root = Path(lines[0]).resolve()
    git_dir_raw = Path(lines[1])
    git_dir = git_dir_raw if git_dir_raw.is_absolute() else (path / git_dir_raw)
    return repo_root, git_dir.resolve()
