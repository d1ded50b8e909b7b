"""Git metadata signature used to detect repository-level changes.

Commits, checkouts, staging and merges all touch the index or HEAD refs, so
hashing their stat data is enough to know when branch and log panels need a
refresh without spawning git on every loop iteration.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

_WATCHED_CONTROL_FILES = ("index", "HEAD", "FETCH_HEAD", "ORIG_HEAD", "MERGE_HEAD", "packed-refs")


def _stat_token(path: Path) -> str:
    try:
        st = path.stat()
    except FileNotFoundError:
        return "missing"
    except OSError:
        return "error"
    return f"{st.st_mtime_ns}:{st.st_size}"


def _head_ref(git_dir: Path) -> str:
    try:
        head_text = (git_dir / "HEAD").read_text(encoding="utf-8", errors="replace").strip()
    except OSError:
        return ""
    if head_text.startswith("ref: "):
        return head_text[5:].strip()
    return ""


def build_git_watch_signature(git_dir: Path | None) -> str:
    """Digest the git control files whose change means branch/log data is stale."""
    digest = hashlib.blake2b(digest_size=20)
    if git_dir is None:
        digest.update(b"git:none")
        return digest.hexdigest()

    tokens = [f"git_dir:{git_dir}"]
    for name in _WATCHED_CONTROL_FILES:
        tokens.append(f"{name}:{_stat_token(git_dir / name)}")
    ref_name = _head_ref(git_dir)
    tokens.append(f"head_ref:{ref_name}")
    if ref_name:
        tokens.append(f"head_ref_file:{_stat_token(git_dir / ref_name)}")
    refs_heads = git_dir / "refs" / "heads"
    tokens.append(f"refs_heads:{_stat_token(refs_heads)}")

    for token in tokens:
        digest.update(token.encode("utf-8", errors="surrogateescape"))
        digest.update(b"\0")
    return digest.hexdigest()
