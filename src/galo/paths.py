"""Environment-first configuration: where arena results go, the default bot
difficulty, and the git provenance recorded in arena manifests."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Dict, Optional


def _find_git_root(start: Path) -> Optional[Path]:
    return next((p for p in (start, *start.parents) if (p / ".git").exists()), None)


def repo_root() -> Path:
    """GALO_REPO_ROOT, else the enclosing git checkout of the CWD, else the CWD."""
    env = os.getenv("GALO_REPO_ROOT")
    if env:
        return Path(env)
    return _find_git_root(Path.cwd().resolve()) or Path.cwd()


def results_dir() -> Path:
    p = os.getenv("GALO_RESULTS_DIR")
    return Path(p) if p else repo_root() / "results"


def default_difficulty() -> str:
    return os.getenv("GALO_DIFFICULTY", "medium").strip().lower() or "medium"


def _git(*args: str) -> Optional[str]:
    try:
        return subprocess.check_output(
            ["git", "-C", str(repo_root()), *args],
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=2.0,
        ).strip()
    except (OSError, subprocess.SubprocessError):
        return None


def git_metadata() -> Dict[str, object]:
    """Commit hash and dirty flag of the results' checkout; None where git cannot tell."""
    status = _git("status", "--porcelain")
    return {
        "git_commit": _git("rev-parse", "HEAD") or None,
        "git_is_dirty": None if status is None else bool(status),
    }
