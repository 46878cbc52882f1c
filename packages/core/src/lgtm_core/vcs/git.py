"""Thin wrappers around the local `git` executable.

Every function shells out to git in the current working directory. Callers
receive plain strings; a failing command surfaces as GitError carrying the
command line and git's stderr.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)


class GitError(Exception):
    """A git command exited with a non-zero status or could not be started."""


def _run_git(*args: str) -> str:
    cmd = ["git", *args]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError:
        raise GitError("git executable not found on PATH.")
    if result.returncode != 0:
        raise GitError(f"Git command failed: {' '.join(cmd)}\n{result.stderr.strip()}")
    return result.stdout.strip()


def is_git_repo() -> bool:
    try:
        _run_git("rev-parse", "--git-dir")
    except GitError:
        return False
    return True


def get_repo_root() -> str:
    """Absolute path of the working tree; changed-file paths are relative to it."""
    return _run_git("rev-parse", "--show-toplevel")


def branch_exists(branch: str) -> bool:
    try:
        _run_git("rev-parse", "--verify", "--quiet", branch)
    except GitError:
        return False
    return True


def get_current_branch() -> str:
    return _run_git("rev-parse", "--abbrev-ref", "HEAD")


def get_merge_base(base_branch: str) -> str:
    """Return the common ancestor of HEAD and base_branch.

    git exits non-zero when the histories are unrelated, which surfaces here
    as GitError.
    """
    merge_base = _run_git("merge-base", "HEAD", base_branch)
    if not merge_base:
        raise GitError(f"No common ancestor between HEAD and {base_branch}.")
    return merge_base


def get_changed_files(merge_base: str) -> list[str]:
    """Return paths changed between merge_base and HEAD, in git's order, without repeats."""
    output = _run_git("diff", "--name-only", f"{merge_base}...HEAD")
    return list(dict.fromkeys(line for line in output.splitlines() if line))


def get_diff(merge_base: str) -> str:
    return _run_git("diff", f"{merge_base}...HEAD")
