"""
Git operations — thin wrappers over the git CLI.

Used by the creation pipeline to clone templates and rewrite local
branch metadata.  Always the git CLI, never a library binding.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    """Raised when a git command fails, times out or cannot be started."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


# ═══════════════════════════════════════════════════════════════════
#  Low-level runners
# ═══════════════════════════════════════════════════════════════════


def run_git(
    *args: str,
    cwd: Path | None = None,
    git: str = "git",
    timeout: float = 30,
    check: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the result."""
    return subprocess.run(
        [git, *args],
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        timeout=timeout,
        check=check,
    )


def git(
    *args: str,
    cwd: Path | None = None,
    binary: str = "git",
    timeout: float = 30,
) -> str:
    """Run a git command and return stripped stdout.

    Raises:
        GitError: On non-zero exit, timeout, or a missing git binary.
    """
    cmd_str = " ".join([binary, *args])
    logger.debug("Running: %s (cwd=%s)", cmd_str, cwd)
    try:
        result = run_git(*args, cwd=cwd, git=binary, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git timed out after {timeout}s: {cmd_str}", command=cmd_str) from e
    except OSError as e:
        raise GitError(f"Cannot run {binary}: {e}", command=cmd_str) from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        raise GitError(
            f"git {args[0]} failed (exit {result.returncode}): {stderr}",
            command=cmd_str,
            stderr=stderr,
        )
    return result.stdout.strip()


# ═══════════════════════════════════════════════════════════════════
#  Repository queries
# ═══════════════════════════════════════════════════════════════════


def current_branch(repo: Path, *, binary: str = "git") -> str:
    """Short name of the branch HEAD points at."""
    return git("symbolic-ref", "--short", "HEAD", cwd=repo, binary=binary)


def list_remotes(repo: Path, *, binary: str = "git") -> list[str]:
    out = git("remote", cwd=repo, binary=binary)
    return [line.strip() for line in out.splitlines() if line.strip()]


def list_branches(repo: Path, *, binary: str = "git") -> list[str]:
    out = git(
        "for-each-ref", "--format=%(refname:short)", "refs/heads/",
        cwd=repo, binary=binary,
    )
    return [line.strip() for line in out.splitlines() if line.strip()]


def resolve_ref(repo: Path, ref: str, *, binary: str = "git") -> str:
    """Commit hash a fully-qualified ref points at."""
    return git("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}", cwd=repo, binary=binary)
