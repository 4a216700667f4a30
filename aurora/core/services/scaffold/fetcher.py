"""
Template fetcher — materializes the template repository on disk.

Clone policy is fixed: depth 1, single branch, no tags, exactly the
requested branch.  Whatever happens, a failed fetch leaves nothing
behind at the target path.
"""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path

from aurora.core.models.project import LocalRepository, RepoState
from aurora.core.models.settings import TemplateSource
from aurora.core.services import git_ops
from aurora.core.services.git_ops import GitError
from aurora.core.services.scaffold.errors import FetchFailed, TargetExistsNeedsConfirmation

logger = logging.getLogger(__name__)


class TargetState(str, Enum):
    """Pre-flight result for a target path."""

    FREE = "free"
    NEEDS_CONFIRMATION = "needs_confirmation"


def remove_tree(path: Path) -> None:
    """Recursively delete ``path`` (file, symlink or directory) if present."""
    if path.is_symlink() or path.is_file():
        path.unlink(missing_ok=True)
    elif path.exists():
        shutil.rmtree(path)


def topmost_missing(path: Path) -> Path:
    """The outermost of ``path`` and its ancestors that does not exist yet.

    Creating ``path`` with ``mkdir(parents=True)`` creates exactly this
    directory and everything below it.
    """
    top = path
    for parent in path.parents:
        if parent.exists() or parent.is_symlink():
            break
        top = parent
    return top


def _discard(path: Path) -> None:
    try:
        remove_tree(path)
    except OSError as e:
        logger.error("Could not remove %s: %s", path, e)


class TemplateFetcher:
    """Shallow-clones the template repository into a target directory."""

    def __init__(
        self,
        source: TemplateSource,
        *,
        git: str = "git",
        timeout: float = 180,
    ):
        self.source = source
        self.git = git
        self.timeout = timeout

    def check_target(self, target: Path) -> TargetState:
        """Whether ``target`` can be used without destroying anything."""
        if target.exists() or target.is_symlink():
            return TargetState.NEEDS_CONFIRMATION
        return TargetState.FREE

    def clear_target(self, target: Path) -> None:
        """Remove an existing target after the user agreed to overwrite it.

        Raises:
            FetchFailed: If the path cannot be removed.
        """
        logger.info("Removing existing target %s", target)
        try:
            remove_tree(target)
        except OSError as e:
            raise FetchFailed(f"Cannot remove {target}: {e}", path=target) from e

    def clone_args(self, target: Path, branch: str) -> list[str]:
        return [
            "clone",
            self.source.url,
            str(target),
            "-b", branch,
            "--depth", "1",
            "--single-branch",
            "--no-tags",
        ]

    def fetch(self, target: Path, branch: str) -> LocalRepository:
        """Clone ``branch`` of the template into ``target``.

        Missing parent directories are created; a failed fetch removes
        them again along with ``target``.

        Raises:
            TargetExistsNeedsConfirmation: If ``target`` exists and is not empty.
            FetchFailed: If the clone fails; ``target`` is removed first.
        """
        if target.exists() and (not target.is_dir() or any(target.iterdir())):
            raise TargetExistsNeedsConfirmation(
                f"Target path already exists: {target}", path=target
            )

        created = topmost_missing(target)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            _discard(created)
            raise FetchFailed(f"Cannot create {target}: {e}", path=target) from e

        logger.info("Cloning %s (branch %s) into %s", self.source.url, branch, target)
        try:
            git_ops.git(
                *self.clone_args(target, branch),
                binary=self.git,
                timeout=self.timeout,
            )
        except GitError as e:
            _discard(created)
            raise FetchFailed(
                f"Failed to pull the template repository: {e}", path=target
            ) from e

        return LocalRepository(
            path=target,
            branch=branch,
            remotes=["origin"],
            state=RepoState.CLONED,
        )
