"""
Repository normalizer — cuts a fresh clone loose from the template.

    Cloned ──remove origin──▶ Detached ──rename branch──▶ Normalized

Branch renaming is done with plain ref surgery: the canonical ref is
written and read back BEFORE the old ref is deleted, so the repository
always has at least one valid branch pointing at the commit.
"""

from __future__ import annotations

import logging

from aurora.core.models.project import LocalRepository, RepoState
from aurora.core.services import git_ops
from aurora.core.services.git_ops import GitError
from aurora.core.services.scaffold.errors import NormalizationFailed

logger = logging.getLogger(__name__)

REMOTE_NAME = "origin"


class RepositoryNormalizer:
    """Detach a cloned repository and put it on the canonical branch."""

    def __init__(self, canonical_branch: str = "main", *, git: str = "git", timeout: float = 30):
        self.canonical_branch = canonical_branch
        self.git = git
        self.timeout = timeout

    def _git(self, repo: LocalRepository, *args: str) -> str:
        return git_ops.git(*args, cwd=repo.path, binary=self.git, timeout=self.timeout)

    def normalize(self, repo: LocalRepository) -> LocalRepository:
        """Run every transition up to :attr:`RepoState.NORMALIZED`.

        Raises:
            NormalizationFailed: If any git metadata operation fails.
        """
        try:
            if repo.state is RepoState.CLONED:
                self.detach(repo)
            if repo.state is RepoState.DETACHED:
                self.rename_branch(repo)
        except GitError as e:
            raise NormalizationFailed(
                f"Failed to initialize the local git repository: {e}", path=repo.path
            ) from e
        return repo

    def detach(self, repo: LocalRepository) -> None:
        """Remove the template remote."""
        logger.info("Disassociating %s from remote '%s'", repo.path, REMOTE_NAME)
        self._git(repo, "remote", "remove", REMOTE_NAME)
        repo.remotes = git_ops.list_remotes(repo.path, binary=self.git)
        repo.state = RepoState.DETACHED

    def rename_branch(self, repo: LocalRepository) -> None:
        """Move the working copy onto the canonical branch."""
        branch = git_ops.current_branch(repo.path, binary=self.git)
        repo.branch = branch
        logger.info("Current branch of %s: %s", repo.path, branch)

        if branch == self.canonical_branch:
            repo.state = RepoState.NORMALIZED
            return

        old_ref = f"refs/heads/{branch}"
        new_ref = f"refs/heads/{self.canonical_branch}"
        commit = git_ops.resolve_ref(repo.path, old_ref, binary=self.git)

        # Empty old-value: refuse to clobber an existing canonical branch
        logger.info("Creating branch %s at %s", self.canonical_branch, commit[:12])
        self._git(repo, "update-ref", new_ref, commit, "")
        stored = git_ops.resolve_ref(repo.path, new_ref, binary=self.git)
        if stored != commit:
            raise GitError(f"{new_ref} points at {stored}, expected {commit}")

        self._git(repo, "checkout", "-q", self.canonical_branch)
        repo.branch = git_ops.current_branch(repo.path, binary=self.git)
        if repo.branch != self.canonical_branch:
            raise GitError(f"HEAD is on {repo.branch}, expected {self.canonical_branch}")

        # HEAD no longer points at the old branch
        logger.info("Deleting branch %s", branch)
        self._git(repo, "update-ref", "-d", old_ref, commit)
        repo.state = RepoState.NORMALIZED
