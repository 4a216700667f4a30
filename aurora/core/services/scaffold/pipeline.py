"""
Creation pipeline — Fetch → Normalize → Finalize with full rollback.

If normalize or finalize fails, the target directory is deleted before
the error propagates.  A failed fetch cleans up after itself and never
touches a directory it did not create.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from aurora.core.models.project import LocalRepository, ProjectRequest
from aurora.core.models.settings import Settings
from aurora.core.services.go_ops import ToolRunner, run_tool
from aurora.core.services.scaffold.fetcher import (
    TemplateFetcher,
    remove_tree,
    topmost_missing,
)
from aurora.core.services.scaffold.finalizer import ModuleFinalizer
from aurora.core.services.scaffold.normalizer import RepositoryNormalizer
from aurora.core.services.scaffold.rewriter import RewriteReport

logger = logging.getLogger(__name__)

# Stage names reported to progress callbacks
STAGE_FETCH = "fetch"
STAGE_NORMALIZE = "normalize"
STAGE_FINALIZE = "finalize"


@dataclass
class PipelineOutcome:
    """What a successful run produced."""

    target: Path
    branch: str
    template_branch: str
    repository: LocalRepository
    rewrite: RewriteReport = field(default_factory=RewriteReport)


class CreatePipeline:
    """Runs the creation stages for one :class:`ProjectRequest`."""

    def __init__(
        self,
        request: ProjectRequest,
        settings: Settings,
        *,
        fetcher: TemplateFetcher | None = None,
        normalizer: RepositoryNormalizer | None = None,
        finalizer: ModuleFinalizer | None = None,
        runner: ToolRunner = run_tool,
        on_stage: Callable[[str], None] | None = None,
    ):
        self.request = request
        self.settings = settings
        toolchain = settings.toolchain
        self.fetcher = fetcher or TemplateFetcher(
            settings.template, git=toolchain.git, timeout=settings.timeouts.clone
        )
        self.normalizer = normalizer or RepositoryNormalizer(
            settings.template.canonical_branch, git=toolchain.git
        )
        self.finalizer = finalizer or ModuleFinalizer(settings, runner=runner)
        self.on_stage = on_stage
        self._created = request.target

    @property
    def branch(self) -> str:
        return self.settings.template.branch_for(self.request.demo)

    def _stage(self, name: str) -> None:
        logger.info("Stage: %s (%s)", name, self.request.target)
        if self.on_stage:
            self.on_stage(name)

    def rollback(self) -> None:
        """Delete what this run created, whatever state it is in.

        That is the target directory plus any parent directories the
        fetch had to create for it.
        """
        target = self._created
        logger.info("Rolling back: removing %s", target)
        try:
            remove_tree(target)
        except OSError as e:
            logger.error("Rollback could not remove %s: %s", target, e)

    def run(self) -> PipelineOutcome:
        target = self.request.target

        self._created = topmost_missing(target)
        self._stage(STAGE_FETCH)
        repo = self.fetcher.fetch(target, self.branch)

        # From here on the target is ours to remove
        try:
            self._stage(STAGE_NORMALIZE)
            repo = self.normalizer.normalize(repo)

            self._stage(STAGE_FINALIZE)
            report = self.finalizer.finalize(target, self.request.name)
        except BaseException:
            self.rollback()
            raise

        return PipelineOutcome(
            target=target,
            branch=repo.branch,
            template_branch=self.branch,
            repository=repo,
            rewrite=report,
        )
