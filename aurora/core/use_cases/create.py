"""
Create use case — turn the template repository into a new project.

The pre-flight check (does the target already exist?) and the
overwrite confirmation happen HERE, on the caller's thread, before any
work is scheduled.  Only then is the pipeline started on a worker
thread and raced against the deadline.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from aurora.core.engine.task import PipelineTask
from aurora.core.models.project import ProjectRequest
from aurora.core.models.settings import Settings
from aurora.core.services.go_ops import ToolRunner, run_tool
from aurora.core.services.scaffold.errors import AbortedByUser
from aurora.core.services.scaffold.fetcher import TargetState
from aurora.core.services.scaffold.pipeline import CreatePipeline
from aurora.core.services.scaffold.rewriter import RewriteReport

logger = logging.getLogger(__name__)


@dataclass
class CreateResult:
    """Result of creating a project."""

    name: str
    target: Path
    branch: str
    template_branch: str
    demo: bool = False
    overwritten: bool = False
    rewrite: RewriteReport = field(default_factory=RewriteReport)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "target": str(self.target),
            "branch": self.branch,
            "template_branch": self.template_branch,
            "demo": self.demo,
            "overwritten": self.overwritten,
            "rewrite": self.rewrite.to_dict(),
        }


def create_project(
    request: ProjectRequest,
    settings: Settings,
    confirm_overwrite: Callable[[Path], bool],
    timeout: float | None = None,
    cancel_event: threading.Event | None = None,
    runner: ToolRunner = run_tool,
    on_stage: Callable[[str], None] | None = None,
) -> CreateResult:
    """Create a new project from the template.

    Args:
        request: Name, parent directory and template variant.
        settings: Tool settings (template source, toolchain, timeouts).
        confirm_overwrite: Asked once, with the target path, when the
            target already exists.  Returning False aborts.
        timeout: Seconds to wait for the pipeline
            (default: ``settings.timeouts.create``).
        cancel_event: Setting it stops the wait with :class:`Cancelled`.
        runner: Executes go commands (injectable for tests).
        on_stage: Called with each stage name as the pipeline advances.

    Returns:
        CreateResult describing the new project.

    Raises:
        AbortedByUser: Overwrite declined; the existing path is untouched.
        CreateError: Any pipeline failure; the target has been removed.
    """
    pipeline = CreatePipeline(request, settings, runner=runner, on_stage=on_stage)
    target = request.target

    # ── Pre-flight ───────────────────────────────────────────────
    overwritten = False
    if pipeline.fetcher.check_target(target) is TargetState.NEEDS_CONFIRMATION:
        if not confirm_overwrite(target):
            raise AbortedByUser(f"Not overwriting existing path: {target}", path=target)
        pipeline.fetcher.clear_target(target)
        overwritten = True

    # ── Run on a worker, bounded by the deadline ─────────────────
    if timeout is None:
        timeout = settings.timeouts.create
    logger.info(
        "Creating %s at %s (%s branch)",
        request.name, target, pipeline.branch,
    )
    task = PipelineTask.start(pipeline.run, name=f"aurora-create-{request.name}")
    outcome = task.wait(timeout, cancel_event)

    return CreateResult(
        name=request.name,
        target=outcome.target,
        branch=outcome.branch,
        template_branch=outcome.template_branch,
        demo=request.demo,
        overwritten=overwritten,
        rewrite=outcome.rewrite,
    )
