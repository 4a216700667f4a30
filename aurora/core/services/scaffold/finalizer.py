"""
Module finalizer — renames the Go module and tidies dependencies.

Three steps, all inside the new project root and all fatal on failure:

    1. go mod edit -module <name>
    2. identifier rewrite across the source tree
    3. go mod tidy
"""

from __future__ import annotations

import logging
from pathlib import Path

from aurora.core.models.settings import Settings
from aurora.core.services import go_ops
from aurora.core.services.go_ops import ToolError, ToolRunner, run_tool
from aurora.core.services.scaffold.errors import FinalizationFailed
from aurora.core.services.scaffold.rewriter import IdentifierRewriter, RewriteReport

logger = logging.getLogger(__name__)


class ModuleFinalizer:
    """Turns a normalized clone into a project named after the user's choice."""

    def __init__(self, settings: Settings, runner: ToolRunner = run_tool):
        self.settings = settings
        self.runner = runner

    def rewriter_for(self, project_name: str) -> IdentifierRewriter:
        template = self.settings.template
        return IdentifierRewriter(
            template.module,
            project_name,
            dirs=template.rewrite_dirs,
            entry_file=template.entry_file,
        )

    def finalize(self, root: Path, project_name: str) -> RewriteReport:
        """Run all three steps.

        Raises:
            FinalizationFailed: If a go command fails.
            RewriteFailed: If a file cannot be rewritten.
        """
        go = self.settings.toolchain.go
        timeout = self.settings.timeouts.tool

        try:
            go_ops.mod_edit_module(root, project_name, go=go, timeout=timeout, runner=self.runner)
        except ToolError as e:
            raise FinalizationFailed(f"Cannot set the go.mod module name: {e}", path=root) from e
        logger.info("Set the module name of go.mod to %s", project_name)

        report = self.rewriter_for(project_name).rewrite(root)

        try:
            go_ops.mod_tidy(root, go=go, timeout=timeout, runner=self.runner)
        except ToolError as e:
            raise FinalizationFailed(f"go mod tidy failed: {e}", path=root) from e
        logger.info("go mod tidy finished in %s", root)

        return report
