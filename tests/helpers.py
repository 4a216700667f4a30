"""
Test helpers — a throwaway git identity, a template tree, a fake go runner.
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from aurora.core.services.go_ops import ToolError

TEMPLATE_MODULE = "github.com/example/template"

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` with a throwaway identity; return stdout."""
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=Aurora Tests",
            "-c", "user.email=tests@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def write_template_tree(root: Path, module: str = TEMPLATE_MODULE) -> None:
    """Lay out a small Go project that references ``module``."""
    (root / "internal" / "app").mkdir(parents=True)
    (root / "api").mkdir()
    (root / "cmd").mkdir()
    (root / "docs").mkdir()

    (root / "go.mod").write_text(f"module {module}\n\ngo 1.21\n")
    (root / "main.go").write_text(
        f'package main\n\nimport "{module}/cmd"\n\nfunc main() {{ cmd.Execute() }}\n'
    )
    (root / "cmd" / "root.go").write_text(
        f'package cmd\n\nimport "{module}/internal/app"\n\nfunc Execute() {{ app.Run() }}\n'
    )
    (root / "internal" / "app" / "app.go").write_text(
        f'package app\n\n// {module}/internal/app\nimport _ "{module}/api"\n\nfunc Run() {{}}\n'
    )
    (root / "api" / "service.proto").write_text(
        f'syntax = "proto3";\noption go_package = "{module}/api";\n'
    )
    (root / "docs" / "README.md").write_text(f"Imports {module} everywhere.\n")


class FakeRunner:
    """Stands in for ``run_tool``; records every command.

    ``go mod edit -module X`` rewrites the module line of go.mod so the
    result looks like the real thing.  Commands containing ``fail_on``
    raise :class:`ToolError`.
    """

    def __init__(self, fail_on: str | None = None):
        self.calls: list[tuple[list[str], Path | None]] = []
        self.fail_on = fail_on

    def __call__(self, args, *, cwd=None, timeout=None, capture=True):
        args = list(args)
        self.calls.append((args, cwd))
        line = " ".join(args)
        if self.fail_on and self.fail_on in line:
            raise ToolError(f"{line} exited with code 1", args, 1)

        if args[1:4] == ["mod", "edit", "-module"] and cwd is not None:
            gomod = Path(cwd) / "go.mod"
            lines = gomod.read_text().splitlines()
            lines[0] = f"module {args[4]}"
            gomod.write_text("\n".join(lines) + "\n")

        return subprocess.CompletedProcess(args=args, returncode=0, stdout="", stderr="")

    @property
    def commands(self) -> list[str]:
        return [" ".join(args[1:]) for args, _ in self.calls]


