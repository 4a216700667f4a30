"""
Go toolchain operations — build, run, job and init delegation.

Every function here shells out to ``go`` or to the compiled project
binary.  Output either streams straight to the terminal (``capture=False``)
or is captured for the caller to inspect.  A non-zero exit raises
:class:`ToolError`.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from aurora.core.context import CommandContext

logger = logging.getLogger(__name__)

BUILD_LDFLAGS = "-ldflags=-s -w"

# Tools a fresh project needs, then module housekeeping
INIT_COMMANDS: list[list[str]] = [
    ["install", "github.com/google/wire/cmd/wire@latest"],
    ["install", "google.golang.org/protobuf/cmd/protoc-gen-go@latest"],
    ["install", "google.golang.org/grpc/cmd/protoc-gen-go-grpc@latest"],
    ["install", "github.com/google/gnostic/cmd/protoc-gen-openapi@latest"],
    ["install", "gorm.io/gen/tools/gentool@latest"],
    ["mod", "tidy"],
    ["mod", "verify"],
]


class ToolError(RuntimeError):
    """Raised when an external tool exits non-zero or cannot be started."""

    def __init__(self, message: str, command: Sequence[str] = (), returncode: int | None = None):
        self.command = list(command)
        self.returncode = returncode
        super().__init__(message)


# ═══════════════════════════════════════════════════════════════════
#  Low-level runner
# ═══════════════════════════════════════════════════════════════════


def run_tool(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
    capture: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run an external command; raise :class:`ToolError` unless it exits zero."""
    cmd = list(args)
    cmd_str = " ".join(cmd)
    logger.debug("Executing: %s (cwd=%s)", cmd_str, cwd)
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=capture,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ToolError(f"Command timed out after {timeout}s: {cmd_str}", cmd) from e
    except OSError as e:
        raise ToolError(f"Cannot run {cmd[0]}: {e}", cmd) from e

    if result.returncode != 0:
        detail = (result.stderr or "").strip() if capture else ""
        message = f"{cmd_str} exited with code {result.returncode}"
        if detail:
            message = f"{message}: {detail}"
        raise ToolError(message, cmd, result.returncode)
    return result


ToolRunner = Callable[..., subprocess.CompletedProcess[str]]


# ═══════════════════════════════════════════════════════════════════
#  Module management
# ═══════════════════════════════════════════════════════════════════


def mod_edit_module(
    root: Path, module: str, *, go: str = "go", timeout: float | None = None,
    runner: ToolRunner = run_tool,
) -> None:
    """``go mod edit -module <module>`` inside ``root``."""
    runner([go, "mod", "edit", "-module", module], cwd=root, timeout=timeout)


def mod_tidy(
    root: Path, *, go: str = "go", timeout: float | None = None,
    runner: ToolRunner = run_tool,
) -> None:
    """``go mod tidy`` inside ``root``."""
    runner([go, "mod", "tidy"], cwd=root, timeout=timeout)


# ═══════════════════════════════════════════════════════════════════
#  Build / run / job
# ═══════════════════════════════════════════════════════════════════


def build_args(main: Path, output: Path | None, *, go: str = "go") -> list[str]:
    args = [go, "build", BUILD_LDFLAGS]
    if output is not None:
        args += ["-o", str(output)]
    args.append(str(main))
    return args


def build(
    runtime: CommandContext,
    main: Path | None = None,
    output: Path | None = None,
) -> Path:
    """Compile the project; returns the binary path.

    Raises:
        ToolError: If the build fails or there is nothing to build.
    """
    main = main or runtime.main_path
    if not main.is_file():
        raise ToolError(f"Entry file not found: {main}")

    output = output or runtime.bin_path
    if not output.is_absolute():
        output = runtime.working_dir / output
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ToolError(f"Cannot create output directory {output.parent}: {e}") from e

    logger.info("Building %s → %s", main, output)
    run_tool(
        build_args(main, output, go=runtime.settings.toolchain.go),
        cwd=runtime.working_dir,
        capture=False,
    )
    return output


def get_bin(runtime: CommandContext) -> Path:
    """The existing server binary, building it first if missing."""
    if runtime.has_bin():
        return runtime.bin_path
    return build(runtime)


@dataclass
class RunOptions:
    """Flags forwarded to the compiled server's ``run`` command."""

    config_path: Path
    env: str
    app_name: str = "prepare-to-go"
    app_version: str = "v1.0"
    with_ws: bool = False
    with_cron: bool = False
    without_server: bool = False
    without_mq: bool = False

    def forwarded_flags(self) -> list[str]:
        flags = []
        if self.with_ws:
            flags.append("--with.ws")
        if self.with_cron:
            flags.append("--with.cron")
        if self.without_server:
            flags.append("--without.server")
        if self.without_mq:
            flags.append("--without.mq")
        return flags


def run_args(binary: Path, options: RunOptions) -> list[str]:
    return [
        str(binary), "run",
        "-c", str(options.config_path),
        "-e", options.env,
        *options.forwarded_flags(),
    ]


def run_server(runtime: CommandContext, options: RunOptions) -> None:
    """Build the project and start the server in the foreground."""
    binary = build(runtime)
    logger.info("Starting %s (%s)", options.app_name, options.env)
    run_tool(run_args(binary, options), cwd=runtime.working_dir, capture=False)


def job_args(binary: Path, name: str | None, params: str = "", list_jobs: bool = False) -> list[str]:
    if list_jobs:
        return [str(binary), "job", "-l"]
    if not name:
        raise ToolError("No job name given")
    return [str(binary), "job", "-n", name, "-p", params]


def run_job(
    runtime: CommandContext,
    name: str | None,
    params: str = "",
    list_jobs: bool = False,
) -> None:
    """Run (or list) user jobs through the compiled binary."""
    if not list_jobs and not name:
        raise ToolError("No job name given")
    binary = get_bin(runtime)
    run_tool(job_args(binary, name, params, list_jobs), cwd=runtime.working_dir, capture=False)


# ═══════════════════════════════════════════════════════════════════
#  Project init
# ═══════════════════════════════════════════════════════════════════


@dataclass
class InitResult:
    """Outcome of ``aurora init``."""

    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "succeeded": self.succeeded,
            "failed": self.failed,
        }


def init_project(
    runtime: CommandContext,
    on_step: Callable[[str, bool], None] | None = None,
) -> InitResult:
    """Install the code generators and tidy modules.

    Keeps going after a failed step so one broken tool does not hide
    the rest; the result reports partial success.
    """
    go = runtime.settings.toolchain.go
    result = InitResult()
    for step in INIT_COMMANDS:
        cmd = [go, *step]
        label = " ".join(cmd)
        try:
            run_tool(cmd, cwd=runtime.working_dir, timeout=runtime.settings.timeouts.tool)
        except ToolError as e:
            logger.warning("%s failed: %s", label, e)
            result.failed[label] = str(e)
            ok = False
        else:
            result.succeeded.append(label)
            ok = True
        if on_step:
            on_step(label, ok)
    return result
