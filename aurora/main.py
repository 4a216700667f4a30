"""
Aurora — CLI entrypoint.

Usage:
    aurora --help
    aurora create my-service
    aurora run -e dev
    python -m aurora.main build
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from aurora import __version__
from aurora.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="aurora")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to aurora.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Aurora — create, build and run Go service projects."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("AURORA_LOG_LEVEL", "WARNING")

    setup_logging(level, log_file=os.environ.get("AURORA_LOG_FILE"))

    # ── Settings + shared command context ───────────────────────
    from aurora.core.config.loader import ConfigError, load_settings
    from aurora.core.context import CommandContext

    try:
        settings = load_settings(ctx.obj["config_path"])
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    ctx.obj["settings"] = settings
    ctx.obj["runtime"] = CommandContext.create(settings)


# ── Sub-commands ────────────────────────────────────────────────

from aurora.ui.cli.create import create  # noqa: E402
from aurora.ui.cli.models import gen_model  # noqa: E402
from aurora.ui.cli.toolchain import build, init_cmd, job, run  # noqa: E402

cli.add_command(create)
cli.add_command(build)
cli.add_command(run)
cli.add_command(run, "start")
cli.add_command(run, "up")
cli.add_command(job)
cli.add_command(init_cmd)
cli.add_command(gen_model)
cli.add_command(gen_model, "model")


if __name__ == "__main__":
    cli()
