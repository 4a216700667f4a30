"""
CLI commands that delegate to the Go toolchain — build, run, job, init.

Thin wrappers over ``aurora.core.services.go_ops``.  Every command here
must run from a project root (the directory holding the entry file).
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from aurora.core.models.runtime import Env


def _require_project(runtime) -> None:
    """Exit unless the working directory is a project root."""
    if not runtime.in_project_path():
        click.secho(
            f"❌ No {runtime.settings.template.entry_file} found in the current "
            "directory, run this from the project root",
            fg="red",
        )
        sys.exit(1)


# ── Build ───────────────────────────────────────────────────────


@click.command()
@click.argument("main", required=False)
@click.option(
    "--output", "-o", default="./bin/server", show_default=True,
    help="Where to write the compiled binary.",
)
@click.pass_context
def build(ctx: click.Context, main: str | None, output: str) -> None:
    """Compile the project (or MAIN) into a stripped binary."""
    from aurora.core.services.go_ops import ToolError, build as go_build

    runtime = ctx.obj["runtime"]
    if main:
        main_path = runtime.file_path_to_abs(main)
        if main_path is None:
            click.secho(f"❌ Entry file {main} does not exist", fg="red")
            sys.exit(1)
    else:
        _require_project(runtime)
        main_path = runtime.main_path

    try:
        binary = go_build(runtime, main=main_path, output=Path(output))
    except ToolError as e:
        click.secho(f"❌ Build failed: {e}", fg="red")
        sys.exit(1)

    click.secho(f"✅ Built {binary}", fg="green", bold=True)


# ── Run ─────────────────────────────────────────────────────────


@click.command()
@click.option("--name", "-n", "app_name", default="prepare-to-go", show_default=True,
              help="Application name.")
@click.option("--env", "-e", type=click.Choice(Env.values()), default=Env.LOCAL.value,
              show_default=True, help="Runtime environment.")
@click.option("--app-version", default="v1.0", show_default=True, help="Application version.")
@click.option("--config", "-c", "config_path", default=None,
              help="Config file (default: ./configs/config.<env>.yaml).")
@click.option("--with-cron", "--with.cron", "with_cron", is_flag=True,
              help="Start the cron scheduler as well.")
@click.option("--with-ws", "--with.ws", "with_ws", is_flag=True,
              help="Start the websocket server as well.")
@click.option("--without-server", "--without.server", "without_server", is_flag=True,
              help="Do not start the HTTP/gRPC servers.")
@click.option("--without-mq", "--without.mq", "without_mq", is_flag=True,
              help="Do not start the message queue consumers.")
@click.pass_context
def run(
    ctx: click.Context,
    app_name: str,
    env: str,
    app_version: str,
    config_path: str | None,
    with_cron: bool,
    with_ws: bool,
    without_server: bool,
    without_mq: bool,
) -> None:
    """Build the project and start the server."""
    from aurora.core.config.loader import ConfigError, load_app_config
    from aurora.core.services.go_ops import RunOptions, ToolError, run_server

    runtime = ctx.obj["runtime"]
    _require_project(runtime)

    config_file = Path(config_path) if config_path else runtime.config_file_for(env)
    if not config_file.is_absolute():
        config_file = runtime.working_dir / config_file
    try:
        load_app_config(config_file)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    options = RunOptions(
        config_path=config_file,
        env=env,
        app_name=app_name,
        app_version=app_version,
        with_ws=with_ws,
        with_cron=with_cron,
        without_server=without_server,
        without_mq=without_mq,
    )

    click.secho(f"🚀 Starting {app_name} {app_version} ({env})", fg="cyan", bold=True)
    for flag in options.forwarded_flags():
        click.echo(f"   {flag}")

    try:
        run_server(runtime, options)
    except ToolError as e:
        click.secho(f"❌ Service {app_name} failed: {e}", fg="red")
        sys.exit(1)


# ── Job ─────────────────────────────────────────────────────────


@click.command()
@click.argument("name", required=False)
@click.option("--params", "-p", default="", help="Parameters passed to the job.")
@click.option("--list", "-l", "list_jobs", is_flag=True, help="List the available jobs.")
@click.pass_context
def job(ctx: click.Context, name: str | None, params: str, list_jobs: bool) -> None:
    """Run a job (or list jobs) through the project binary."""
    from aurora.core.services.go_ops import ToolError, run_job

    runtime = ctx.obj["runtime"]
    _require_project(runtime)

    if not list_jobs and not name:
        click.secho("❌ Enter the name of the job to run (or use --list)", fg="red")
        sys.exit(1)

    try:
        run_job(runtime, name, params=params, list_jobs=list_jobs)
    except ToolError as e:
        click.secho(f"❌ Job failed: {e}", fg="red")
        sys.exit(1)


# ── Init ────────────────────────────────────────────────────────


@click.command("init")
@click.pass_context
def init_cmd(ctx: click.Context) -> None:
    """Install the code generators and tidy the project's modules."""
    from aurora.core.services.go_ops import INIT_COMMANDS, init_project

    runtime = ctx.obj["runtime"]
    _require_project(runtime)
    if not (runtime.working_dir / "go.mod").is_file():
        click.secho("❌ No go.mod found in the current directory", fg="red")
        sys.exit(1)

    with click.progressbar(length=len(INIT_COMMANDS), label="⚙️  Initializing") as bar:
        result = init_project(runtime, on_step=lambda _label, _ok: bar.update(1))

    for label in result.succeeded:
        click.secho(f"   ✅ {label}", fg="green")
    for label, error in result.failed.items():
        click.secho(f"   ❌ {label}: {error}", fg="red")

    click.echo()
    if not result.ok:
        click.secho("⚠️  Partial success!", fg="yellow", bold=True)
        sys.exit(1)

    click.secho("🍺 Project initialized successfully!", fg="green", bold=True)
