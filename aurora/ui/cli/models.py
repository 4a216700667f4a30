"""
CLI command for generating ORM model files with gentool.

Thin wrapper over ``aurora.core.services.model_gen``.
"""

from __future__ import annotations

import os
import sys

import click

from aurora.core.services.model_gen import (
    DEFAULT_DB_CONN,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_PACKAGE_NAME,
)


def _choose_connection(connections):
    """Numbered prompt over the configured connections."""
    click.secho("💿 Several database connections are configured:", fg="cyan", bold=True)
    for i, conn in enumerate(connections, 1):
        click.echo(f"   {i}. {conn.key} {conn.label}")
    index = click.prompt(
        "Choose the connection to use",
        type=click.IntRange(1, len(connections)),
        default=1,
    )
    chosen = connections[index - 1]
    click.secho(f"✅ Using {chosen.label}", fg="green")
    return chosen


def _choose_tables(available: list[str]) -> list[str]:
    from aurora.core.services.model_gen import select_tables

    click.secho("📊 Tables:", fg="cyan", bold=True)
    for i, table in enumerate(available, 1):
        click.echo(f"   {i:>3}. {table}")
    answer = click.prompt("Tables to generate (numbers or names, comma separated)")
    return select_tables(available, answer)


@click.command("gen-model")
@click.option("--table", "-t", "tables", default="", help="Tables to generate, comma separated.")
@click.option("--output", "-o", "output_path", default=DEFAULT_OUTPUT_PATH, show_default=True,
              help="Directory the model file is written to.")
@click.option("--pkg", "-p", "package_name", default=DEFAULT_PACKAGE_NAME, show_default=True,
              help="Go package name of the models (must match the output directory).")
@click.option("--conn", "-c", "conn_key", default=DEFAULT_DB_CONN, show_default=True,
              help="Connection key under 'data:' in the config file.")
@click.pass_context
def gen_model(
    ctx: click.Context,
    tables: str,
    output_path: str,
    package_name: str,
    conn_key: str,
) -> None:
    """Generate gorm model files for database tables."""
    from aurora.core.config.loader import ConfigError, load_app_config
    from aurora.core.models.runtime import RUNTIME_ENV_KEY, Env
    from aurora.core.services.model_gen import (
        ModelGenError,
        ModelGenOptions,
        choose_connection,
        generate_models,
        list_tables,
        parse_tables,
    )

    runtime = ctx.obj["runtime"]
    if not runtime.in_project_path():
        click.secho(
            f"❌ No {runtime.settings.template.entry_file} found in the current "
            "directory, run this from the project root",
            fg="red",
        )
        sys.exit(1)

    try:
        env = Env.parse(os.environ.get(RUNTIME_ENV_KEY), default=Env.LOCAL)
        app = load_app_config(runtime.config_file_for(env.value))
    except (ValueError, ConfigError) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if not app.connections:
        click.secho("❌ No database connection configured, cannot generate models", fg="red")
        sys.exit(1)

    try:
        conn = choose_connection(app, conn_key, chooser=_choose_connection)

        chosen = parse_tables(tables)
        if not chosen:
            chosen = _choose_tables(list_tables(conn))
            click.secho(f"✅ {len(chosen)} table(s) selected: {', '.join(chosen)}", fg="green")

        generate_models(
            conn,
            ModelGenOptions(tables=chosen, output_path=output_path, package_name=package_name),
            cwd=runtime.working_dir,
            gentool=runtime.settings.toolchain.gentool,
            timeout=runtime.settings.timeouts.tool,
        )
    except ModelGenError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.echo()
    click.secho("🎉 Model files generated successfully!", fg="green", bold=True)
