"""
CLI command for creating a new project from the template.

Thin wrapper over ``aurora.core.use_cases.create``.
"""

from __future__ import annotations

import sys
import warnings
from pathlib import Path

import click

_STAGE_MESSAGES = {
    "fetch": "⚙️  Pulling the template repository...",
    "normalize": "⚙️  Initializing the local git repository and branch...",
    "finalize": "⚙️  Setting up go.mod and module references...",
}


def _confirm_overwrite(target: Path) -> bool:
    click.secho(f"🤔 Target path {target} already exists!", fg="yellow")
    return click.confirm("Overwrite the existing directory?", default=False)


def _on_stage(stage: str) -> None:
    message = _STAGE_MESSAGES.get(stage)
    if message:
        click.echo(message)


@click.command()
@click.argument("name", required=False)
@click.option(
    "--path", "-p", "path", default=None,
    help="Directory to create the project in (default: current directory).",
)
@click.option(
    "--with-demo", "--with.demo", "demo", is_flag=True,
    help="Create the project from the demo branch.",
)
@click.pass_context
def create(ctx: click.Context, name: str | None, path: str | None, demo: bool) -> None:
    """Create a new project from the template repository.

    Whatever is not given on the command line is asked for: the name,
    the location (default: current directory) and whether to include
    the demo code.
    """
    from pydantic import ValidationError

    from aurora.core.models.project import ProjectRequest
    from aurora.core.services.scaffold.errors import CreateError, PathResolutionDegraded
    from aurora.core.services.scaffold.paths import resolve_project_params
    from aurora.core.use_cases.create import create_project

    runtime = ctx.obj["runtime"]
    settings = runtime.settings

    # ── Gather input ────────────────────────────────────────────
    if name is None:
        name = click.prompt("📝 Enter a name for the project").strip()
    if path is None:
        path = click.prompt(
            "📂 Enter the project path", default=str(runtime.working_dir)
        )
    if not demo:
        demo = click.confirm("🧩 Include the demo code?", default=False)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", PathResolutionDegraded)
        resolved = resolve_project_params(name, path or str(runtime.working_dir))
    for w in caught:
        click.secho(f"⚠️  {w.message}", fg="yellow")

    try:
        request = ProjectRequest(
            name=resolved.name, parent=Path(resolved.parent), demo=demo
        )
    except ValidationError as e:
        message = e.errors()[0].get("msg", str(e))
        click.secho(f"❌ Invalid project location: {message}", fg="red")
        sys.exit(1)

    branch = settings.template.branch_for(request.demo)
    click.echo()
    click.secho(f"🚀 Creating project {request.name}", fg="cyan", bold=True)
    click.echo(f"   From:   {settings.template.url} ({branch})")
    click.echo(f"   To:     {request.target}")

    # ── Run ─────────────────────────────────────────────────────
    try:
        result = create_project(
            request,
            settings,
            confirm_overwrite=_confirm_overwrite,
            on_stage=_on_stage,
        )
    except CreateError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    canonical = result.branch
    click.echo()
    click.secho(f"🎉 Project {result.name} created successfully!", fg="green", bold=True)
    click.echo(f"   📁 {result.target}")
    if result.rewrite.files_changed:
        click.echo(f"   💡 Updated module references in {result.rewrite.files_changed} file(s)")
    click.echo(f"   📡 Local git branch: {canonical}")
    click.echo("   Associate a remote repository with:")
    click.secho("      git remote add origin <YourGitRepositoryUrl.git>", fg="green")
    click.echo("   Then push the branch with:")
    click.secho(f"      git push -u origin {canonical}", fg="green")
    click.echo()
