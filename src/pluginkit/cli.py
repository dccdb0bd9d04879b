from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from pluginkit.config import load_env
from pluginkit.devenv import DEFAULT_PYTHON_VERSION, settings_from_env, setup_devenv
from pluginkit.errors import PluginkitError
from pluginkit.params import ParameterRequest, select_parameter_source
from pluginkit.review import PERSPECTIVES, run_review
from pluginkit.scaffold import Scaffolder, Workspace
from pluginkit.sync import (
    BASE_ONLY,
    DIFFER,
    STATUS_MISSING,
    STATUS_OK,
    SYNC_DIRS,
    SYNC_EXCLUDES,
    UPSTREAM_ONLY,
    sync_check,
)

app = typer.Typer(help="Scaffold, set up, review and sync plugins in a marketplace repository")
console = Console()
err_console = Console(stderr=True)

_DIFF_LABELS = {
    UPSTREAM_ONLY: "[UPSTREAM ONLY]",
    BASE_ONLY: "[BASE ONLY]",
    DIFFER: "[DIFFER]",
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    env = load_env()
    level = logging.DEBUG if verbose else getattr(logging, env.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@contextmanager
def _operator_errors() -> Iterator[None]:
    try:
        yield
    except PluginkitError as exc:
        err_console.print(f"[bold red]error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


@app.command()
def scaffold(
    name: str = typer.Argument(..., help="Plugin name (directory and marketplace key)"),
    description: str | None = typer.Option(None, "--description", "-d", help="Plugin description"),
    version: str | None = typer.Option(None, "--version", "-v", help="Plugin version (default: 0.1.0)"),
    author: str | None = typer.Option(None, "--author", "-a", help="Author name"),
    author_url: str | None = typer.Option(None, "--author-url", help="Author URL"),
    keywords: str | None = typer.Option(None, "--keywords", "-k", help="Comma-separated keywords"),
    repository: str | None = typer.Option(None, "--repository", "-r", help="Repository URL"),
    license_id: str | None = typer.Option(None, "--license", help="License identifier"),
    non_interactive: bool = typer.Option(
        False, "--non-interactive", help="Do not prompt; use defaults where possible"
    ),
    root: Path | None = typer.Option(None, help="Marketplace root (default: $PLUGINKIT_ROOT or cwd)"),
) -> None:
    env = load_env()
    request = ParameterRequest(
        name=name,
        description=description,
        version=version,
        author=author,
        author_url=author_url,
        keywords=keywords,
        repository=repository,
        license=license_id,
        non_interactive=non_interactive,
    )
    with _operator_errors():
        scaffolder = Scaffolder(
            Workspace.from_root(root or env.root),
            select_parameter_source(non_interactive),
        )
        unit_dir = scaffolder.run(request)
    console.print(f"[bold green]Scaffolded plugin at[/bold green] {unit_dir}")


@app.command()
def devenv(
    project_name: str | None = typer.Argument(
        None, help="Project name in kebab-case (default: $PROJECT_NAME)"
    ),
    python_version: str | None = typer.Option(
        None, help=f"Python version (default: $PYTHON_VERSION or {DEFAULT_PYTHON_VERSION})"
    ),
    dep: list[str] = typer.Option(None, help="Production dependency (repeatable, default: $DEPS)"),
    dev_dep: list[str] = typer.Option(None, help="Development dependency (repeatable, default: $DEV_DEPS)"),
    target_dir: Path | None = typer.Option(None, help="Output directory (default: $TARGET_DIR or cwd)"),
) -> None:
    with _operator_errors():
        environ = dict(os.environ)
        if project_name is not None:
            environ["PROJECT_NAME"] = project_name
        settings = settings_from_env(environ)
        # explicit flags win over the environment
        if python_version:
            settings.python_version = python_version
        if dep:
            settings.deps = tuple(dep)
        if dev_dep:
            settings.dev_deps = tuple(dev_dep)
        if target_dir is not None:
            settings.target_dir = target_dir
        console.print(f"Setting up Python project: [bold]{settings.project_name}[/bold]")
        console.print(f"  Package name:    {settings.package_name}")
        console.print(f"  Python version:  {settings.python_version} ({settings.python_short})")
        console.print(f"  Target dir:      {settings.target_dir}")
        result = setup_devenv(settings)

    console.print("Generated configuration files:")
    console.print("  " + ", ".join(path.name for path in result.files))
    console.print("Created directories:")
    for path in result.directories:
        console.print(f"  {path.relative_to(settings.target_dir)}/ (with __init__.py)")
    for cmd in result.commands:
        console.print(f"Ran: {' '.join(cmd)}")
    console.print("\n[bold green]Setup complete.[/bold green] Next steps:")
    console.print("  direnv allow     # Activate the environment")
    console.print("  uv sync          # Install Python dependencies")


@app.command()
def review(
    perspective: str = typer.Argument("bugs", help=" | ".join(PERSPECTIVES)),
    target: str = typer.Argument(".", help="Path to review"),
    command: str | None = typer.Option(None, help="Reviewer executable (default: codex)"),
) -> None:
    env = load_env()
    with _operator_errors():
        code = run_review(perspective, target, executable=command or env.review_command)
    if code != 0:
        raise typer.Exit(code=code)


@app.command("sync-check")
def sync_check_cmd(
    upstream: Path | None = typer.Argument(None, help="Upstream checkout to compare against"),
    base: Path = typer.Option(Path("."), help="Base plugin directory"),
) -> None:
    env = load_env()
    upstream = upstream or env.upstream
    with _operator_errors():
        reports = sync_check(base, upstream, SYNC_DIRS, SYNC_EXCLUDES)

    console.rule("Base Plugin Sync Check")
    console.print(f"Base:     {base}")
    console.print(f"Upstream: {upstream}\n")
    for report in reports:
        console.print(f"--- {report.name} ---")
        if report.status == STATUS_MISSING:
            console.print("  [MISSING] Directory does not exist in base", style="red", markup=False)
        elif report.status == STATUS_OK:
            console.print("  [OK] No differences", style="green", markup=False)
        else:
            for diff in report.differences:
                console.print(f"  {_DIFF_LABELS[diff.kind]} {diff.path}", markup=False)
        console.print()
    console.rule()
    console.print("Legend:", markup=False)
    console.print("  [OK]            - No differences", markup=False)
    console.print("  [UPSTREAM ONLY] - Exists only upstream", markup=False)
    console.print("  [BASE ONLY]     - Exists only in base plugin", markup=False)
    console.print("  [DIFFER]        - Content differs", markup=False)
    console.print("\nExcluded (project-specific):")
    for name in SYNC_EXCLUDES:
        console.print(f"  - {name}")


if __name__ == "__main__":
    app()
