"""gradle-decl command-line interface."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from . import __version__
from .config import ConfigError, Settings, load_settings
from .errors import DeclarationError
from .loader import DeclarationLoader
from .logging import configure_logging
from .render import render_declarations
from .types import BuildDeclarations, DuplicatePolicy

app = typer.Typer(help="Inspect buildscript and allprojects declarations.")
LOGGER = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None
    duplicates: DuplicatePolicy | None = None


@app.callback()
def _gradle_decl(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to settings (env GRADLE_DECL_CONFIG or ~/.config/gradle-decl/config.yaml).",
        ),
    ] = None,
    duplicates: Annotated[
        DuplicatePolicy | None,
        typer.Option(
            "--duplicates",
            help="How repeated repositories or dependencies are handled (overrides settings).",
            case_sensitive=False,
        ),
    ] = None,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(config_path=resolved, duplicates=duplicates)


@app.command()
def show(
    ctx: typer.Context,
    build_file: Annotated[Path, typer.Argument(help="Path to the build script.")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Emit the declarations as JSON."),
    ] = False,
) -> None:
    """Print the repositories and classpath dependencies a build script declares."""

    declarations = _load(ctx, build_file)
    if as_json:
        typer.echo(json.dumps(declarations.as_dict(), indent=2))
        return

    typer.echo(f"→ {declarations.source}")
    typer.echo("buildscript repositories:")
    _echo_repositories(declarations.buildscript_repositories)
    typer.echo("classpath:")
    if not declarations.classpath:
        typer.echo("  (none)")
    for coordinate, version in declarations.classpath.items():
        typer.echo(f"  - {coordinate} {version}")
    typer.echo("allprojects repositories:")
    _echo_repositories(declarations.project_repositories)


@app.command()
def check(
    ctx: typer.Context,
    build_file: Annotated[Path, typer.Argument(help="Path to the build script.")],
) -> None:
    """Validate a build script and print a one-line summary."""

    declarations = _load(ctx, build_file)
    typer.secho(
        f"OK {declarations.source}: "
        f"{len(declarations.buildscript_repositories)} buildscript repositories, "
        f"{len(declarations.classpath)} classpath dependencies, "
        f"{len(declarations.project_repositories)} project repositories",
        fg=typer.colors.GREEN,
    )


@app.command("format")
def format_(
    ctx: typer.Context,
    build_file: Annotated[Path, typer.Argument(help="Path to the build script.")],
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Write the result here instead of stdout."),
    ] = None,
    indent: Annotated[int, typer.Option("--indent", min=1, help="Spaces per level.")] = 4,
) -> None:
    """Print the canonical rendering of a build script's declarations."""

    declarations = _load(ctx, build_file)
    text = render_declarations(declarations, indent=indent)
    if output is None:
        typer.echo(text, nl=False)
        return
    target = output.expanduser()
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        typer.secho(f"Cannot write {target}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc
    LOGGER.info("Wrote %s", target)


def _echo_repositories(repositories: tuple) -> None:
    if not repositories:
        typer.echo("  (none)")
    for index, repository in enumerate(repositories, start=1):
        typer.echo(f"  {index}. {repository.value}")


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _load(ctx: typer.Context, build_file: Path) -> BuildDeclarations:
    state = _state(ctx)
    settings = _load_settings(state.config_path)
    try:
        configure_logging(settings.logging)
    except OSError as exc:
        typer.secho(f"Cannot open log file: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc
    policy = state.duplicates or settings.duplicates
    LOGGER.debug("gradle-decl %s loading %s (duplicates=%s)", __version__, build_file, policy.value)
    try:
        return DeclarationLoader(policy).load_path(build_file)
    except DeclarationError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc


def _load_settings(path: Path | None) -> Settings:
    try:
        return load_settings(path)
    except ConfigError as exc:
        _config_failure(exc)


def _config_failure(exc: ConfigError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


def main() -> None:  # pragma: no cover - delegated to Typer
    app()


__all__ = ["app", "main"]
