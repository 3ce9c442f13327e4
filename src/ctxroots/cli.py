"""Command-line interface for inspecting analysis context roots."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from .context_root import ContextRoot
from .locator import ContextLocator, InvalidArgumentError
from .session import AnalysisContext
from .settings import LocatorSettings, SettingsError, load_settings

APP_HELP = "Discover the analysis context roots of a workspace."
LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"

app = typer.Typer(help=APP_HELP)


def _configure_logging(verbose: bool) -> None:
    """Send DEBUG records to stderr when ``verbose`` is set."""
    if not verbose:
        return
    logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT, force=True)


def _load_settings(config: Optional[str]) -> LocatorSettings:
    try:
        return load_settings(Path(config) if config else None)
    except SettingsError as error:
        typer.echo(f"Failed to load settings: {error}")
        raise typer.Exit(code=1) from error


def _render_context(context: AnalysisContext) -> None:
    typer.echo(f"Root: {context.root.root.path}")
    typer.echo(f"  manifest: {context.manifest_file or '(none)'}")
    typer.echo(f"  options: {context.options_file or '(none)'}")
    for path in context.included_paths:
        typer.echo(f"  included: {path}")
    for path in context.excluded_paths:
        typer.echo(f"  excluded: {path}")


@app.command()
def locate(
    paths: List[str] = typer.Argument(
        None,
        help="Files or folders to analyze.",
    ),
    exclude: List[str] = typer.Option(
        None,
        "--exclude",
        "-x",
        help="File or folder to leave out (repeatable).",
    ),
    manifest: Optional[str] = typer.Option(
        None,
        "--manifest",
        help="Manifest file to use for top-level roots instead of searching for one.",
    ),
    sdk: Optional[str] = typer.Option(
        None,
        "--sdk",
        help="SDK location passed to each analysis context.",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a ctxroots.yaml settings file.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the contexts as JSON.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log each decision the locator makes.",
    ),
) -> None:
    """Print the context roots covering PATHS."""
    _configure_logging(verbose)
    settings = _load_settings(config)
    locator = ContextLocator(settings=settings)
    try:
        contexts = locator.locate_contexts(
            paths or [],
            excluded_paths=exclude or [],
            manifest_file=manifest,
            sdk_path=sdk,
        )
    except InvalidArgumentError as error:
        raise typer.BadParameter(str(error), param_hint="PATHS") from error

    if json_output:
        typer.echo(json.dumps([context.to_dict() for context in contexts], indent=2))
        return
    if not contexts:
        typer.echo("No context roots found.")
        return
    for context in contexts:
        _render_context(context)


@app.command()
def which(
    file: str = typer.Argument(..., help="File whose governing root should be shown."),
    include: List[str] = typer.Option(
        None,
        "--include",
        "-i",
        help="File or folder to analyze (repeatable).",
    ),
    exclude: List[str] = typer.Option(
        None,
        "--exclude",
        "-x",
        help="File or folder to leave out (repeatable).",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a ctxroots.yaml settings file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log each decision the locator makes.",
    ),
) -> None:
    """Print the root that analyzes FILE."""
    _configure_logging(verbose)
    settings = _load_settings(config)
    locator = ContextLocator(settings=settings)
    try:
        roots = locator.locate_roots(include or [], excluded_paths=exclude or [])
    except InvalidArgumentError as error:
        raise typer.BadParameter(str(error), param_hint="--include") from error

    owner: Optional[ContextRoot] = next((root for root in roots if root.is_analyzed(file)), None)
    if owner is None:
        typer.echo(f"{file} is not analyzed by any context root.")
        raise typer.Exit(code=1)
    typer.echo(owner.root.path)
    if owner.options_path:
        typer.echo(f"  options: {owner.options_path}")
    if owner.manifest_path:
        typer.echo(f"  manifest: {owner.manifest_path}")


if __name__ == "__main__":
    app()
