"""Command line entry point for smart-release."""

from __future__ import annotations

import logging

import click
from rich.console import Console

from smart_release import __version__
from smart_release.exceptions import SmartReleaseError

console = Console()
err_console = Console(stderr=True)


def init_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )


path_option = click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Workspace directory (defaults to the current directory).",
)


@click.group()
@click.version_option(__version__, prog_name="smart-release")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Release automation for multi-package workspaces."""
    init_logging(verbose)


@cli.command()
@path_option
@click.argument("packages", nargs=-1)
def segments(path: str | None, packages: tuple[str, ...]) -> None:
    """Show the release segments of PACKAGES (all packages by default)."""
    from smart_release.cli.commands.segments import run_segments

    try:
        run_segments(path, packages, console, err_console)
    except SmartReleaseError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e


@cli.command()
@path_option
@click.option("--raw", is_flag=True, help="Print markdown source instead of rendering it.")
@click.argument("packages", nargs=-1)
def changelog(path: str | None, raw: bool, packages: tuple[str, ...]) -> None:
    """Preview the changelog of PACKAGES (all packages by default)."""
    from smart_release.cli.commands.changelog import run_changelog

    try:
        run_changelog(path, packages, raw, console, err_console)
    except SmartReleaseError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e


def main() -> None:
    cli()
