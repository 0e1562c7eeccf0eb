"""Implementation of the 'segments' command.

Shows how the history of each package splits into releases.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

from smart_release.cli.commands._context import open_context
from smart_release.core.segments import ref_segments

if TYPE_CHECKING:
    from rich.console import Console

    from smart_release.core.segments import Segmentation


def build_segments_table(package_name: str, segmentation: Segmentation) -> Table:
    """Render the segments of one package as a table."""
    table = Table(title=f"[bold]{package_name}[/]", title_justify="left")
    table.add_column("Boundary", style="cyan")
    table.add_column("Commits", justify="right")
    table.add_column("Latest change")

    for segment in segmentation.segments:
        commits = segment.commits
        latest = f"{commits[0].id[:7]} {commits[0].summary}" if commits else "[dim]-[/]"
        table.add_row(segment.boundary.short_name, str(len(commits)), latest)

    return table


def run_segments(
    path: str | None,
    packages: tuple[str, ...],
    console: Console,
    err_console: Console,
) -> None:
    """Run the segments command.

    Args:
        path: Optional path to the workspace directory
        packages: Package names to show (all packages if empty)
        console: Console for standard output
        err_console: Console for error output
    """
    ctx = open_context(path, err_console)
    with ctx.repo:
        if ctx.history is None:
            console.print("[yellow]Repository has no commits yet. Nothing to do.[/]")
            return

        for name in ctx.selected_packages(packages):
            segmentation = ref_segments(name, ctx.workspace, ctx.repo, ctx.history, ctx.config)
            console.print(build_segments_table(name, segmentation))
            if segmentation.ignored_tags:
                ignored = ", ".join(tag.short_name for tag in segmentation.ignored_tags)
                console.print(f"[dim]Ignored tags outside the current branch: {ignored}[/]")
