"""Implementation of the 'changelog' command.

Renders a changelog preview per package from its release segments.
Nothing is written to the repository.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markdown import Markdown
from rich.rule import Rule

from smart_release.cli.commands._context import open_context
from smart_release.core.changelog import render_changelog
from smart_release.core.segments import ref_segments

if TYPE_CHECKING:
    from rich.console import Console


def run_changelog(
    path: str | None,
    packages: tuple[str, ...],
    raw: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the changelog command.

    Args:
        path: Optional path to the workspace directory
        packages: Package names to render (all packages if empty)
        raw: Print markdown source instead of rendering it
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
            content = render_changelog(name, segmentation.segments, ctx.config)
            if not content:
                console.print(f"[yellow]{name}: no changes found.[/]")
                continue

            if raw:
                console.print(content, markup=False, highlight=False)
            else:
                console.print(Rule(f"[bold]{name}[/]"))
                console.print(Markdown(content))
