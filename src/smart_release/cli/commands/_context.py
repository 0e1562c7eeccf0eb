"""Shared setup for commands that read release history."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from smart_release.config import load_config
from smart_release.config.loader import find_pyproject_toml
from smart_release.core.history import build_history
from smart_release.project.workspace import load_workspace
from smart_release.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from smart_release.config.models import SmartReleaseConfig
    from smart_release.core.history import History
    from smart_release.project.workspace import Workspace


@dataclass
class ReleaseContext:
    """Everything a history-reading command needs."""

    config: SmartReleaseConfig
    repo: GitRepository
    workspace: Workspace
    history: History | None

    def selected_packages(self, names: tuple[str, ...]) -> list[str]:
        """Requested package names, or every workspace package."""
        if names:
            for name in names:
                self.workspace.package_by_name(name)
            return list(names)
        return self.workspace.names


def open_context(path: str | None, err_console: Console) -> ReleaseContext:
    """Load config, open the repository and snapshot its history.

    The caller owns the returned repository and must close it.
    """
    project_path = Path(path) if path else Path.cwd()
    # Package paths are relative to the directory holding the configuration
    workspace_root = find_pyproject_toml(project_path).parent

    config = load_config(workspace_root)
    repo = GitRepository(project_path)
    try:
        workspace = load_workspace(workspace_root, config, repo_root=repo.path)
        history = build_history(repo, cache_size=config.history.object_cache_size)
    except Exception:
        repo.close()
        raise

    if history is not None and history.skipped:
        err_console.print(
            f"[yellow]Warning:[/] {len(history.skipped)} commit(s) with non-UTF-8 "
            "messages were left out of the history."
        )
    return ReleaseContext(config=config, repo=repo, workspace=workspace, history=history)
