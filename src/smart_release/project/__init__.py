"""Workspace and package metadata."""

from __future__ import annotations

from smart_release.project.workspace import Package, Workspace, load_workspace

__all__ = ["Package", "Workspace", "load_workspace"]
