"""Command line interface for smart-release."""

from __future__ import annotations

from smart_release.cli.app import cli, main

__all__ = ["cli", "main"]
