"""Command-line interface for mono3d.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Vector (extruded outline) and relief (lithophane) modes
- Verbose/quiet output modes
- Dry-run mode for checking a threshold before writing
- Detailed error reporting
"""

from mono3d.cli.app import cli, main

__all__ = ["cli", "main"]
