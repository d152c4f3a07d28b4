"""Command-line interface for contourcam.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for job processing
- Verbose/quiet output modes
- Preview mode for checking merged contours
- Detailed error reporting
"""

from contourcam.cli.app import cli, main

__all__ = ["cli", "main"]
