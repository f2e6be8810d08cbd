"""Command-line front end for RQM."""

from ._app import app, create_app, main
from ._commands import CLIContext, OutputFormat

__all__ = ["CLIContext", "OutputFormat", "app", "create_app", "main"]
