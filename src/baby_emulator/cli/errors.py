"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes across all CLI tools.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Assembly or linking error
    INVALID_ARGS = 2     # Invalid arguments, configuration or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error
    STEP_LIMIT = 4       # Program did not stop within the step budget


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Unified exception handler for all CLI tools.

    Formats the error message appropriately, optionally prints traceback
    in verbose mode, and exits with the correct exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Run")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from baby_emulator.errors import AssemblerError, BabyError, ConfigurationError

    if isinstance(error, AssemblerError):
        # Already formatted as "file:line:col: error: ..."
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, ConfigurationError):
        click.echo(f"Configuration error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, BabyError):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        # Unexpected internal error
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
