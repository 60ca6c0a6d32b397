"""
CLI Error Handling
==================

Consistent error reporting and exit codes for the ncmc command.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from ncmc_sdk.errors import InvalidLengthError, NCMCError


class ExitCode(IntEnum):
    """Exit codes for the ncmc command."""
    SUCCESS = 0
    CODEC_ERROR = 1      # Block failed to decode, encode or verify
    INVALID_ARGS = 2     # Invalid arguments, bad hex input or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an exception raised by a command and exit.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Decode")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    prefix = f"{error_type} error: " if error_type else "Error: "

    if isinstance(error, InvalidLengthError):
        # Wrong-sized input is a usage problem, not a corrupt card
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, NCMCError):
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.CODEC_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
