"""
CLI Error Handling
==================

Maps whatever escaped an assembly run to a message on stderr and an exit
code. Assembly errors already carry file, line and a hint, so they are
printed as-is behind a short prefix; only unexpected exceptions get a
traceback, and only with --verbose.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from hackasm.errors import HackError


class ExitCode(IntEnum):
    """Process exit codes for hackasm."""
    SUCCESS = 0
    BUILD_ERROR = 1      # The source did not assemble
    INVALID_ARGS = 2     # Bad option, or an input/output path we cannot use
    INTERNAL_ERROR = 3   # A bug in hackasm


# Failures caused by the command line or the filesystem, not by the source
_USER_ERRORS = (click.BadParameter, FileNotFoundError, PermissionError, IsADirectoryError)


def exit_code_for(error: Exception) -> ExitCode:
    """Return the exit code a given exception should produce."""
    if isinstance(error, HackError):
        return ExitCode.BUILD_ERROR
    if isinstance(error, _USER_ERRORS):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report error on stderr and exit with exit_code_for(error).

    Args:
        error: The exception that ended the run
        verbose: Print a traceback for internal errors
        error_type: Word put in front of assembly errors ("Assembly error: ...")

    Raises:
        SystemExit: Always
    """
    code = exit_code_for(error)

    if code is ExitCode.BUILD_ERROR:
        label = f"{error_type} error" if error_type else "Error"
    elif code is ExitCode.INVALID_ARGS:
        label = "Error"
    else:
        label = "Internal error"

    click.echo(f"{label}: {error}", err=True)
    if code is ExitCode.INTERNAL_ERROR and verbose:
        traceback.print_exc()
    sys.exit(code)
