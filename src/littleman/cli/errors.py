"""
CLI Error Reporting
===================

Maps toolchain exceptions to messages and exit codes, shared by lmasm,
lmvm and lmdisasm.

    Exit  Meaning
    ----  ---------------------------------------------------------
    0     success (lmvm: the program executed stop)
    1     assembly, image or runtime error
    2     bad arguments, or an input/output file problem
    3     unexpected internal error
    4     lmvm only: --max-steps reached without a stop
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from littleman.errors import AssemblerError, ImageError, LittleManError, VMError


class ExitCode(IntEnum):
    """Process exit statuses of the command-line tools."""
    SUCCESS = 0
    ERROR = 1
    INVALID_ARGS = 2
    INTERNAL_ERROR = 3
    STEP_LIMIT = 4


# Message label for each error family
ERROR_KINDS: tuple[tuple[type[LittleManError], str], ...] = (
    (AssemblerError, "Assembly"),
    (ImageError, "Image"),
    (VMError, "Runtime"),
)


def describe_error(error: LittleManError) -> str:
    """
    Return the one-line heading plus body used to report ``error``.

    >>> from littleman.errors import NumberOutOfRangeError
    >>> describe_error(NumberOutOfRangeError(600))
    'Runtime error: number 600 is out of range (-500 to 499)'
    """
    for cls, kind in ERROR_KINDS:
        if isinstance(error, cls):
            return f"{kind} error: {error}"
    return f"Error: {error}"


def fail(message: str, code: ExitCode) -> NoReturn:
    """Print ``message`` to stderr and exit with ``code``."""
    click.echo(message, err=True)
    sys.exit(code)


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised inside a command and exit.

    Toolchain errors exit with ERROR, file system problems with
    INVALID_ARGS, and anything else is an INTERNAL_ERROR (with a traceback
    when ``verbose`` is set).
    """
    if isinstance(error, LittleManError):
        fail(describe_error(error), ExitCode.ERROR)

    if isinstance(error, (click.BadParameter, OSError)):
        fail(f"Error: {error}", ExitCode.INVALID_ARGS)

    if verbose:
        traceback.print_exc()
    fail(f"Internal error: {error}", ExitCode.INTERNAL_ERROR)
