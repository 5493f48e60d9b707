"""Error handling for CLI commands.

Commands raise ``CLIError`` subclasses for failures the user can fix; each
carries its own exit code and an optional hint. ``with_error_handling``
turns any exception leaving a command into a message on stderr and that
exit code.

Exit codes:
    1    configuration (settings, command options)
    2    unreadable snapshot or records failing validation
    3    rejected computation (conflicting invoice job set)
    130  cancelled by the user
    255  unexpected error
"""

import sys
import traceback
from contextlib import contextmanager
from typing import Iterator, Optional

import click

from job_costing.cli.utils.formatters import format_error, format_warning

EXIT_ABORTED = 130
EXIT_UNEXPECTED = 255


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    exit_code = 1
    label = "Error"

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Invalid settings, environment or command options."""

    exit_code = 1
    label = "Configuration Error"


class DataValidationError(CLIError):
    """Unreadable snapshot or records that fail validation."""

    exit_code = 2
    label = "Data Validation Error"


class ProcessingError(CLIError):
    """Rejected computation, such as a conflicting invoice job set."""

    exit_code = 3
    label = "Processing Error"


def _echo_err(message: str) -> None:
    click.echo(message, err=True)


def handle_cli_error(error: BaseException, debug: bool = False) -> int:
    """Print a user-facing message for ``error`` and return its exit code.

    Args:
        error: The exception that occurred
        debug: Whether to print the full stack trace of unexpected errors
    """
    if isinstance(error, CLIError):
        _echo_err(format_error(f"{error.label}: {error.message}"))
        if error.recovery_hint:
            _echo_err(format_warning(f"Hint: {error.recovery_hint}"))
        return error.exit_code

    if isinstance(error, click.Abort):
        _echo_err(format_warning("\nOperation cancelled by user"))
        return EXIT_ABORTED

    _echo_err(format_error(f"Unexpected Error: {type(error).__name__}"))
    _echo_err(str(error))
    if debug:
        _echo_err("\nFull stack trace:")
        _echo_err("".join(traceback.format_exception(type(error), error, error.__traceback__)))
    else:
        _echo_err(format_warning("\nRun with --debug flag for full stack trace"))
    return EXIT_UNEXPECTED


@contextmanager
def with_error_handling(debug: bool = False) -> Iterator[None]:
    """Exit with the mapped code when the wrapped block raises.

    click's own exit signals pass through untouched.

    Example:
        @click.command()
        @click.pass_context
        def my_command(ctx):
            with with_error_handling(ctx.obj["debug"]):
                ...
    """
    try:
        yield
    except click.exceptions.Exit:
        raise
    except Exception as e:
        sys.exit(handle_cli_error(e, debug))
