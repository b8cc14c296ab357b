"""
Error handling utilities for target-determinator.

This module contains functions for standardized error handling and formatting
across all CLI handlers. Messages go to stderr because stdout carries the
affected target list.
"""

import sys
import logging
import argparse
import functools
from typing import Callable

from ..exceptions import (
    TargetDeterminatorError,
    ConfigurationError,
    FileSystemError,
    LabelParseError,
    ProcessError,
    ProcessTimeoutError,
    ValidationError,
)

logger = logging.getLogger("target-determinator")


def _err(message: str = "") -> None:
    print(message, file=sys.stderr)


def format_and_print_error(error: Exception, handler_name: str, params: argparse.Namespace):
    """
    Formats and prints a standardized error message for CLI users.

    Args:
        error: The exception that occurred
        handler_name: Name of the handler where the error occurred
        params: Command line parameters
    """
    command = getattr(params, 'command', 'unknown')
    error_message = getattr(error, 'message', str(error))
    error_code = getattr(error, 'code', None)
    error_details = getattr(error, 'details', {})

    if isinstance(error, LabelParseError):
        _err(f"\n❌ Invalid target pattern")
        _err(f"   {error_message}")
        _err(f"\n💡 Target patterns look like //pkg/..., //pkg:all, //pkg:name or @repo//pkg:name")

    elif isinstance(error, ValidationError):
        _err(f"\n❌ Invalid input")
        _err(f"   {error_message}")
        _err(f"\n💡 Please check:")
        _err(f"   • The before-revision exists: {getattr(params, 'before_revision', '<not specified>')}")
        _err(f"   • The working directory is a git checkout: {getattr(params, 'working_directory', '<not specified>')}")

    elif isinstance(error, ConfigurationError):
        _err(f"\n❌ Configuration error")
        _err(f"   {error_message}")
        _err(f"\n💡 Please check your command-line arguments and environment")

    elif isinstance(error, ProcessTimeoutError):
        _err(f"\n❌ Operation timed out")
        _err(f"   {error_message}")

    elif isinstance(error, ProcessError):
        _err(f"\n❌ External command failed")
        _err(f"   {error_message}")
        _err(f"\n💡 Bazel used: {getattr(params, 'bazel', '<not specified>')}")

    elif isinstance(error, FileSystemError):
        _err(f"\n❌ File system error")
        _err(f"   {error_message}")
        _err(f"\n💡 Check that the temporary directory is writable")

    else:
        _err(f"\n❌ Error executing '{command}' command: {error_message}")

    if error_code is not None and not isinstance(error, ProcessError):
        _err(f"\nError code: {error_code}")

    if error_details and getattr(params, 'log', 'INFO') == 'DEBUG':
        _err("\nDetailed error information:")
        for key, value in error_details.items():
            _err(f"  • {key}: {value}")

    if getattr(params, 'log', 'INFO') != 'DEBUG':
        _err(f"\nFor more details, run with --log DEBUG for verbose output")


def handler_error_wrapper(handler_func: Callable) -> Callable:
    """
    A decorator that wraps handler functions with standardized error handling.

    Expected errors are printed for the user and re-raised so main() can pick
    the exit code. Anything else is wrapped in a TargetDeterminatorError.

    Example:
        @handler_error_wrapper
        def handle_drive(context, params):
            ...
    """
    @functools.wraps(handler_func)
    def wrapper(context, params):
        try:
            handler_name = handler_func.__name__
            command_name = params.command if hasattr(params, 'command') else 'unknown'
            logger.debug(f"Starting {handler_name} for command '{command_name}'")

            return handler_func(context, params)

        except TargetDeterminatorError as e:
            logger.debug(f"Expected error in {handler_func.__name__}: {type(e).__name__}: {e.message}")
            format_and_print_error(e, handler_func.__name__, params)
            raise

        except Exception as e:
            logger.error(f"Unexpected error in {handler_func.__name__}: {e}", exc_info=True)

            cli_error = TargetDeterminatorError(
                f"Failed to execute {params.command if hasattr(params, 'command') else 'command'}: {str(e)}",
                details={"error": str(e), "handler": handler_func.__name__}
            )
            format_and_print_error(cli_error, handler_func.__name__, params)
            raise cli_error from e

    return wrapper
