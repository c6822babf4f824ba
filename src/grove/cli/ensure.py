"""CLI error handling utilities with styled output.

Ensure asserts invariants in CLI commands with consistent, user-friendly
error messages. All errors use a red "Error:" prefix.

`handle_grove_errors` converts GroveError raised by core operations into the
same styled output and exit code 1.
"""

import functools
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from grove.cli.output import format_error, user_output
from grove.core.errors import GroveError

P = ParamSpec("P")
R = TypeVar("R")
T = TypeVar("T")


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        Provides type narrowing: takes `T | None` and returns `T`.

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            user_output(format_error(error_message))
            raise SystemExit(1)
        return value

    @staticmethod
    def not_empty(value: str | list | dict | None, error_message: str) -> None:
        """Ensure value is not empty (non-empty string, list, dict), otherwise exit.

        Raises:
            SystemExit: If value is None, empty string, empty list, or empty dict
        """
        if not value:
            user_output(format_error(error_message))
            raise SystemExit(1)


def handle_grove_errors(func: Callable[P, R]) -> Callable[P, R]:
    """Decorator reporting GroveError as a styled error with exit code 1."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except GroveError as e:
            user_output(format_error(str(e)))
            raise SystemExit(1) from e

    return wrapper
