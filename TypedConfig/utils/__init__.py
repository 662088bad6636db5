"""
Utility functions for the TypedConfig package.

This module provides the precondition helpers used across the package to
validate arguments eagerly, before any state is touched.
"""

from typing import Any, Optional, Sized

from TypedConfig.exceptions import InvalidArgumentError


def check_not_none(value: Any, message: str) -> Any:
    """
    Raise InvalidArgumentError if ``value`` is None.

    Returns:
        The value, so checks can be used inline.
    """
    if value is None:
        raise InvalidArgumentError(message)
    return value


def check_not_blank(value: Optional[str], message: str) -> str:
    """Raise InvalidArgumentError if ``value`` is None, not a string, or only whitespace."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(message, context={"value": value})
    return value


def check_not_empty(values: Optional[Sized], message: str) -> Sized:
    """Raise InvalidArgumentError if ``values`` is None or has no elements."""
    if values is None or len(values) == 0:
        raise InvalidArgumentError(message)
    return values


def check_argument(condition: bool, message: str) -> None:
    if not condition:
        raise InvalidArgumentError(message)


__all__ = ['check_not_none', 'check_not_blank', 'check_not_empty', 'check_argument']
