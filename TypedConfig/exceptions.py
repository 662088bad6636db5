"""
Custom exceptions for the TypedConfig package.

This module defines a hierarchical exception system that provides:
1. Specific, technical error information for debugging and logging
2. User-friendly error messages for end-users
3. Error codes for consistent error identification
4. Optional context information for additional debugging

None of these errors are retried by the library; they always surface to the
direct caller.
"""

from typing import Optional, Dict, Any
import traceback
import sys


class TypedConfigError(Exception):
    """Base exception for all TypedConfig errors."""

    error_code = "TC-GENERIC-ERROR"
    user_message = "An unexpected configuration error occurred."

    def __init__(
        self,
        message: Optional[str] = None,
        user_message: Optional[str] = None,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        include_traceback: bool = True
    ):
        # Technical message for logs
        self.message = message or self.__class__.__doc__ or "An error occurred."
        super().__init__(self.message)

        # User-friendly message
        self.user_message = user_message or self.__class__.user_message

        self.error_code = error_code or self.__class__.error_code

        # Additional context
        self.context = context or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

        self.traceback = None
        if include_traceback:
            self.traceback = traceback.format_exc() if sys.exc_info()[0] else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to a dictionary for reporting."""
        error_dict = {
            "error_code": self.error_code,
            "message": self.user_message,
        }

        # Include technical details only in debug mode
        if self.context.get('debug'):
            error_dict["technical_details"] = {
                "message": self.message,
                "context": self.context,
            }
            if self.traceback:
                error_dict["technical_details"]["traceback"] = self.traceback
            if self.cause:
                error_dict["technical_details"]["cause"] = str(self.cause)

        return error_dict


# Converter Errors - 1000 range
class ConverterError(TypedConfigError):
    """Base exception for all converter-related errors."""
    error_code = "TC-CONV-1000"
    user_message = "A value could not be converted."


class ConverterNotFoundError(ConverterError):
    """Exception raised when no converter is registered for a type."""
    error_code = "TC-CONV-1001"
    user_message = "The requested value type is not supported."


class ConversionError(ConverterError):
    """Exception raised when a converter rejects a raw or typed value."""
    error_code = "TC-CONV-1002"
    user_message = "A configuration value has an invalid format."


# Argument Errors - 2000 range
class InvalidArgumentError(TypedConfigError, ValueError):
    """Exception raised when an argument fails an eager precondition check."""
    error_code = "TC-ARG-2000"
    user_message = "An invalid argument was provided."


# Key Errors - 3000 range
class KeyPathError(TypedConfigError):
    """Base exception for nested-key errors."""
    error_code = "TC-KEY-3000"
    user_message = "The configuration key is invalid."


class InvalidKeyError(KeyPathError):
    """Exception raised when a nested key is empty or has an empty segment."""
    error_code = "TC-KEY-3001"
    user_message = "The configuration key is malformed."


class InvalidPathError(KeyPathError):
    """Exception raised when a nested write would treat a leaf value as a map."""
    error_code = "TC-KEY-3002"
    user_message = "The configuration key crosses an existing value."


# Persistence Errors - 4000 range
class PersistenceError(TypedConfigError):
    """Base exception for all persistence-related errors."""
    error_code = "TC-IO-4000"
    user_message = "The configuration source could not be accessed."


class LoadFailedError(PersistenceError):
    """Exception raised when a configuration source cannot be loaded."""
    error_code = "TC-IO-4001"
    user_message = "The configuration could not be loaded."


class ReloadFailedError(LoadFailedError):
    """Exception raised when a reload fails; the store has already been cleared."""
    error_code = "TC-IO-4002"
    user_message = "The configuration could not be reloaded and is now empty."


class PersistFailedError(PersistenceError):
    """Exception raised when the configuration cannot be saved."""
    error_code = "TC-IO-4003"
    user_message = "The configuration could not be saved."
