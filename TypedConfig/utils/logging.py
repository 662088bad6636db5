"""
Centralized logging configuration for the TypedConfig package.

This module provides functions for configuring logging for every TypedConfig
logger. Handlers are attached to the package logger (``TypedConfig``) rather
than the root logger, so applications embedding the store keep control over
their own logging setup.
"""

import json
import logging
import os
import platform
import socket
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, Dict, Any, Union, List

PACKAGE_LOGGER_NAME = 'TypedConfig'

# Default logging format
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_JSON_FORMAT = False

# Environment variables that can be used to set log level, format and file
LOG_LEVEL_ENV_VAR = 'TYPEDCONFIG_LOG_LEVEL'
LOG_FORMAT_ENV_VAR = 'TYPEDCONFIG_LOG_FORMAT'  # Can be 'json' or 'text'
LOG_FILE_ENV_VAR = 'TYPEDCONFIG_LOG_FILE'

LOG_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
    'critical': logging.CRITICAL,
}

_logging_configured = False

_service_info = {
    'service_name': 'typedconfig',
    'service_version': None,
    'hostname': socket.gethostname(),
    'os': platform.system(),
}


class JsonFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': self.formatTime(record, '%Y-%m-%dT%H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        for key, value in _service_info.items():
            if value is not None:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info),
            }

        # Structured fields attached by StructuredLoggerAdapter
        if hasattr(record, 'extras') and record.extras:
            for key, value in record.extras.items():
                if key != 'extras':
                    log_data[key] = value

        return json.dumps(log_data, default=str)


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """
    Adapter for structured logging with consistent fields.

    Attaches the adapter's context (for example the bound source path of a
    store) to every record, merged with any ``extra`` given per call.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extras = dict(self.extra)
        if 'extra' in kwargs:
            extras.update(kwargs['extra'])

        kwargs_copy = kwargs.copy()
        kwargs_copy['extra'] = dict(extras)
        kwargs_copy['extra']['extras'] = extras
        return msg, kwargs_copy


def configure_logging(level: Optional[Union[int, str]] = None,
                      format_str: Optional[str] = None,
                      use_json: Optional[bool] = None,
                      log_file: Optional[str] = None) -> None:
    """
    Configure logging for the TypedConfig package.

    Called lazily by :func:`get_logger`; call it explicitly to override the
    level, format or destination.

    Args:
        level: Log level to use (default: WARNING or value from TYPEDCONFIG_LOG_LEVEL)
        format_str: Log format string for text format (default: predefined format)
        use_json: Whether to use JSON structured logging (default: False)
        log_file: Optional path to a log file (if not set, logs to stderr)
    """
    global _logging_configured

    if _logging_configured and level is None and format_str is None and use_json is None and log_file is None:
        return

    if level is None:
        env_level = os.environ.get(LOG_LEVEL_ENV_VAR)
        level = env_level.lower() if env_level else logging.WARNING

    if isinstance(level, str):
        level = LOG_LEVELS.get(level.lower(), logging.WARNING)

    if format_str is None:
        format_str = DEFAULT_LOG_FORMAT

    if use_json is None:
        env_format = os.environ.get(LOG_FORMAT_ENV_VAR, '').lower()
        use_json = env_format == 'json' if env_format else DEFAULT_JSON_FORMAT

    if log_file is None:
        log_file = os.environ.get(LOG_FILE_ENV_VAR)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)

    # Remove existing handlers to avoid duplicate logs
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        try:
            handlers.append(RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5
            ))
        except OSError as e:
            # Don't fail if we can't create the log file
            print(f"Warning: Could not create log file {log_file}: {e}", file=sys.stderr)

    for handler in handlers:
        if use_json:
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(logging.Formatter(format_str))
        package_logger.addHandler(handler)

    _logging_configured = True

    try:
        from TypedConfig import __version__
        _service_info['service_version'] = __version__
    except ImportError:
        pass

    log_mode = 'JSON structured' if use_json else 'text'
    package_logger.debug(f"Logging configured with level: {logging.getLevelName(level)}, format: {log_mode}")


def set_log_level(level: Union[int, str]) -> None:
    """
    Set the log level for TypedConfig loggers at runtime.

    Args:
        level: 'debug', 'info', 'warning', 'error', 'critical' or a logging constant

    Example:
        >>> from TypedConfig.utils.logging import set_log_level
        >>> set_log_level('debug')  # Show every reload tick
    """
    if isinstance(level, str):
        level_str = level.lower()
        if level_str not in LOG_LEVELS:
            valid_levels = ", ".join(LOG_LEVELS.keys())
            raise ValueError(f"Invalid log level: {level}. Valid levels are: {valid_levels}")
        level = LOG_LEVELS[level_str]

    configure_logging()
    logging.getLogger(PACKAGE_LOGGER_NAME).setLevel(level)


def get_logger(name: str, extra: Optional[Dict[str, Any]] = None) -> Union[logging.Logger, StructuredLoggerAdapter]:
    """
    Get a logger for the specified name with the TypedConfig configuration.

    Returns a StructuredLoggerAdapter when ``extra`` context is given or JSON
    logging is enabled, otherwise a standard Logger.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Reloading configuration")
    """
    configure_logging()

    logger = logging.getLogger(name)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    using_json = bool(package_logger.handlers) and isinstance(package_logger.handlers[0].formatter, JsonFormatter)
    if extra or using_json:
        return StructuredLoggerAdapter(logger, extra)

    return logger
