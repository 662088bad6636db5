"""
TypedConfig library settings.

Settings are the defaults the library itself runs with (list delimiter,
date formats, polling join timeout). They are read from DEFAULT_SETTINGS and
overridden section by section from environment variables.

Usage:
    from TypedConfig.settings import get_settings

    delimiter = get_settings()["lists"]["delimiter"]
"""

import copy
import os
from typing import Any, Dict, Mapping, Optional, Tuple

from TypedConfig.exceptions import InvalidArgumentError
from TypedConfig.settings.defaults import DEFAULT_SETTINGS
from TypedConfig.tree.utils import deep_merge

# Environment variable -> (section, key)
ENV_OVERRIDES: Dict[str, Tuple[str, str]] = {
    "TYPEDCONFIG_DELIMITER": ("lists", "delimiter"),
    "TYPEDCONFIG_DATE_FORMAT": ("converters", "date_format"),
    "TYPEDCONFIG_DATETIME_FORMAT": ("converters", "datetime_format"),
    "TYPEDCONFIG_POLLING_JOIN_TIMEOUT": ("polling", "join_timeout"),
}


def _environment_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_var)
        if value is None or value == "":
            continue
        if key == "join_timeout":
            try:
                value = float(value)
            except ValueError as e:
                raise InvalidArgumentError(
                    f"{env_var} must be a number of seconds, got {value!r}",
                    context={"variable": env_var, "value": value},
                    cause=e,
                ) from e
        overrides.setdefault(section, {})[key] = value
    return overrides


def get_settings(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Get the effective library settings.

    Args:
        environ: Mapping to read overrides from (default: os.environ)

    Returns:
        A fresh dictionary; callers may modify it freely.
    """
    environ = os.environ if environ is None else environ
    return deep_merge(copy.deepcopy(DEFAULT_SETTINGS), _environment_overrides(environ))


__all__ = ["DEFAULT_SETTINGS", "ENV_OVERRIDES", "get_settings"]
