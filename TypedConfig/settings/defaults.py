"""
Default settings for TypedConfig.

This module defines the library-level defaults used when a store or
converter is created without explicit arguments. The complete set is
assembled in the DEFAULT_SETTINGS dictionary.

Default settings can be overridden by:
1. Environment variables (TYPEDCONFIG_DELIMITER, TYPEDCONFIG_DATE_FORMAT, ...)
2. Explicit constructor arguments on the store and converters
"""

from typing import Dict, Any

# Defaults for list-valued leaves
LIST_DEFAULTS: Dict[str, Any] = {
    # Character used to join and split list values
    "delimiter": ",",
}

# Defaults for the built-in converters
CONVERTER_DEFAULTS: Dict[str, Any] = {
    # strftime/strptime pattern used by the date converter
    "date_format": "%m/%d/%Y",
    # Pattern for the datetime converter (null = ISO 8601)
    "datetime_format": None,
}

# Defaults for background reload polling
POLLING_DEFAULTS: Dict[str, Any] = {
    # Seconds to wait for the polling thread when stopping it
    "join_timeout": 5.0,
}

DEFAULT_SETTINGS: Dict[str, Any] = {
    "lists": LIST_DEFAULTS,
    "converters": CONVERTER_DEFAULTS,
    "polling": POLLING_DEFAULTS,
}
