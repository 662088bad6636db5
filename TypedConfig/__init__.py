"""
TypedConfig - a typed, hierarchical configuration store.

The store keeps configuration as a tree of string values and nested maps.
Callers read and write typed values through converters, by flat keys or by
dot-separated nested keys, and can have the store reload itself in the
background when its backing file changes.

Key Components:
- ConfigurationStore: the tree plus typed get/set operations and reload
- ConverterRegistry: maps types to string converters
- Persistence adapters: properties, YAML, JSON and environment sources
- ReloadScheduler: background polling of the bound file

Usage Examples:
    from TypedConfig import load_properties

    config = load_properties("app.properties")
    name = config.get(str, "name")
    config.set("retries", 5)
    config.reload()  # back to the file contents

    # Setting the log level
    from TypedConfig import set_log_level
    set_log_level('debug')
"""

__version__ = '1.0.0'

from TypedConfig.utils.logging import get_logger, set_log_level, configure_logging
from TypedConfig.exceptions import (
    TypedConfigError, ConverterError, ConverterNotFoundError, ConversionError,
    InvalidArgumentError, KeyPathError, InvalidKeyError, InvalidPathError,
    PersistenceError, LoadFailedError, ReloadFailedError, PersistFailedError,
)
from TypedConfig.converters import Converter, ConverterRegistry, FunctionConverter, URI, default_registry
from TypedConfig.adapters import (
    PersistenceAdapter, PropertiesAdapter, YamlAdapter, JsonAdapter, EnvironmentAdapter, adapter_for_path,
)
from TypedConfig.scheduler import ReloadScheduler, TimeUnit
from TypedConfig.store import ConfigurationStore, SourceBinding
from TypedConfig.factory import load_properties, load_yaml, load_json, load_file, from_environment

__all__ = [
    'ConfigurationStore', 'SourceBinding', 'ReloadScheduler', 'TimeUnit',
    'Converter', 'ConverterRegistry', 'FunctionConverter', 'URI', 'default_registry',
    'PersistenceAdapter', 'PropertiesAdapter', 'YamlAdapter', 'JsonAdapter', 'EnvironmentAdapter',
    'adapter_for_path',
    'load_properties', 'load_yaml', 'load_json', 'load_file', 'from_environment',
    'TypedConfigError', 'ConverterError', 'ConverterNotFoundError', 'ConversionError',
    'InvalidArgumentError', 'KeyPathError', 'InvalidKeyError', 'InvalidPathError',
    'PersistenceError', 'LoadFailedError', 'ReloadFailedError', 'PersistFailedError',
    'get_logger', 'set_log_level', 'configure_logging',
]
