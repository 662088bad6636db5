"""
Convenience constructors for common configuration sources.

Each helper creates a ConfigurationStore bound to one adapter, loads the
source and, when ``polling_interval`` and ``polling_unit`` are given, starts
background reload polling.

Usage:
    from TypedConfig import load_properties, TimeUnit

    config = load_properties("app.properties", polling_interval=30, polling_unit=TimeUnit.SECONDS)
    retries = config.get(int, "retries")
"""

from pathlib import Path
from typing import Mapping, Optional, Union

from TypedConfig.adapters import (
    EnvironmentAdapter, JsonAdapter, PersistenceAdapter, PropertiesAdapter, YamlAdapter,
    adapter_for_path,
)
from TypedConfig.converters import ConverterRegistry
from TypedConfig.scheduler import TimeUnit
from TypedConfig.store import ConfigurationStore

PathLike = Union[str, Path]


def _open(adapter: PersistenceAdapter,
          path: Optional[PathLike],
          registry: Optional[ConverterRegistry],
          delimiter: Optional[str],
          polling_interval: Optional[int],
          polling_unit: Optional[Union[TimeUnit, str]]) -> ConfigurationStore:
    store = ConfigurationStore(adapter=adapter, registry=registry, delimiter=delimiter)
    store.load(path)
    if polling_interval is not None or polling_unit is not None:
        store.start_polling(polling_interval, polling_unit)
    return store


def load_properties(path: PathLike, registry: Optional[ConverterRegistry] = None,
                    delimiter: Optional[str] = None, polling_interval: Optional[int] = None,
                    polling_unit: Optional[Union[TimeUnit, str]] = None) -> ConfigurationStore:
    """Load a ``.properties`` file into a new store."""
    return _open(PropertiesAdapter(), path, registry, delimiter, polling_interval, polling_unit)


def load_yaml(path: PathLike, registry: Optional[ConverterRegistry] = None,
              delimiter: Optional[str] = None, polling_interval: Optional[int] = None,
              polling_unit: Optional[Union[TimeUnit, str]] = None) -> ConfigurationStore:
    """Load a YAML file into a new store."""
    return _open(YamlAdapter(), path, registry, delimiter, polling_interval, polling_unit)


def load_json(path: PathLike, registry: Optional[ConverterRegistry] = None,
              delimiter: Optional[str] = None, polling_interval: Optional[int] = None,
              polling_unit: Optional[Union[TimeUnit, str]] = None) -> ConfigurationStore:
    """Load a JSON file into a new store."""
    return _open(JsonAdapter(), path, registry, delimiter, polling_interval, polling_unit)


def load_file(path: PathLike, registry: Optional[ConverterRegistry] = None,
              delimiter: Optional[str] = None, polling_interval: Optional[int] = None,
              polling_unit: Optional[Union[TimeUnit, str]] = None) -> ConfigurationStore:
    """
    Load a file into a new store, choosing the format from its suffix.

    Raises:
        InvalidArgumentError: If the suffix is not .properties, .yml, .yaml or .json
    """
    return _open(adapter_for_path(path), path, registry, delimiter, polling_interval, polling_unit)


def from_environment(prefix: Optional[str] = None, registry: Optional[ConverterRegistry] = None,
                     delimiter: Optional[str] = None,
                     environ: Optional[Mapping[str, str]] = None) -> ConfigurationStore:
    """
    Load environment variables into a new store.

    Calling ``reload()`` on the result re-reads the environment. There is no
    file to poll, so polling is not offered.
    """
    return _open(EnvironmentAdapter(prefix=prefix, environ=environ), None, registry, delimiter, None, None)
