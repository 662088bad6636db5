"""
Persistence adapters for TypedConfig.

Each adapter implements one concrete format. :func:`adapter_for_path` picks
one from a file suffix.
"""

from pathlib import Path
from typing import Dict, Type, Union

from TypedConfig.adapters.base import PersistenceAdapter
from TypedConfig.adapters.environment import EnvironmentAdapter
from TypedConfig.adapters.json_adapter import JsonAdapter
from TypedConfig.adapters.properties import PropertiesAdapter
from TypedConfig.adapters.yaml_adapter import YamlAdapter
from TypedConfig.exceptions import InvalidArgumentError

ADAPTERS_BY_SUFFIX: Dict[str, Type[PersistenceAdapter]] = {
    ".properties": PropertiesAdapter,
    ".yml": YamlAdapter,
    ".yaml": YamlAdapter,
    ".json": JsonAdapter,
}


def adapter_for_path(path: Union[str, Path]) -> PersistenceAdapter:
    """
    Create the adapter matching the suffix of ``path``.

    Raises:
        InvalidArgumentError: If the suffix is not recognised
    """
    suffix = Path(path).suffix.lower()
    adapter_class = ADAPTERS_BY_SUFFIX.get(suffix)
    if adapter_class is None:
        raise InvalidArgumentError(
            f"Unsupported configuration file format: {suffix or '(none)'}",
            context={"path": str(path)},
        )
    return adapter_class()


__all__ = [
    "PersistenceAdapter", "PropertiesAdapter", "YamlAdapter", "JsonAdapter",
    "EnvironmentAdapter", "ADAPTERS_BY_SUFFIX", "adapter_for_path",
]
