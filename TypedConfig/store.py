"""
Configuration store for TypedConfig.

This module implements the ConfigurationStore class: a mutable tree of string
leaves and nested maps, read and written through typed converters, populated
from a persistence adapter and optionally reloaded in the background when
the bound file changes.

Every operation, reads included, holds the store's re-entrant lock for the
duration of its tree access, so a reader never observes a half-cleared tree
during a reload.
"""

import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from TypedConfig.adapters import ADAPTERS_BY_SUFFIX, PersistenceAdapter, adapter_for_path
from TypedConfig.converters import Converter, ConverterRegistry, default_registry
from TypedConfig.exceptions import (
    ConversionError, LoadFailedError, PersistFailedError, ReloadFailedError,
)
from TypedConfig.scheduler import ReloadScheduler, TimeUnit
from TypedConfig.settings import get_settings
from TypedConfig.tree import (
    NestedKey, copy_tree, deep_merge, list_leaves, normalize_tree, resolve, resolve_parent,
)
from TypedConfig.utils import check_argument, check_not_blank, check_not_empty, check_not_none
from TypedConfig.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')
PathLike = Union[str, Path]


@dataclass(frozen=True)
class SourceBinding:
    """
    The source a store was loaded from.

    Attributes:
        adapter: Adapter used to read the source
        path: File path, or None for path-less sources such as the environment
        last_modified: Modification time in nanoseconds observed at the last
            successful load, or None if the source has no file
    """
    adapter: PersistenceAdapter
    path: Optional[Path]
    last_modified: Optional[int]


class ConfigurationStore:
    """
    Typed, hierarchical configuration store.

    Values are kept as strings. Typed reads convert the stored string with the
    converter registered for the requested type; typed writes format the value
    with the converter for the explicit ``as_type`` or, failing that, the
    value's runtime type.

    Flat operations (``get``, ``set``, ...) treat the key as an opaque string.
    Nested operations (``get_nested``, ``set_nested``, ...) split it on ``.``
    and walk nested maps, creating intermediate maps on write.

    Examples:
        >>> store = ConfigurationStore(adapter=PropertiesAdapter())
        >>> store.load("app.properties")
        >>> store.get(int, "retries")
        3
        >>> store.set_nested("db.pool.size", 10)
        >>> store.get_nested(int, "db.pool.size")
        10
    """

    def __init__(self,
                 adapter: Optional[PersistenceAdapter] = None,
                 registry: Optional[ConverterRegistry] = None,
                 delimiter: Optional[str] = None,
                 polling_interval: Optional[int] = None,
                 polling_unit: Optional[Union[TimeUnit, str]] = None):
        """
        Create an empty store.

        Args:
            adapter: Default adapter for load/save (default: chosen by file suffix)
            registry: Converter registry (default: a fresh default_registry())
            delimiter: List delimiter (default: the ``lists.delimiter`` setting)
            polling_interval: Positive reload polling interval; polling is off
                unless this and ``polling_unit`` are given
            polling_unit: TimeUnit (or its name) for ``polling_interval``

        Raises:
            InvalidArgumentError: If the delimiter or polling arguments are invalid
        """
        settings = get_settings()
        self._lock = threading.RLock()
        self._tree: Dict[str, Any] = {}
        self._adapter = adapter
        self._registry = registry if registry is not None else default_registry()
        self._source: Optional[SourceBinding] = None
        self._scheduler: Optional[ReloadScheduler] = None
        self._join_timeout = settings["polling"]["join_timeout"]
        self._delimiter = self._check_delimiter(
            delimiter if delimiter is not None else settings["lists"]["delimiter"])

        if polling_interval is not None or polling_unit is not None:
            self.start_polling(polling_interval, polling_unit)

    # ------------------------------------------------------------------
    # Properties

    @property
    def registry(self) -> ConverterRegistry:
        return self._registry

    @property
    def delimiter(self) -> str:
        with self._lock:
            return self._delimiter

    @delimiter.setter
    def delimiter(self, delimiter: str) -> None:
        delimiter = self._check_delimiter(delimiter)
        with self._lock:
            self._delimiter = delimiter

    @property
    def source(self) -> Optional[SourceBinding]:
        """The bound source, or None if nothing has been loaded."""
        with self._lock:
            return self._source

    @staticmethod
    def _check_delimiter(delimiter: Any) -> str:
        check_argument(isinstance(delimiter, str) and len(delimiter) == 1,
                       f"Delimiter must be a single character, got {delimiter!r}")
        return delimiter

    # ------------------------------------------------------------------
    # Conversion helpers

    @staticmethod
    def _check_leaf(raw: Any, key: str) -> None:
        if isinstance(raw, dict):
            raise ConversionError(
                f"Key '{key}' holds a nested map, not a value",
                context={"key": key},
            )

    def _convert(self, converter: Converter[T], raw: Any, key: str) -> Optional[T]:
        if raw is None:
            return None
        self._check_leaf(raw, key)
        try:
            return converter.convert(raw)
        except Exception as e:
            raise ConversionError(
                f"Conversion failed for key '{key}': {e}",
                context={"key": key, "raw": raw},
                cause=e,
            ) from e

    def _convert_list(self, converter: Converter[T], raw: Any, delimiter: str, key: str) -> Optional[List[T]]:
        if raw is None or raw == "":
            return None
        self._check_leaf(raw, key)
        return [self._convert(converter, element, key) for element in raw.split(delimiter)]

    def _converter_for(self, value: Any, as_type: Optional[type]) -> Converter:
        if as_type is not None:
            return self._registry.get_converter(as_type)
        return self._registry.converter_for_value(value)

    def _format(self, converter: Converter, value: Any, key: str) -> str:
        try:
            text = converter.format(value)
        except Exception as e:
            raise ConversionError(
                f"Cannot format value for key '{key}': {e}",
                context={"key": key},
                cause=e,
            ) from e
        if not isinstance(text, str):
            raise ConversionError(
                f"Converter {type(converter).__name__} returned {type(text).__name__}, not str",
                context={"key": key},
            )
        return text

    def _format_list(self, values: Sequence[Any], as_type: Optional[type], key: str) -> List[str]:
        check_argument(not isinstance(values, (str, bytes)), "values must be a list, not a string")
        check_not_none(values, "values is null")
        check_argument(isinstance(values, (list, tuple)),
                       f"values must be a list or tuple, got {type(values).__name__}")
        check_not_empty(values, "values is null or empty")
        check_argument(all(value is not None for value in values), "values contains null")
        element_type = type(values[0])
        check_argument(all(type(value) is element_type for value in values),
                       f"values must all be of type {element_type.__name__}")
        converter = self._converter_for(values[0], as_type)
        return [self._format(converter, value, key) for value in values]

    # ------------------------------------------------------------------
    # Flat access

    def get(self, type_: Type[T], key: str) -> Optional[T]:
        """
        Get the value stored under the flat key ``key``, converted to ``type_``.

        Returns:
            The converted value, or None if the key is absent

        Raises:
            ConverterNotFoundError: If ``type_`` has no converter, even for absent keys
            ConversionError: If the stored value cannot be converted
            InvalidArgumentError: If the key is null or blank
        """
        converter = self._registry.get_converter(type_)
        check_not_blank(key, "Key is null or blank")
        with self._lock:
            raw = self._tree.get(key)
        return self._convert(converter, raw, key)

    def get_list(self, type_: Type[T], key: str) -> Optional[List[T]]:
        """
        Split the value under ``key`` on the delimiter and convert every element.

        Returns:
            The converted list, or None if the key is absent or its value is empty
        """
        converter = self._registry.get_converter(type_)
        check_not_blank(key, "Key is null or blank")
        with self._lock:
            raw = self._tree.get(key)
            delimiter = self._delimiter
        return self._convert_list(converter, raw, delimiter, key)

    def set(self, key: str, value: Any, as_type: Optional[type] = None) -> None:
        """
        Store ``value`` under the flat key ``key``.

        Args:
            key: Flat key; dots are part of the key, not separators
            value: Value to store
            as_type: Type whose converter formats the value (default: runtime type)

        Raises:
            InvalidArgumentError: If the key is blank or the value is None
            ConverterNotFoundError: If no converter matches
        """
        check_not_blank(key, "Key is null or blank")
        check_not_none(value, "value is null")
        text = self._format(self._converter_for(value, as_type), value, key)
        with self._lock:
            self._tree[key] = text
        logger.debug(f"Set '{key}'")

    def set_list(self, key: str, values: Sequence[Any], as_type: Optional[type] = None) -> None:
        """
        Store ``values`` under ``key`` joined with the delimiter.

        All elements must be of the same type; the converter is chosen from
        ``as_type`` or the first element.

        Raises:
            InvalidArgumentError: If the key is blank, the list is None or empty,
                contains None or mixes element types
        """
        check_not_blank(key, "Key is null or blank")
        texts = self._format_list(values, as_type, key)
        with self._lock:
            self._tree[key] = self._delimiter.join(texts)
        logger.debug(f"Set list '{key}' with {len(texts)} elements")

    # ------------------------------------------------------------------
    # Nested access

    def get_nested(self, type_: Type[T], key: str) -> Optional[T]:
        """
        Get the value at the dot-separated ``key``, converted to ``type_``.

        Returns:
            The converted value, or None if any segment is missing or an
            intermediate segment is a value rather than a map

        Raises:
            InvalidKeyError: If the key is empty or has an empty segment
        """
        converter = self._registry.get_converter(type_)
        nested_key = NestedKey.parse(key)
        with self._lock:
            raw = resolve(self._tree, nested_key)
        return self._convert(converter, raw, key)

    def get_nested_list(self, type_: Type[T], key: str) -> Optional[List[T]]:
        converter = self._registry.get_converter(type_)
        nested_key = NestedKey.parse(key)
        with self._lock:
            raw = resolve(self._tree, nested_key)
            delimiter = self._delimiter
        return self._convert_list(converter, raw, delimiter, key)

    def set_nested(self, key: str, value: Any, as_type: Optional[type] = None) -> None:
        """
        Store ``value`` at the dot-separated ``key``, creating intermediate maps.

        Raises:
            InvalidKeyError: If the key is empty or has an empty segment
            InvalidPathError: If an intermediate segment already holds a value
            InvalidArgumentError: If the value is None
        """
        nested_key = NestedKey.parse(key)
        check_not_none(value, "value is null")
        text = self._format(self._converter_for(value, as_type), value, key)
        with self._lock:
            resolve_parent(self._tree, nested_key)[nested_key.leaf] = text
        logger.debug(f"Set nested '{key}'")

    def set_nested_list(self, key: str, values: Sequence[Any], as_type: Optional[type] = None) -> None:
        nested_key = NestedKey.parse(key)
        texts = self._format_list(values, as_type, key)
        with self._lock:
            resolve_parent(self._tree, nested_key)[nested_key.leaf] = self._delimiter.join(texts)
        logger.debug(f"Set nested list '{key}' with {len(texts)} elements")

    # ------------------------------------------------------------------
    # Inspection

    def contains(self, key: str, nested: bool = False) -> bool:
        if nested:
            nested_key = NestedKey.parse(key)
            with self._lock:
                return resolve(self._tree, nested_key) is not None
        check_not_blank(key, "Key is null or blank")
        with self._lock:
            return key in self._tree

    def keys(self) -> List[str]:
        """Top-level keys, in insertion order."""
        with self._lock:
            return list(self._tree)

    def leaf_keys(self) -> List[str]:
        """Dot-separated paths of every leaf value."""
        with self._lock:
            return list_leaves(self._tree)

    def as_dict(self) -> Dict[str, Any]:
        """A deep copy of the tree."""
        with self._lock:
            return copy_tree(self._tree)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tree)

    def __repr__(self) -> str:
        source = self.source
        path = source.path if source is not None else None
        return f"{self.__class__.__name__}(source={path!s}, keys={len(self)})"

    # ------------------------------------------------------------------
    # Lifecycle

    def clear(self) -> None:
        """Remove every key."""
        with self._lock:
            self._tree.clear()
        logger.debug("Cleared configuration")

    def _read_source(self, adapter: PersistenceAdapter, path: Optional[Path],
                     error_class: Type[LoadFailedError]) -> Tuple[Dict[str, Any], Optional[int]]:
        try:
            # Observe the timestamp first so a write during the read triggers another reload
            modified = path.stat().st_mtime_ns if path is not None else None
            data = adapter.load(path)
            if not isinstance(data, dict):
                raise ValueError(f"{adapter.name} adapter returned {type(data).__name__}, not a mapping")
            return normalize_tree(data, self._delimiter, self._registry), modified
        except Exception as e:
            raise error_class(
                f"Unable to load {adapter.name} configuration from {path if path is not None else adapter.name}: {e}",
                context={"path": str(path) if path is not None else None, "adapter": adapter.name},
                cause=e,
            ) from e

    def load(self, path: Optional[PathLike] = None, adapter: Optional[PersistenceAdapter] = None) -> None:
        """
        Load a source and merge it into the tree, then bind it for reloads.

        Args:
            path: File to load; optional for path-less adapters
            adapter: Adapter to use (default: the store's adapter, else chosen by suffix)

        Raises:
            InvalidArgumentError: If no path is given for a path-based adapter
                or the suffix is not recognised
            LoadFailedError: If the source cannot be read or parsed; the tree is unchanged
        """
        if adapter is None:
            adapter = self._adapter
        if adapter is None:
            check_not_none(path, "path is null")
            adapter = adapter_for_path(path)
        if adapter.requires_path:
            check_not_blank(str(path) if path is not None else None, "path is null or empty")
        source_path = Path(path) if path is not None else None

        with self._lock:
            data, modified = self._read_source(adapter, source_path, LoadFailedError)
            merged = deep_merge(self._tree, data)
            self._tree.clear()
            self._tree.update(merged)
            self._source = SourceBinding(adapter, source_path, modified)
        logger.info(f"Loaded {adapter.name} configuration from {source_path or adapter.name}")

    def reload(self) -> None:
        """
        Replace the tree with a fresh load of the bound source.

        Does nothing if no source is bound. Values set since the last load are
        discarded.

        Raises:
            ReloadFailedError: If the source cannot be read. The tree has
                already been cleared at that point and stays empty until the
                next successful load.
        """
        with self._lock:
            source = self._source
            if source is None:
                logger.debug("Reload requested but no source is bound")
                return
            logger.info(f"Reloading configuration from {source.path or source.adapter.name}")
            self._tree.clear()
            data, modified = self._read_source(source.adapter, source.path, ReloadFailedError)
            self._tree.update(data)
            self._source = replace(source, last_modified=modified)
        logger.info("Reloading done")

    def _adapter_for_save(self, destination: Path, explicit_path: bool,
                          source: Optional[SourceBinding]) -> PersistenceAdapter:
        configured = [candidate for candidate in (self._adapter, source.adapter if source else None)
                      if candidate is not None]
        suffix_class = ADAPTERS_BY_SUFFIX.get(destination.suffix.lower()) if explicit_path else None
        if suffix_class is not None:
            # A configured adapter of the same format keeps its encoding
            for candidate in configured:
                if isinstance(candidate, suffix_class):
                    return candidate
            return suffix_class()
        if configured:
            return configured[0]
        return adapter_for_path(destination)

    def save(self, path: Optional[PathLike] = None, adapter: Optional[PersistenceAdapter] = None) -> Path:
        """
        Write the tree to ``path`` (default: the bound source path).

        The adapter is ``adapter`` if given. Otherwise an explicit ``path``
        with a known suffix selects its format; failing that the store's
        adapter, the bound source's adapter, or the suffix of the bound path
        is used. The tree is never modified.

        Returns:
            The path written

        Raises:
            InvalidArgumentError: If there is no path to write to or its
                format cannot be determined
            PersistFailedError: If the adapter is read-only or fails to write the file
        """
        with self._lock:
            source = self._source
            snapshot = copy_tree(self._tree)

        explicit_path = path is not None
        if path is None and source is not None:
            path = source.path
        check_not_blank(str(path) if path is not None else None, "path is null or empty")
        destination = Path(path)

        if adapter is None:
            adapter = self._adapter_for_save(destination, explicit_path, source)
        if adapter.read_only:
            raise PersistFailedError(
                f"The {adapter.name} adapter is read-only; cannot save to {destination}",
                context={"path": str(destination), "adapter": adapter.name},
            )

        try:
            adapter.store(snapshot, destination)
        except PersistFailedError:
            raise
        except Exception as e:
            raise PersistFailedError(
                f"Unable to save {adapter.name} configuration to {destination}: {e}",
                context={"path": str(destination), "adapter": adapter.name},
                cause=e,
            ) from e
        logger.info(f"Saved configuration to {destination}")
        return destination

    # ------------------------------------------------------------------
    # Polling

    def start_polling(self, interval: int, unit: Union[TimeUnit, str]) -> None:
        """
        Start reloading the store whenever the bound file's modification time advances.

        Replaces any running poller.

        Raises:
            InvalidArgumentError: If ``interval`` is not positive or ``unit`` is missing
        """
        scheduler = ReloadScheduler(self, interval, unit, join_timeout=self._join_timeout)
        with self._lock:
            previous, self._scheduler = self._scheduler, scheduler
        if previous is not None:
            previous.stop()
        scheduler.start()

    def stop_polling(self) -> None:
        """Stop background polling; safe to call when not polling."""
        with self._lock:
            scheduler, self._scheduler = self._scheduler, None
        if scheduler is not None:
            scheduler.stop()

    def is_polling(self) -> bool:
        with self._lock:
            return self._scheduler is not None and self._scheduler.is_running()

    def close(self) -> None:
        self.stop_polling()

    def __enter__(self) -> "ConfigurationStore":
        return self

    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.close()
