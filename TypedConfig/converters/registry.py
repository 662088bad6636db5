"""
Converter registry.

The registry maps a type to the converter used for every typed read and write
of that type. It is created once per store (or explicitly shared between
stores), optionally mutated, then read many times.
"""

import threading
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Type, TypeVar

from TypedConfig.converters.base import Converter
from TypedConfig.converters.builtin import (
    URI, BooleanConverter, DateConverter, DateTimeConverter, DecimalConverter,
    FloatConverter, IntegerConverter, PathConverter, StringConverter, URIConverter,
)
from TypedConfig.exceptions import ConverterNotFoundError
from TypedConfig.utils import check_not_none

T = TypeVar('T')


class ConverterRegistry:
    """
    Mapping from type to Converter.

    At most one converter per type is active; registering a second one
    replaces the first. Lookups are exact by type, except
    :meth:`converter_for_value`, which walks the value's MRO.
    """

    def __init__(self) -> None:
        self._converters: Dict[type, Converter] = {}
        self._lock = threading.Lock()

    def add_converter(self, type_: Type[T], converter: Converter[T]) -> None:
        """Register ``converter`` for ``type_``, replacing any existing one."""
        check_not_none(type_, "type is null")
        check_not_none(converter, "converter is null")
        with self._lock:
            self._converters[type_] = converter

    def get_converter(self, type_: Type[T]) -> Converter[T]:
        """
        Return the converter registered for ``type_``.

        Raises:
            ConverterNotFoundError: If no converter is registered
        """
        with self._lock:
            converter = self._converters.get(type_)
        if converter is None:
            raise ConverterNotFoundError(
                f"No converter found for {getattr(type_, '__name__', type_)}",
                context={"type": repr(type_)},
            )
        return converter

    def converter_for_value(self, value: Any) -> Converter:
        """
        Return the converter for ``value``'s runtime type.

        The type's MRO is searched in order, so ``PosixPath`` resolves to the
        ``Path`` converter and ``bool`` to the bool converter, not ``int``.

        Raises:
            ConverterNotFoundError: If no class in the MRO is registered
        """
        check_not_none(value, "value is null")
        with self._lock:
            for klass in type(value).__mro__:
                converter = self._converters.get(klass)
                if converter is not None:
                    return converter
        raise ConverterNotFoundError(
            f"No converter found for {type(value).__name__}",
            context={"type": repr(type(value))},
        )

    def remove_converter(self, type_: type) -> None:
        with self._lock:
            self._converters.pop(type_, None)

    def types(self) -> List[type]:
        with self._lock:
            return list(self._converters)

    def clear(self) -> None:
        """Remove every converter, including the defaults."""
        with self._lock:
            self._converters.clear()

    def __contains__(self, type_: object) -> bool:
        with self._lock:
            return type_ in self._converters

    def __len__(self) -> int:
        with self._lock:
            return len(self._converters)


def default_registry() -> ConverterRegistry:
    """
    Create a registry seeded with the built-in converters.

    Seeded types: str, int, float, Decimal, bool, date, datetime, Path and URI.
    """
    registry = ConverterRegistry()
    registry.add_converter(str, StringConverter())
    registry.add_converter(int, IntegerConverter())
    registry.add_converter(float, FloatConverter())
    registry.add_converter(Decimal, DecimalConverter())
    registry.add_converter(bool, BooleanConverter())
    registry.add_converter(date, DateConverter())
    registry.add_converter(datetime, DateTimeConverter())
    registry.add_converter(Path, PathConverter())
    registry.add_converter(URI, URIConverter())
    return registry
