"""
TypedConfig converters.

Usage:
    from TypedConfig.converters import default_registry, FunctionConverter

    registry = default_registry()
    registry.add_converter(UUID, FunctionConverter(UUID, str))
"""

from TypedConfig.converters.base import Converter, FunctionConverter
from TypedConfig.converters.builtin import (
    URI, BooleanConverter, DateConverter, DateTimeConverter, DecimalConverter,
    FloatConverter, IntegerConverter, PathConverter, StringConverter, URIConverter,
)
from TypedConfig.converters.registry import ConverterRegistry, default_registry

__all__ = [
    "Converter", "FunctionConverter", "ConverterRegistry", "default_registry", "URI",
    "BooleanConverter", "DateConverter", "DateTimeConverter", "DecimalConverter",
    "FloatConverter", "IntegerConverter", "PathConverter", "StringConverter", "URIConverter",
]
