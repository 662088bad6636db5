"""
Converter contract.

A converter turns the raw string stored in a configuration tree into a typed
value and back. Converters are pure: apart from raising ConversionError on
malformed input they have no visible side effects.
"""

from abc import ABC, abstractmethod
from typing import Callable, Generic, TypeVar

from TypedConfig.exceptions import ConversionError

T = TypeVar('T')


class Converter(ABC, Generic[T]):
    """Bidirectional ``str <-> T`` transformer registered per type."""

    @abstractmethod
    def convert(self, raw: str) -> T:
        """
        Convert a raw string read from the tree into ``T``.

        Raises:
            ConversionError: If ``raw`` is malformed
        """

    @abstractmethod
    def format(self, value: T) -> str:
        """Convert ``value`` into the string stored in the tree."""


class FunctionConverter(Converter[T]):
    """
    Converter built from two plain callables.

    Any exception raised by ``parse`` is wrapped in ConversionError, which
    makes it easy to register converters for third-party types:

        >>> registry.add_converter(UUID, FunctionConverter(UUID, str))
    """

    def __init__(self, parse: Callable[[str], T], render: Callable[[T], str] = str):
        self._parse = parse
        self._render = render

    def convert(self, raw: str) -> T:
        try:
            return self._parse(raw)
        except ConversionError:
            raise
        except Exception as e:
            raise ConversionError(f"Cannot convert '{raw}': {e}", context={"raw": raw}, cause=e) from e

    def format(self, value: T) -> str:
        return self._render(value)
