"""
Nested key parsing.

Nested keys address values inside hierarchical maps using ``.`` as the only
segment separator. There is no escaping: a literal ``.`` inside a segment
cannot be represented.
"""

from typing import NamedTuple, Tuple

from TypedConfig.exceptions import InvalidKeyError

NESTED_SEPARATOR = "."


class NestedKey(NamedTuple):
    """An ordered, non-empty sequence of non-empty path segments."""

    segments: Tuple[str, ...]

    @classmethod
    def parse(cls, key: str) -> "NestedKey":
        """
        Split ``key`` on the nested separator.

        Raises:
            InvalidKeyError: If the key is None, empty, or contains an empty segment
        """
        if not isinstance(key, str) or not key:
            raise InvalidKeyError("Key is null or empty", context={"key": key})

        segments = tuple(key.split(NESTED_SEPARATOR))
        if any(not segment for segment in segments):
            raise InvalidKeyError(f"Key '{key}' contains an empty segment", context={"key": key})
        return cls(segments)

    @property
    def parents(self) -> Tuple[str, ...]:
        return self.segments[:-1]

    @property
    def leaf(self) -> str:
        return self.segments[-1]

    @property
    def is_nested(self) -> bool:
        return len(self.segments) > 1

    def __str__(self) -> str:
        return NESTED_SEPARATOR.join(self.segments)
