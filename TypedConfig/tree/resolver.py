"""
Nested key resolution against a configuration tree.

The read path never modifies the tree. The write path creates missing
intermediate maps and refuses to replace a leaf that sits where a map is
needed. Callers are responsible for holding the owning store's lock.
"""

from typing import Any, Dict, Optional, Union

from TypedConfig.exceptions import InvalidPathError
from TypedConfig.tree.keys import NestedKey


def _as_key(key: Union[str, NestedKey]) -> NestedKey:
    return key if isinstance(key, NestedKey) else NestedKey.parse(key)


def resolve(root: Dict[str, Any], key: Union[str, NestedKey]) -> Optional[Any]:
    """
    Follow ``key`` from ``root`` and return the leaf or subtree it addresses.

    Args:
        root: Tree root
        key: Dot-separated key or parsed NestedKey

    Returns:
        The addressed value, or None if any segment is missing or an
        intermediate node is a leaf
    """
    node: Any = root
    for segment in _as_key(key).segments:
        if not isinstance(node, dict):
            return None
        node = node.get(segment)
        if node is None:
            return None
    return node


def resolve_parent(root: Dict[str, Any], key: Union[str, NestedKey]) -> Dict[str, Any]:
    """
    Return the innermost map that holds the last segment of ``key``.

    Missing intermediate maps are created. Resolving the same key twice
    without intervening writes returns the same map instance.

    Raises:
        InvalidKeyError: If the key is malformed
        InvalidPathError: If an intermediate segment holds a leaf value
    """
    nested_key = _as_key(key)
    node = root
    walked = []
    for segment in nested_key.parents:
        walked.append(segment)
        child = node.get(segment)
        if child is None:
            child = {}
            node[segment] = child
        elif not isinstance(child, dict):
            path = ".".join(walked)
            raise InvalidPathError(
                f"Cannot write '{nested_key}': '{path}' holds a value, not a map",
                context={"key": str(nested_key), "path": path},
            )
        node = child
    return node
