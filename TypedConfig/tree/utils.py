"""
Utility functions for configuration trees.

A configuration tree is a dict whose values are either string leaves or
nested dicts of the same shape. This module provides helpers to merge trees,
bring adapter output into that shape and flatten it for line-oriented
formats.
"""

from typing import Any, Dict, List, Mapping, Optional

from TypedConfig.exceptions import ConverterNotFoundError


def deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two dictionaries, with override values taking precedence.

    Rules:
    - If both values are dictionaries, recursively merge them
    - Otherwise, override the base value with the override value

    Args:
        base: Base dictionary
        override: Dictionary with values to override

    Returns:
        New dictionary with merged values
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def copy_tree(tree: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``tree`` that shares no dicts with it."""
    return {key: copy_tree(value) if isinstance(value, Mapping) else value
            for key, value in tree.items()}


def _format_scalar(value: Any, registry: Optional[Any]) -> str:
    if isinstance(value, str):
        return value
    if registry is not None:
        try:
            return registry.converter_for_value(value).format(value)
        except ConverterNotFoundError:
            pass
    return str(value)


def normalize_tree(data: Mapping[Any, Any], delimiter: str, registry: Optional[Any] = None) -> Dict[str, Any]:
    """
    Bring parsed source data into the configuration tree shape.

    Scalars are formatted with the registry converter for their runtime type
    (falling back to ``str()``), lists are joined with ``delimiter``, None
    values are dropped and mappings recurse. Keys are coerced to strings.

    Args:
        data: Mapping returned by a persistence adapter
        delimiter: List delimiter of the receiving store
        registry: ConverterRegistry used to format non-string scalars

    Returns:
        A new tree containing only string leaves and nested dicts
    """
    tree: Dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            tree[str(key)] = normalize_tree(value, delimiter, registry)
        elif isinstance(value, (list, tuple)):
            tree[str(key)] = delimiter.join(_format_scalar(item, registry) for item in value if item is not None)
        else:
            tree[str(key)] = _format_scalar(value, registry)
    return tree


def flatten_tree(tree: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """
    Flatten nested dicts into dot-separated keys.

    Examples:
        >>> flatten_tree({"db": {"host": "localhost"}, "name": "Ada"})
        {'db.host': 'localhost', 'name': 'Ada'}
    """
    flat: Dict[str, str] = {}
    for key, value in tree.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping):
            flat.update(flatten_tree(value, full_key))
        else:
            flat[full_key] = value
    return flat


def list_leaves(tree: Mapping[str, Any]) -> List[str]:
    """Return the dot-separated paths of every leaf in ``tree``."""
    return list(flatten_tree(tree).keys())
