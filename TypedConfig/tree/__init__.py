"""
Configuration tree helpers: nested key parsing, resolution and tree utilities.
"""

from TypedConfig.tree.keys import NESTED_SEPARATOR, NestedKey
from TypedConfig.tree.resolver import resolve, resolve_parent
from TypedConfig.tree.utils import copy_tree, deep_merge, flatten_tree, list_leaves, normalize_tree

__all__ = [
    "NESTED_SEPARATOR", "NestedKey", "resolve", "resolve_parent",
    "copy_tree", "deep_merge", "flatten_tree", "list_leaves", "normalize_tree",
]
