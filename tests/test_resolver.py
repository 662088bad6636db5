"""
Tests for nested key parsing and resolution.
"""

import unittest

from TypedConfig.exceptions import InvalidKeyError, InvalidPathError
from TypedConfig.tree import (
    NestedKey, deep_merge, flatten_tree, normalize_tree, resolve, resolve_parent,
)
from TypedConfig.converters import default_registry


class TestNestedKey(unittest.TestCase):
    """Test cases for nested key parsing."""

    def test_parse(self):
        key = NestedKey.parse("database.pool.size")
        self.assertEqual(key.segments, ("database", "pool", "size"))
        self.assertEqual(key.parents, ("database", "pool"))
        self.assertEqual(key.leaf, "size")
        self.assertTrue(key.is_nested)
        self.assertEqual(str(key), "database.pool.size")

    def test_single_segment(self):
        key = NestedKey.parse("name")
        self.assertFalse(key.is_nested)
        self.assertEqual(key.parents, ())

    def test_invalid_keys(self):
        for bad_key in (None, "", ".", "a..b", ".a", "a."):
            with self.assertRaises(InvalidKeyError, msg=repr(bad_key)):
                NestedKey.parse(bad_key)


class TestResolver(unittest.TestCase):
    """Test cases for the read and write paths."""

    def setUp(self):
        self.root = {
            "name": "Ada",
            "database": {"host": "localhost", "pool": {"size": "10"}},
        }

    def test_resolve_leaf_and_subtree(self):
        self.assertEqual(resolve(self.root, "database.pool.size"), "10")
        self.assertEqual(resolve(self.root, "database.pool"), {"size": "10"})
        self.assertEqual(resolve(self.root, "name"), "Ada")

    def test_resolve_missing(self):
        self.assertIsNone(resolve(self.root, "database.port"))
        self.assertIsNone(resolve(self.root, "cache.size"))

    def test_resolve_through_leaf(self):
        self.assertIsNone(resolve(self.root, "name.first"))

    def test_resolve_parent_single_segment_is_root(self):
        self.assertIs(resolve_parent(self.root, "name"), self.root)

    def test_resolve_parent_creates_intermediate_maps(self):
        parent = resolve_parent(self.root, "cache.redis.host")
        parent["host"] = "redis"
        self.assertEqual(self.root["cache"], {"redis": {"host": "redis"}})

    def test_resolve_parent_is_idempotent(self):
        first = resolve_parent(self.root, "x.y.z1")
        second = resolve_parent(self.root, "x.y.z2")
        self.assertIs(first, second)
        self.assertIs(resolve_parent(self.root, "database.pool.size"), self.root["database"]["pool"])

    def test_resolve_parent_refuses_to_replace_leaf(self):
        with self.assertRaises(InvalidPathError) as ctx:
            resolve_parent(self.root, "database.host.port")
        self.assertEqual(ctx.exception.context["path"], "database.host")
        self.assertEqual(self.root["database"]["host"], "localhost")


class TestTreeUtils(unittest.TestCase):
    """Test cases for tree helpers."""

    def test_deep_merge(self):
        base = {"database": {"host": "localhost", "port": "5432"}, "name": "Ada"}
        override = {"database": {"host": "db"}, "retries": "3"}
        merged = deep_merge(base, override)
        self.assertEqual(merged, {
            "database": {"host": "db", "port": "5432"},
            "name": "Ada",
            "retries": "3",
        })
        # The base is not modified
        self.assertEqual(base["database"]["host"], "localhost")

    def test_normalize_tree(self):
        data = {
            "retries": 3,
            "debug": True,
            "ports": [80, 443],
            "missing": None,
            "server": {"ratio": 0.5},
            1: "numeric key",
        }
        tree = normalize_tree(data, ";", default_registry())
        self.assertEqual(tree, {
            "retries": "3",
            "debug": "true",
            "ports": "80;443",
            "server": {"ratio": "0.5"},
            "1": "numeric key",
        })

    def test_flatten_tree(self):
        self.assertEqual(
            flatten_tree({"db": {"host": "h", "pool": {"size": "1"}}, "name": "Ada"}),
            {"db.host": "h", "db.pool.size": "1", "name": "Ada"},
        )


if __name__ == "__main__":
    unittest.main()
