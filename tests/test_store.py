"""
Tests for typed reads and writes on the configuration store.
"""

import threading
import unittest
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from urllib.parse import urlsplit
from uuid import UUID

from TypedConfig import ConfigurationStore, FunctionConverter, PersistenceAdapter
from TypedConfig.exceptions import (
    ConversionError, ConverterNotFoundError, InvalidArgumentError, InvalidKeyError, InvalidPathError,
)


class Unregistered:
    """A type with no converter."""


class TestFlatAccess(unittest.TestCase):
    """Test cases for flat get/set."""

    def setUp(self):
        self.store = ConfigurationStore()

    def test_round_trip_for_every_default_type(self):
        values = {
            "string": "Ada",
            "integer": 42,
            "float": 2.5,
            "decimal": Decimal("1.10"),
            "boolean": True,
            "date": date(2012, 2, 25),
            "datetime": datetime(2012, 2, 25, 13, 30, 5),
            "path": Path("/var/lib/app"),
            "uri": urlsplit("https://example.com/api?x=1"),
        }
        for key, value in values.items():
            self.store.set(key, value)
        for key, value in values.items():
            self.assertEqual(self.store.get(type(value), key), value, key)

    def test_dates_before_year_1000(self):
        self.store.set("founded", date(999, 1, 2))
        self.assertEqual(self.store.get(str, "founded"), "01/02/0999")
        self.assertEqual(self.store.get(date, "founded"), date(999, 1, 2))

    def test_absent_key_returns_none(self):
        self.assertIsNone(self.store.get(str, "missing"))
        self.assertIsNone(self.store.get_list(int, "missing"))

    def test_missing_converter(self):
        with self.assertRaises(ConverterNotFoundError):
            self.store.get(Unregistered, "missing")
        self.store.set("present", "value")
        with self.assertRaises(ConverterNotFoundError):
            self.store.get(Unregistered, "present")
        with self.assertRaises(ConverterNotFoundError):
            self.store.set("other", Unregistered())

    def test_conversion_error_wraps_cause(self):
        self.store.set("retries", "three")
        with self.assertRaises(ConversionError) as ctx:
            self.store.get(int, "retries")
        self.assertIsNotNone(ctx.exception.cause)
        self.assertEqual(ctx.exception.context["key"], "retries")

    def test_invalid_arguments(self):
        with self.assertRaises(InvalidArgumentError):
            self.store.set("key", None)
        with self.assertRaises(InvalidArgumentError):
            self.store.set("", 1)
        with self.assertRaises(InvalidArgumentError):
            self.store.set(None, 1)
        with self.assertRaises(InvalidArgumentError):
            self.store.get(str, "  ")
        self.assertEqual(len(self.store), 0)

    def test_explicit_type_witness(self):
        self.store.set("ratio", 5, as_type=float)
        self.assertEqual(self.store.get(str, "ratio"), "5.0")
        self.assertEqual(self.store.get(float, "ratio"), 5.0)

    def test_flat_keys_are_opaque(self):
        self.store.set("database.host", "localhost")
        self.assertEqual(self.store.get(str, "database.host"), "localhost")
        self.assertIsNone(self.store.get_nested(str, "database.host"))
        self.assertEqual(self.store.keys(), ["database.host"])

    def test_custom_converter(self):
        self.store.registry.add_converter(UUID, FunctionConverter(UUID, str))
        value = UUID("12345678-1234-5678-1234-567812345678")
        self.store.set("id", value)
        self.assertEqual(self.store.get(UUID, "id"), value)

    def test_clear(self):
        self.store.set("a", 1)
        self.store.set_nested("b.c", 2)
        self.store.clear()
        self.assertIsNone(self.store.get(int, "a"))
        self.assertIsNone(self.store.get_nested(int, "b.c"))
        self.assertEqual(len(self.store), 0)


class TestListAccess(unittest.TestCase):
    """Test cases for list-valued keys."""

    def setUp(self):
        self.store = ConfigurationStore()

    def test_list_uses_delimiter(self):
        self.store.set_list("k", [1, 2, 3])
        self.assertEqual(self.store.get(str, "k"), "1,2,3")
        self.assertEqual(self.store.get_list(int, "k"), [1, 2, 3])

    def test_changed_delimiter(self):
        self.store.delimiter = ";"
        self.store.set_list("k", [1, 2, 3])
        self.assertEqual(self.store.get(str, "k"), "1;2;3")
        self.assertEqual(self.store.get_list(int, "k"), [1, 2, 3])

    def test_constructor_delimiter(self):
        store = ConfigurationStore(delimiter="|")
        store.set_list("hosts", ["a", "b"])
        self.assertEqual(store.get(str, "hosts"), "a|b")

    def test_invalid_delimiter(self):
        for delimiter in ("", ";;", None, 1):
            with self.assertRaises(InvalidArgumentError):
                self.store.delimiter = delimiter
        self.assertEqual(self.store.delimiter, ",")

    def test_empty_value_reads_as_none(self):
        self.store.set("k", "")
        self.assertIsNone(self.store.get_list(str, "k"))

    def test_invalid_lists(self):
        for values in (None, [], "abc", [1, None], [1, "a"], [1, True], {"a": 1}, {1, 2}):
            with self.assertRaises(InvalidArgumentError, msg=repr(values)):
                self.store.set_list("k", values)
        self.assertFalse(self.store.contains("k"))

    def test_list_of_dates(self):
        days = [date(2012, 2, 25), date(2012, 3, 1)]
        self.store.set_list("holidays", days)
        self.assertEqual(self.store.get_list(date, "holidays"), days)

    def test_list_element_conversion_error(self):
        self.store.set("k", "1,two,3")
        with self.assertRaises(ConversionError):
            self.store.get_list(int, "k")


class TestNestedAccess(unittest.TestCase):
    """Test cases for dot-separated nested keys."""

    def setUp(self):
        self.store = ConfigurationStore()

    def test_nested_round_trip(self):
        self.store.set_nested("a.b.c", 7)
        self.assertEqual(self.store.get_nested(int, "a.b.c"), 7)
        self.assertIsNone(self.store.get_nested(int, "a.b.x"))
        self.assertEqual(self.store.as_dict(), {"a": {"b": {"c": "7"}}})

    def test_intermediate_maps_are_reused(self):
        self.store.set_nested("x.y.z1", "v1")
        self.store.set_nested("x.y.z2", "v2")
        self.assertEqual(self.store.get_nested(str, "x.y.z1"), "v1")
        self.assertEqual(self.store.get_nested(str, "x.y.z2"), "v2")
        self.assertEqual(self.store.leaf_keys(), ["x.y.z1", "x.y.z2"])

    def test_single_segment_nested_key_is_top_level(self):
        self.store.set_nested("name", "Ada")
        self.assertEqual(self.store.get(str, "name"), "Ada")

    def test_write_through_leaf_fails(self):
        self.store.set_nested("a", "x")
        with self.assertRaises(InvalidPathError):
            self.store.set_nested("a.b", 1)
        self.assertEqual(self.store.get_nested(str, "a"), "x")

    def test_read_through_leaf_is_absent(self):
        self.store.set_nested("a", "x")
        self.assertIsNone(self.store.get_nested(str, "a.b.c"))

    def test_read_of_subtree_is_conversion_error(self):
        self.store.set_nested("db.host", "localhost")
        with self.assertRaises(ConversionError):
            self.store.get_nested(str, "db")
        with self.assertRaises(ConversionError):
            self.store.get(str, "db")

    def test_invalid_nested_keys(self):
        with self.assertRaises(InvalidKeyError):
            self.store.set_nested("a..b", 1)
        with self.assertRaises(InvalidKeyError):
            self.store.get_nested(int, "")

    def test_nested_lists(self):
        self.store.set_nested_list("server.ports", [8080, 8081])
        self.assertEqual(self.store.get_nested_list(int, "server.ports"), [8080, 8081])
        self.assertIsNone(self.store.get_nested_list(int, "server.hosts"))
        with self.assertRaises(InvalidArgumentError):
            self.store.set_nested_list("server.hosts", [])

    def test_contains(self):
        self.store.set_nested("db.host", "localhost")
        self.assertTrue(self.store.contains("db.host", nested=True))
        self.assertFalse(self.store.contains("db.host"))
        self.assertTrue(self.store.contains("db"))

    def test_as_dict_is_a_copy(self):
        self.store.set_nested("db.host", "localhost")
        snapshot = self.store.as_dict()
        snapshot["db"]["host"] = "changed"
        self.assertEqual(self.store.get_nested(str, "db.host"), "localhost")


class TestConcurrentWrites(unittest.TestCase):
    """Test cases for writes from several threads."""

    def test_parallel_nested_writes(self):
        store = ConfigurationStore()

        def write(worker):
            for i in range(200):
                store.set_nested(f"workers.w{worker}.k{i}", i)

        threads = [threading.Thread(target=write, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for worker in range(8):
            for i in range(200):
                self.assertEqual(store.get_nested(int, f"workers.w{worker}.k{i}"), i)


class BlockingAdapter(PersistenceAdapter):
    """In-memory source whose load can be held open until released."""

    name = "blocking"
    requires_path = False

    def __init__(self):
        self.value = "first"
        self.block = False
        self.loading = threading.Event()
        self.release = threading.Event()

    def load(self, source=None):
        if self.block:
            self.loading.set()
            self.release.wait(5)
        return {"k": self.value}

    def store(self, tree, destination):
        pass


class TestReadsDuringReload(unittest.TestCase):
    """Test cases for readers racing a reload."""

    def test_read_waits_for_reload(self):
        adapter = BlockingAdapter()
        store = ConfigurationStore(adapter=adapter)
        store.load()
        self.assertEqual(store.get(str, "k"), "first")

        adapter.value = "second"
        adapter.block = True
        reloader = threading.Thread(target=store.reload)
        reloader.start()
        self.assertTrue(adapter.loading.wait(5))

        results = []
        reader = threading.Thread(target=lambda: results.append(store.get(str, "k")))
        reader.start()
        reader.join(0.2)
        try:
            # The reload holds the lock with the tree cleared
            self.assertTrue(reader.is_alive())
            self.assertEqual(results, [])
        finally:
            adapter.release.set()
            reader.join(5)
            reloader.join(5)

        self.assertEqual(results, ["second"])


if __name__ == "__main__":
    unittest.main()
