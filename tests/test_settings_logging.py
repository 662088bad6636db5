"""
Tests for library settings, logging helpers and the exception hierarchy.
"""

import json
import logging
import os
import unittest
from unittest.mock import patch

from TypedConfig import ConfigurationStore
from TypedConfig.converters import DateConverter
from TypedConfig.exceptions import (
    ConversionError, ConverterError, InvalidArgumentError, InvalidKeyError, KeyPathError,
    LoadFailedError, PersistenceError, PersistFailedError, ReloadFailedError, TypedConfigError,
)
from TypedConfig.settings import DEFAULT_SETTINGS, get_settings
from TypedConfig.utils.logging import (
    PACKAGE_LOGGER_NAME, JsonFormatter, StructuredLoggerAdapter, get_logger, set_log_level,
)


class TestSettings(unittest.TestCase):
    """Test cases for library settings."""

    def test_defaults(self):
        settings = get_settings(environ={})
        self.assertEqual(settings["lists"]["delimiter"], ",")
        self.assertEqual(settings["converters"]["date_format"], "%m/%d/%Y")
        self.assertIsNone(settings["converters"]["datetime_format"])
        self.assertEqual(settings["polling"]["join_timeout"], 5.0)

    def test_environment_overrides(self):
        settings = get_settings(environ={
            "TYPEDCONFIG_DELIMITER": ";",
            "TYPEDCONFIG_DATE_FORMAT": "%Y-%m-%d",
            "TYPEDCONFIG_POLLING_JOIN_TIMEOUT": "0.5",
        })
        self.assertEqual(settings["lists"]["delimiter"], ";")
        self.assertEqual(settings["converters"]["date_format"], "%Y-%m-%d")
        self.assertEqual(settings["polling"]["join_timeout"], 0.5)

    def test_malformed_join_timeout(self):
        with self.assertRaises(InvalidArgumentError) as ctx:
            get_settings(environ={"TYPEDCONFIG_POLLING_JOIN_TIMEOUT": "soon"})
        self.assertIn("TYPEDCONFIG_POLLING_JOIN_TIMEOUT", str(ctx.exception))
        self.assertIsInstance(ctx.exception.cause, ValueError)

        with patch.dict(os.environ, {"TYPEDCONFIG_POLLING_JOIN_TIMEOUT": "soon"}):
            with self.assertRaises(InvalidArgumentError):
                ConfigurationStore()

    def test_settings_are_copies(self):
        settings = get_settings(environ={})
        settings["lists"]["delimiter"] = "|"
        self.assertEqual(DEFAULT_SETTINGS["lists"]["delimiter"], ",")

    def test_store_uses_configured_delimiter(self):
        with patch.dict(os.environ, {"TYPEDCONFIG_DELIMITER": ";"}):
            store = ConfigurationStore()
        store.set_list("k", [1, 2])
        self.assertEqual(store.get(str, "k"), "1;2")

    def test_date_converter_uses_configured_format(self):
        with patch.dict(os.environ, {"TYPEDCONFIG_DATE_FORMAT": "%Y-%m-%d"}):
            converter = DateConverter()
        self.assertEqual(converter.date_format, "%Y-%m-%d")


class TestLogging(unittest.TestCase):
    """Test cases for the logging helpers."""

    def setUp(self):
        self.package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
        self.original_level = self.package_logger.level

    def tearDown(self):
        self.package_logger.setLevel(self.original_level)

    def test_set_log_level(self):
        set_log_level("debug")
        self.assertEqual(self.package_logger.level, logging.DEBUG)
        set_log_level(logging.ERROR)
        self.assertEqual(self.package_logger.level, logging.ERROR)

    def test_invalid_log_level(self):
        with self.assertRaises(ValueError):
            set_log_level("verbose")

    def test_get_logger_with_context(self):
        logger = get_logger("TypedConfig.test", extra={"path": "app.properties"})
        self.assertIsInstance(logger, StructuredLoggerAdapter)
        with self.assertLogs("TypedConfig.test", level="WARNING") as captured:
            logger.warning("Reload failed", extra={"attempt": 2})
        record = captured.records[0]
        self.assertEqual(record.extras, {"path": "app.properties", "attempt": 2})

    def test_json_formatter(self):
        record = logging.LogRecord("TypedConfig.store", logging.INFO, __file__, 1,
                                   "Loaded %s", ("app.yml",), None)
        record.extras = {"keys": 3}
        data = json.loads(JsonFormatter().format(record))
        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["logger"], "TypedConfig.store")
        self.assertEqual(data["message"], "Loaded app.yml")
        self.assertEqual(data["keys"], 3)
        self.assertEqual(data["service_name"], "typedconfig")


class TestExceptions(unittest.TestCase):
    """Test cases for the exception hierarchy."""

    def test_hierarchy(self):
        self.assertTrue(issubclass(ConversionError, ConverterError))
        self.assertTrue(issubclass(InvalidKeyError, KeyPathError))
        self.assertTrue(issubclass(ReloadFailedError, LoadFailedError))
        self.assertTrue(issubclass(PersistFailedError, PersistenceError))
        self.assertTrue(issubclass(InvalidArgumentError, ValueError))
        for error_class in (ConverterError, InvalidArgumentError, KeyPathError, PersistenceError):
            self.assertTrue(issubclass(error_class, TypedConfigError))

    def test_to_dict(self):
        error = ConversionError("Cannot convert 'x' to int", context={"key": "retries"})
        self.assertEqual(error.to_dict(), {
            "error_code": "TC-CONV-1002",
            "message": "A configuration value has an invalid format.",
        })

    def test_to_dict_debug(self):
        cause = ValueError("bad")
        error = LoadFailedError("Unable to load", context={"debug": True}, cause=cause)
        details = error.to_dict()["technical_details"]
        self.assertEqual(details["message"], "Unable to load")
        self.assertEqual(details["cause"], "bad")
        self.assertIs(error.__cause__, cause)


if __name__ == "__main__":
    unittest.main()
