"""
Built-in converters for the default registry.

Python has a single integer type and a single binary floating point type, so
``int`` covers integer, long and byte values and ``float`` covers float and
double values. ``Decimal`` is available where exact decimal text matters.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional
from urllib.parse import SplitResult, urlsplit, urlunsplit

from TypedConfig.converters.base import Converter
from TypedConfig.exceptions import ConversionError
from TypedConfig.settings import get_settings

# Type tag for URI values
URI = SplitResult

TRUE_VALUES = frozenset(("true", "yes", "on", "1"))
FALSE_VALUES = frozenset(("false", "no", "off", "0"))
_YEAR_DIRECTIVE = re.compile(r"%[%Y]")


def _strftime(value: date, pattern: str) -> str:
    # strptime("%Y") needs four digits, strftime does not pad years below 1000
    year = f"{value.year:04d}"
    return value.strftime(_YEAR_DIRECTIVE.sub(lambda m: year if m.group() == "%Y" else m.group(), pattern))


def _conversion_error(raw: str, type_name: str, cause: Optional[Exception] = None) -> ConversionError:
    return ConversionError(
        f"Cannot convert '{raw}' to {type_name}",
        context={"raw": raw, "type": type_name},
        cause=cause,
    )


class StringConverter(Converter[str]):
    def convert(self, raw: str) -> str:
        return raw

    def format(self, value: str) -> str:
        return value


class IntegerConverter(Converter[int]):
    def convert(self, raw: str) -> int:
        try:
            return int(raw)
        except (TypeError, ValueError) as e:
            raise _conversion_error(raw, "int", e) from e

    def format(self, value: int) -> str:
        return str(int(value))


class FloatConverter(Converter[float]):
    def convert(self, raw: str) -> float:
        try:
            return float(raw)
        except (TypeError, ValueError) as e:
            raise _conversion_error(raw, "float", e) from e

    def format(self, value: float) -> str:
        return repr(float(value))


class DecimalConverter(Converter[Decimal]):
    def convert(self, raw: str) -> Decimal:
        try:
            return Decimal(raw.strip())
        except (AttributeError, InvalidOperation) as e:
            raise _conversion_error(raw, "Decimal", e) from e

    def format(self, value: Decimal) -> str:
        return str(value)


class BooleanConverter(Converter[bool]):
    """Accepts true/false, yes/no, on/off and 1/0 in any case; writes true/false."""

    def convert(self, raw: str) -> bool:
        normalized = raw.strip().lower() if isinstance(raw, str) else raw
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
        raise _conversion_error(raw, "bool")

    def format(self, value: bool) -> str:
        return "true" if value else "false"


class DateConverter(Converter[date]):
    """
    Converts dates using a strftime pattern.

    The pattern defaults to the ``converters.date_format`` setting
    (``%m/%d/%Y`` unless overridden by TYPEDCONFIG_DATE_FORMAT).
    """

    def __init__(self, date_format: Optional[str] = None):
        self.date_format = date_format or get_settings()["converters"]["date_format"]

    def convert(self, raw: str) -> date:
        try:
            return datetime.strptime(raw, self.date_format).date()
        except (TypeError, ValueError) as e:
            raise _conversion_error(raw, "date", e) from e

    def format(self, value: date) -> str:
        return _strftime(value, self.date_format)


class DateTimeConverter(Converter[datetime]):
    """Converts datetimes using a strftime pattern, or ISO 8601 when no pattern is set."""

    def __init__(self, datetime_format: Optional[str] = None):
        self.datetime_format = datetime_format or get_settings()["converters"]["datetime_format"]

    def convert(self, raw: str) -> datetime:
        try:
            if self.datetime_format:
                return datetime.strptime(raw, self.datetime_format)
            return datetime.fromisoformat(raw)
        except (TypeError, ValueError) as e:
            raise _conversion_error(raw, "datetime", e) from e

    def format(self, value: datetime) -> str:
        if self.datetime_format:
            return _strftime(value, self.datetime_format)
        return value.isoformat()


class PathConverter(Converter[Path]):
    def convert(self, raw: str) -> Path:
        if not isinstance(raw, str) or not raw:
            raise _conversion_error(raw, "Path")
        return Path(raw)

    def format(self, value: Path) -> str:
        return str(value)


class URIConverter(Converter[SplitResult]):
    """Converts URIs to ``urllib.parse.SplitResult`` values."""

    def convert(self, raw: str) -> SplitResult:
        if not isinstance(raw, str) or not raw or any(c.isspace() for c in raw):
            raise _conversion_error(raw, "URI")
        try:
            return urlsplit(raw)
        except ValueError as e:
            raise _conversion_error(raw, "URI", e) from e

    def format(self, value: SplitResult) -> str:
        return urlunsplit(value)
