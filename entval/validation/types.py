"""Type checkers for the property types a schema can declare.

Each checker answers one question, "is this value an acceptable X", and
never converts the value. Tagged wrappers are matched on their class and
plain values on their Python type; ``bool`` is excluded wherever ``int``
would otherwise let it through.
"""

from collections.abc import Callable, Mapping
from datetime import date
import math
import re
from typing import Any

from ..core.values import DoubleValue, GeoPointValue, IntegerValue

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
INTEGER_STRING_PATTERN = re.compile(r"[+-]?[0-9]+")
NUMBER_STRING_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_int(value: Any) -> bool:
    """Accept plain whole numbers and integer wrappers with integer text."""
    if isinstance(value, IntegerValue):
        return bool(INTEGER_STRING_PATTERN.fullmatch(str(value.raw)))
    if isinstance(value, float):
        return math.isfinite(value) and value.is_integer()
    return isinstance(value, int) and not isinstance(value, bool)


def is_double(value: Any) -> bool:
    """Accept plain numbers and double wrappers with numeric text."""
    if isinstance(value, DoubleValue):
        return bool(NUMBER_STRING_PATTERN.fullmatch(str(value.raw)))
    return _is_number(value)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_buffer(value: Any) -> bool:
    return isinstance(value, bytes | bytearray | memoryview)


def is_array(value: Any) -> bool:
    return isinstance(value, list | tuple)


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_datetime(value: Any) -> bool:
    """Accept date/datetime objects and ``YYYY-MM-DD`` strings only."""
    if isinstance(value, date):
        return True
    return isinstance(value, str) and bool(DATE_PATTERN.fullmatch(value))


def is_geo_point(value: Any) -> bool:
    """Accept GeoPointValue, or a mapping of in-range numeric coordinates."""
    if isinstance(value, GeoPointValue):
        return True
    if not isinstance(value, Mapping):
        return False

    latitude = value.get("latitude")
    longitude = value.get("longitude")
    if not (_is_number(latitude) and _is_number(longitude)):
        return False
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


TYPE_CHECKERS: dict[str, Callable[[Any], bool]] = {
    "string": is_string,
    "int": is_int,
    "double": is_double,
    "boolean": is_boolean,
    "buffer": is_buffer,
    "array": is_array,
    "object": is_object,
    "datetime": is_datetime,
    "geoPoint": is_geo_point,
}


def check_type(type_name: str | None, value: Any) -> bool:
    """Check ``value`` against a declared type; no type accepts anything.

    Raises:
        KeyError: If ``type_name`` is not a known property type
    """
    if type_name is None:
        return True
    return TYPE_CHECKERS[type_name](value)
