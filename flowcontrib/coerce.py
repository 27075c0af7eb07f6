"""Coercion of loosely typed values into the data types used by flows."""

from __future__ import annotations

import base64
import json
import math
import re
import struct
from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import Any

__all__ = [
    "CoercionError",
    "DataType",
    "fn_to_type",
    "to_array",
    "to_bool",
    "to_bytes",
    "to_float32",
    "to_float64",
    "to_int",
    "to_int32",
    "to_int64",
    "to_object",
    "to_params",
    "to_string",
    "to_type",
    "to_type_enum",
]


class CoercionError(ValueError):
    """Raised when a value cannot be coerced to the requested type."""


class DataType(IntEnum):
    """Data types known to flows; everything above ANY is a concrete type."""

    UNKNOWN = 0
    ANY = 1
    STRING = 2
    INT = 3
    INT32 = 4
    INT64 = 5
    FLOAT32 = 6
    FLOAT64 = 7
    BOOL = 8
    OBJECT = 9
    BYTES = 10
    PARAMS = 11
    ARRAY = 12
    MAP = 13
    DATETIME = 14


_TYPE_NAMES = {
    "any": DataType.ANY,
    "string": DataType.STRING,
    "int": DataType.INT,
    "integer": DataType.INT,
    "int32": DataType.INT32,
    "int64": DataType.INT64,
    "long": DataType.INT64,
    "float32": DataType.FLOAT32,
    "float64": DataType.FLOAT64,
    "float": DataType.FLOAT64,
    "double": DataType.FLOAT64,
    "number": DataType.FLOAT64,
    "bool": DataType.BOOL,
    "boolean": DataType.BOOL,
    "object": DataType.OBJECT,
    "bytes": DataType.BYTES,
    "params": DataType.PARAMS,
    "array": DataType.ARRAY,
    "map": DataType.MAP,
    "datetime": DataType.DATETIME,
}

_INT32_RANGE = (-(2**31), 2**31 - 1)
_INT64_RANGE = (-(2**63), 2**63 - 1)

_INT_TEXT = re.compile(r"[+-]?\d+")
_FLOAT_TEXT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_FLOAT_SPECIALS = {
    "inf": math.inf,
    "+inf": math.inf,
    "-inf": -math.inf,
    "infinity": math.inf,
    "+infinity": math.inf,
    "-infinity": -math.inf,
    "nan": math.nan,
}

_TRUE_TEXT = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_TEXT = {"0", "f", "F", "FALSE", "false", "False"}


def to_type_enum(name: Any) -> DataType:
    """Return the data type with the given name (case-insensitive)."""
    if isinstance(name, DataType):
        return name
    if not isinstance(name, str):
        raise CoercionError(f"type name must be a string, got {type(name).__name__}")
    try:
        return _TYPE_NAMES[name.lower()]
    except KeyError:
        raise CoercionError(f"unknown type: {name}") from None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def _to_json(value: Any) -> str:
    try:
        return json.dumps(value, separators=(",", ":"), sort_keys=True, default=_json_default)
    except (TypeError, ValueError) as exc:
        raise CoercionError(f"unable to encode value as JSON: {exc}") from exc


def _parse_json(text: str, kind: type, kind_name: str) -> Any:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CoercionError(f"unable to coerce '{text}' to {kind_name}: {exc}") from exc
    if not isinstance(parsed, kind):
        raise CoercionError(f"unable to coerce '{text}' to {kind_name}")
    return parsed


def _parse_float_text(text: str) -> float:
    if _FLOAT_TEXT.fullmatch(text):
        return float(text)
    special = _FLOAT_SPECIALS.get(text.lower())
    if special is None:
        raise CoercionError(f"unable to coerce '{text}' to a number")
    return special


def _check_range(value: int, bounds: tuple[int, int], kind_name: str) -> int:
    low, high = bounds
    if not low <= value <= high:
        raise CoercionError(f"value {value} out of range for {kind_name}")
    return value


def to_string(value: Any) -> str:
    """Coerce a value to a string; maps and lists become compact JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (dict, list, tuple)):
        return _to_json(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def to_int(value: Any) -> int:
    """Coerce a value to a 64-bit integer; floats are truncated."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return _check_range(value, _INT64_RANGE, "int")
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise CoercionError(f"unable to coerce {value} to int")
        return _check_range(int(value), _INT64_RANGE, "int")
    if isinstance(value, str):
        if _INT_TEXT.fullmatch(value):
            return _check_range(int(value), _INT64_RANGE, "int")
        return to_int(_parse_float_text(value))
    raise CoercionError(f"unable to coerce {value!r} to int")


def to_int32(value: Any) -> int:
    """Coerce a value to an integer within the 32-bit signed range."""
    return _check_range(to_int(value), _INT32_RANGE, "int32")


def to_int64(value: Any) -> int:
    """Coerce a value to an integer within the 64-bit signed range."""
    return _check_range(to_int(value), _INT64_RANGE, "int64")


def to_float64(value: Any) -> float:
    """Coerce a value to a double-precision float."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return _parse_float_text(value)
    raise CoercionError(f"unable to coerce {value!r} to float64")


def to_float32(value: Any) -> float:
    """Coerce a value to a float rounded to single precision."""
    number = to_float64(value)
    try:
        return struct.unpack("f", struct.pack("f", number))[0]
    except OverflowError:
        raise CoercionError(f"value {number} out of range for float32") from None


def to_bool(value: Any) -> bool:
    """Coerce a value to a boolean."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if _is_number(value):
        return value != 0
    if isinstance(value, str):
        if value == "" or value in _FALSE_TEXT:
            return False
        if value in _TRUE_TEXT:
            return True
        raise CoercionError(f"unable to coerce '{value}' to bool")
    raise CoercionError(f"unable to coerce {value!r} to bool")


def to_bytes(value: Any) -> bytes:
    """Coerce a value to bytes; text is encoded as UTF-8."""
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return to_string(value).encode("utf-8")


def to_params(value: Any) -> dict[str, str]:
    """Coerce a value to a mapping of string names to string values."""
    if value is None:
        return {}
    if isinstance(value, str):
        if value == "":
            return {}
        value = _parse_json(value, dict, "params")
    if isinstance(value, dict):
        return {str(key): to_string(item) for key, item in value.items()}
    raise CoercionError(f"unable to coerce {value!r} to params")


def to_object(value: Any) -> dict[str, Any]:
    """Coerce a value to a mapping with string keys."""
    if value is None:
        return {}
    if isinstance(value, str):
        if value == "":
            return {}
        value = _parse_json(value, dict, "object")
    if isinstance(value, dict):
        return {str(key): item for key, item in value.items()}
    raise CoercionError(f"unable to coerce {value!r} to object")


def to_array(value: Any) -> list[Any]:
    """Coerce a value to a list."""
    if value is None:
        return []
    if isinstance(value, str):
        if value == "":
            return []
        value = _parse_json(value, list, "array")
    if isinstance(value, (list, tuple)):
        return list(value)
    raise CoercionError(f"unable to coerce {value!r} to array")


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise CoercionError(f"unable to coerce '{value}' to datetime") from exc
    raise CoercionError(f"unable to coerce {value!r} to datetime")


_CONVERTERS = {
    DataType.STRING: to_string,
    DataType.INT: to_int,
    DataType.INT32: to_int32,
    DataType.INT64: to_int64,
    DataType.FLOAT32: to_float32,
    DataType.FLOAT64: to_float64,
    DataType.BOOL: to_bool,
    DataType.OBJECT: to_object,
    DataType.BYTES: to_bytes,
    DataType.PARAMS: to_params,
    DataType.ARRAY: to_array,
    DataType.MAP: to_object,
    DataType.DATETIME: _to_datetime,
}


def to_type(value: Any, data_type: DataType | str) -> Any:
    """Coerce a value to the given data type; ANY leaves it untouched."""
    data_type = to_type_enum(data_type)
    converter = _CONVERTERS.get(data_type)
    if converter is None:
        return value
    return converter(value)


def fn_to_type(*args: Any) -> Any:
    """Expression function toType(any, string)."""
    if len(args) < 2:
        raise CoercionError("missing params, signature is toType(any,string)")
    type_name = args[1]
    if not isinstance(type_name, str):
        raise CoercionError("second param must be a string")
    return to_type(args[0], to_type_enum(type_name))