import json
from datetime import datetime, timezone

import pytest

from flowcontrib.coerce import (
    CoercionError,
    DataType,
    fn_to_type,
    to_array,
    to_bool,
    to_bytes,
    to_float32,
    to_float64,
    to_int,
    to_int32,
    to_int64,
    to_object,
    to_params,
    to_string,
    to_type,
    to_type_enum,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("string", DataType.STRING),
        ("INT", DataType.INT),
        ("int32", DataType.INT32),
        ("int64", DataType.INT64),
        ("float32", DataType.FLOAT32),
        ("float64", DataType.FLOAT64),
        ("boolean", DataType.BOOL),
        ("params", DataType.PARAMS),
        ("array", DataType.ARRAY),
        ("any", DataType.ANY),
    ],
)
def test_to_type_enum_names(name, expected):
    assert to_type_enum(name) is expected


@pytest.mark.parametrize("name", ["", "widget", 3])
def test_to_type_enum_rejects_unknown(name):
    with pytest.raises(CoercionError):
        to_type_enum(name)


def test_to_string_scalars():
    assert to_string(True) == "true"
    assert to_string(False) == "false"
    assert to_string(None) == ""
    assert to_string(3.0) == "3"


@pytest.mark.parametrize("number", [0, -7, 123456789])
def test_int_string_round_trip(number):
    assert to_int(to_string(number)) == number


@pytest.mark.parametrize("number", [0.1, -2.5, 1e-7, 1e20])
def test_float_string_round_trip(number):
    text = to_string(number)
    assert "e" not in text.lower()
    assert to_float64(text) == number


def test_to_string_of_mapping_is_json():
    value = {"b": [1, 2], "a": "x"}
    assert json.loads(to_string(value)) == value


def test_to_int_truncates_floats():
    assert to_int(2.9) == 2
    assert to_int("2.9") == to_int(2.9)
    assert to_int(None) == 0


@pytest.mark.parametrize("value", ["abc", "", [1], {"a": 1}, float("nan")])
def test_to_int_rejects(value):
    with pytest.raises(CoercionError):
        to_int(value)


def test_int32_bounds():
    assert to_int32(2**31 - 1) == 2**31 - 1
    with pytest.raises(CoercionError):
        to_int32(2**31)
    with pytest.raises(CoercionError):
        to_int64(2**63)


@pytest.mark.parametrize("text", ["1", "t", "T", "TRUE", "true", "True"])
def test_to_bool_true_strings(text):
    assert to_bool(text) is True


@pytest.mark.parametrize("text", ["0", "f", "F", "FALSE", "false", "False"])
def test_to_bool_false_strings(text):
    assert to_bool(text) is False


def test_to_bool_numbers_and_errors():
    assert to_bool(0) is False
    assert to_bool(5) is True
    assert to_bool(None) is False
    with pytest.raises(CoercionError):
        to_bool("maybe")


def test_bytes_round_trip():
    text = "héllo wörld"
    assert to_bytes(text).decode("utf-8") == text
    assert to_string(to_bytes(text)) == text
    assert to_bytes(None) == b""


def test_to_params_stringifies_values():
    params = to_params({"a": 1, "b": True, "c": "x"})
    assert all(isinstance(value, str) for value in params.values())
    assert to_int(params["a"]) == 1
    assert to_bool(params["b"]) is True
    assert params["c"] == "x"


def test_to_params_from_json_and_errors():
    assert to_params('{"k": "v"}') == {"k": "v"}
    assert to_params(None) == {}
    with pytest.raises(CoercionError):
        to_params(5)
    with pytest.raises(CoercionError):
        to_params("[1, 2]")


def test_to_object():
    assert to_object(None) == {}
    assert to_object('{"a": [1, 2]}') == {"a": [1, 2]}
    assert to_object({1: "x"}) == {"1": "x"}
    with pytest.raises(CoercionError):
        to_object("[1]")
    with pytest.raises(CoercionError):
        to_object(42)


def test_to_array():
    assert to_array((1, 2)) == [1, 2]
    assert to_array("[1, \"a\"]") == [1, "a"]
    assert to_array(None) == []
    with pytest.raises(CoercionError):
        to_array(7)
    with pytest.raises(CoercionError):
        to_array('{"a": 1}')


def test_to_type_dispatch():
    marker = object()
    assert to_type("7", DataType.INT) == 7
    assert to_type(marker, DataType.ANY) is marker
    assert to_type("1", "bool") is True
    assert to_type({"a": 1}, DataType.MAP) == {"a": 1}


def test_to_type_datetime():
    parsed = to_type("2020-01-02T03:04:05Z", DataType.DATETIME)
    assert parsed == datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    with pytest.raises(CoercionError):
        to_type("yesterday", DataType.DATETIME)


def test_fn_to_type():
    assert fn_to_type("5", "int") == 5
    assert fn_to_type(1, "string") == to_string(1)


def test_fn_to_type_errors():
    with pytest.raises(CoercionError, match="missing params"):
        fn_to_type("5")
    with pytest.raises(CoercionError):
        fn_to_type("5", 3)
    with pytest.raises(CoercionError):
        fn_to_type("5", "widget")