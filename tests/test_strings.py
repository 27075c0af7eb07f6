import math

import pytest

from flowcontrib import strings


def test_concat():
    assert strings.concat("a", "b") == "ab"
    assert strings.concat("a", "b", "c") == "abc"


def test_concat_needs_two_arguments():
    with pytest.raises(ValueError):
        strings.concat("a")


def test_concat_rejects_non_strings():
    with pytest.raises(TypeError):
        strings.concat("a", 1)


def test_contains():
    assert strings.contains("foo", "Bar") is False
    assert strings.contains("foobar", "foo") is True


def test_contains_any():
    assert strings.contains_any("failure", "ui") is True
    assert strings.contains_any("foo", "") is False
    assert strings.contains_any("team", "xyz") is False


def test_count():
    assert strings.count("cheese", "e") == 3
    assert strings.count("five", "") == 5


def test_equals():
    assert strings.equals("foo", "bar") is False
    assert strings.equals("foo", "foo") is True


def test_equals_ignore_case():
    assert strings.equals_ignore_case("foo", "Bar") is False
    assert strings.equals_ignore_case("foo", "Foo") is True
    assert strings.equals_ignore_case("foo", "fooo") is False


def test_to_float():
    assert strings.to_float("123.123") == 123.123
    assert strings.to_float("-1e3") == -1000.0
    assert strings.to_float("Inf") == math.inf
    assert math.isnan(strings.to_float("NaN"))


@pytest.mark.parametrize("text", ["", "abc", " 1.5", "1e400"])
def test_to_float_invalid(text):
    with pytest.raises(ValueError):
        strings.to_float(text)


def test_to_integer():
    assert strings.to_integer("123") == 123
    assert strings.to_integer("-42") == -42


@pytest.mark.parametrize("text", ["", "1.5", " 12", "1_000", "9223372036854775808"])
def test_to_integer_invalid(text):
    with pytest.raises(ValueError):
        strings.to_integer(text)


def test_index_and_last_index():
    assert strings.index("chicken", "ken") == 4
    assert strings.index("chicken", "dmr") == -1
    assert strings.last_index("to tomato", "to") == 7
    assert strings.last_index("to tomato", "rodent") == -1


def test_index_any():
    assert strings.index_any("banana", "ny") == 2
    assert strings.index_any("banana", "xyz") == -1


def test_length():
    assert strings.length("abc") == 3
    assert strings.length("") == 0


def test_match_regex():
    assert strings.match_regex("p([a-z]+)ch", "peach") is True
    assert strings.match_regex("^z", "peach") is False
    assert strings.match_regex("(", "peach") is False


def test_repeat():
    assert strings.repeat("na", 3) == "nanana"
    assert strings.repeat("na", 0) == ""
    with pytest.raises(ValueError):
        strings.repeat("na", -1)


def test_replace():
    assert strings.replace("oink oink oink", "k", "ky", 2) == "oinky oinky oink"
    assert strings.replace("oink oink oink", "oink", "moo", -1) == "moo moo moo"
    assert strings.replace("oink", "o", "x", 0) == "oink"


def test_replace_all():
    assert strings.replace_all("oink oink oink", "oink", "moo") == "moo moo moo"


def test_replace_regex_invalid_pattern():
    with pytest.raises(ValueError):
        strings.replace_regex("(", "abc", "x")


def test_split():
    assert strings.split("a,b,c", ",") == ["a", "b", "c"]
    assert strings.split("abc", "") == ["a", "b", "c"]
    assert strings.split("", ",") == [""]


def test_substring():
    assert strings.substring("abc", 1, -1) == "bc"
    assert strings.substring("abc", 1, 1) == "b"


def test_substring_exceeds_length():
    with pytest.raises(ValueError, match="string length exceeded"):
        strings.substring("abc", 2, 5)


def test_case_conversion():
    assert strings.to_lower("Hello World") == "hello world"
    assert strings.to_upper("Hello World") == "HELLO WORLD"


def test_trims():
    assert strings.trim("!!hello!!", "!") == "hello"
    assert strings.trim_left("!!hello!!", "!") == "hello!!"
    assert strings.trim_right("!!hello!!", "!") == "!!hello"
    assert strings.trim("  x  ", "") == "  x  "


def test_trim_prefix_and_suffix():
    assert strings.trim_prefix("prefix-body", "prefix-") == "body"
    assert strings.trim_prefix("body", "prefix-") == "body"
    assert strings.trim_suffix("body.txt", ".txt") == "body"
    assert strings.trim_suffix("body", ".txt") == "body"


def test_non_string_argument_rejected():
    with pytest.raises(TypeError):
        strings.to_upper(5)