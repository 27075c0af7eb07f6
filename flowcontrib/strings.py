"""String expression functions used in flow mappings."""

from __future__ import annotations

import math
import re
from typing import Any

__all__ = [
    "concat",
    "contains",
    "contains_any",
    "count",
    "equals",
    "equals_ignore_case",
    "index",
    "index_any",
    "last_index",
    "length",
    "match_regex",
    "repeat",
    "replace",
    "replace_all",
    "replace_regex",
    "split",
    "substring",
    "to_float",
    "to_integer",
    "to_lower",
    "to_upper",
    "trim",
    "trim_left",
    "trim_prefix",
    "trim_right",
    "trim_suffix",
]

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_INTEGER_TEXT = re.compile(r"[+-]?\d+")
_DECIMAL_TEXT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_HEX_FLOAT_TEXT = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)[pP][+-]?\d+"
)
_FLOAT_SPECIALS = {
    "inf": math.inf,
    "+inf": math.inf,
    "-inf": -math.inf,
    "infinity": math.inf,
    "+infinity": math.inf,
    "-infinity": -math.inf,
    "nan": math.nan,
}
_TEMPLATE_NAME = re.compile(r"[A-Za-z0-9_]+")


def _require_str(value: Any, what: str = "argument") -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string, got {type(value).__name__}")
    return value


def _require_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an int, got {type(value).__name__}")
    return value


def concat(*args: str) -> str:
    """Join two or more strings."""
    if len(args) < 2:
        raise ValueError("concat function must have at least two arguments")
    return "".join(_require_str(arg) for arg in args)


def contains(text: str, substr: str) -> bool:
    """Report whether substr occurs in text."""
    return _require_str(substr) in _require_str(text)


def contains_any(text: str, chars: str) -> bool:
    """Report whether any character of chars occurs in text."""
    _require_str(text)
    return any(ch in text for ch in _require_str(chars))


def count(text: str, substr: str) -> int:
    """Count non-overlapping occurrences of substr in text."""
    return _require_str(text).count(_require_str(substr))


def equals(first: str, second: str) -> bool:
    """Report whether two strings are identical."""
    return _require_str(first) == _require_str(second)


def equals_ignore_case(first: str, second: str) -> bool:
    """Report whether two strings are equal under simple case folding."""
    _require_str(first)
    _require_str(second)
    if len(first) != len(second):
        return False
    return all(
        a == b or a.lower() == b.lower() or a.upper() == b.upper()
        for a, b in zip(first, second)
    )


def to_float(text: str) -> float:
    """Parse text as a double-precision number."""
    _require_str(text)
    special = _FLOAT_SPECIALS.get(text.lower())
    if special is not None:
        return special
    if _DECIMAL_TEXT.fullmatch(text):
        result = float(text)
    elif _HEX_FLOAT_TEXT.fullmatch(text):
        sign = -1.0 if text.startswith("-") else 1.0
        try:
            result = sign * float.fromhex(text.lstrip("+-"))
        except OverflowError:
            raise ValueError(f"parsing {text!r}: value out of range") from None
    else:
        raise ValueError(f"parsing {text!r}: invalid syntax")
    if math.isinf(result):
        raise ValueError(f"parsing {text!r}: value out of range")
    return result


def index(text: str, substr: str) -> int:
    """Return the position of the first substr in text, or -1."""
    return _require_str(text).find(_require_str(substr))


def index_any(text: str, chars: str) -> int:
    """Return the position of the first character of text found in chars, or -1."""
    _require_str(text)
    wanted = set(_require_str(chars))
    return next((pos for pos, ch in enumerate(text) if ch in wanted), -1)


def to_integer(text: str) -> int:
    """Parse text as a signed decimal 64-bit integer."""
    _require_str(text)
    if not _INTEGER_TEXT.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"parsing {text!r}: value out of range")
    return value


def last_index(text: str, substr: str) -> int:
    """Return the position of the last substr in text, or -1."""
    return _require_str(text).rfind(_require_str(substr))


def length(text: str) -> int:
    """Return the length of text."""
    return len(_require_str(text))


def match_regex(pattern: str, text: str) -> bool:
    """Report whether text contains a match of pattern; a bad pattern never matches."""
    _require_str(pattern)
    _require_str(text)
    try:
        return re.search(pattern, text) is not None
    except re.error:
        return False


def repeat(text: str, times: int) -> str:
    """Return text repeated the given number of times."""
    _require_str(text)
    if _require_int(times, "count") < 0:
        raise ValueError("negative repeat count")
    return text * times


def replace(text: str, old: str, new: str, limit: int) -> str:
    """Replace the first limit occurrences of old; a negative limit replaces all."""
    _require_str(text)
    _require_str(old)
    _require_str(new)
    _require_int(limit, "limit")
    return text.replace(old, new, limit if limit >= 0 else -1)


def replace_all(text: str, old: str, new: str) -> str:
    """Replace every occurrence of old with new."""
    return _require_str(text).replace(_require_str(old), _require_str(new))


def _expand(template: str, match: re.Match[str]) -> str:
    """Expand $n, ${n}, $name, ${name} and $$ in a replacement template."""
    out: list[str] = []
    pos = 0
    while True:
        dollar = template.find("$", pos)
        if dollar < 0:
            out.append(template[pos:])
            break
        out.append(template[pos:dollar])
        rest = template[dollar + 1 :]
        if rest.startswith("$"):
            out.append("$")
            pos = dollar + 2
            continue
        if rest.startswith("{"):
            close = rest.find("}")
            name = rest[1:close] if close > 0 else ""
            if not name or not _TEMPLATE_NAME.fullmatch(name):
                out.append("$")
                pos = dollar + 1
                continue
            pos = dollar + 1 + close + 1
        else:
            found = _TEMPLATE_NAME.match(rest)
            if found is None:
                out.append("$")
                pos = dollar + 1
                continue
            name = found.group()
            pos = dollar + 1 + len(name)
        out.append(_group_text(match, name))
    return "".join(out)


def _group_text(match: re.Match[str], name: str) -> str:
    if name.isdigit():
        number = int(name)
        if number > match.re.groups:
            return ""
        return match.group(number) or ""
    if name not in match.re.groupindex:
        return ""
    return match.group(name) or ""


def replace_regex(pattern: str, text: str, replacement: str) -> str:
    """Replace every match of pattern in text, expanding $-references in replacement."""
    _require_str(pattern)
    _require_str(text)
    _require_str(replacement)
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
    return compiled.sub(lambda match: _expand(replacement, match), text)


def split(text: str, sep: str) -> list[str]:
    """Split text around sep; an empty sep splits into single characters."""
    _require_str(text)
    if _require_str(sep) == "":
        return list(text)
    return text.split(sep)


def substring(text: str, start: int, size: int) -> str:
    """Return size characters of text from start; size -1 means to the end."""
    _require_str(text)
    _require_int(start, "start")
    _require_int(size, "length")
    if start < 0 or start > len(text):
        raise ValueError(f"start index {start} out of range")
    if size == -1:
        return text[start:]
    if size < 0:
        raise ValueError(f"invalid length {size}")
    if start + size > len(text):
        raise ValueError("string length exceeded")
    return text[start : start + size]


def to_lower(text: str) -> str:
    """Return text in lower case."""
    return _require_str(text).lower()


def to_upper(text: str) -> str:
    """Return text in upper case."""
    return _require_str(text).upper()


def trim(text: str, cutset: str) -> str:
    """Strip characters in cutset from both ends of text."""
    return _require_str(text).strip(_require_str(cutset))


def trim_left(text: str, cutset: str) -> str:
    """Strip characters in cutset from the start of text."""
    return _require_str(text).lstrip(_require_str(cutset))


def trim_prefix(text: str, prefix: str) -> str:
    """Remove prefix from text if present."""
    return _require_str(text).removeprefix(_require_str(prefix))


def trim_right(text: str, cutset: str) -> str:
    """Strip characters in cutset from the end of text."""
    return _require_str(text).rstrip(_require_str(cutset))


def trim_suffix(text: str, suffix: str) -> str:
    """Remove suffix from text if present."""
    return _require_str(text).removesuffix(_require_str(suffix))