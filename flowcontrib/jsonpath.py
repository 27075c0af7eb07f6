"""JSONPath lookups over decoded JSON data."""

from __future__ import annotations

import operator
import re
from typing import Any

__all__ = ["JsonPathError", "path"]


class JsonPathError(ValueError):
    """Raised when a JSONPath expression is malformed or cannot be resolved."""


_MISSING = object()
_COMPARISON = re.compile(r"^\s*(.+?)\s*(==|!=|<=|>=|=~|<|>)\s*(.+?)\s*$")
_INT = re.compile(r"[+-]?\d+")
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_REGEX_LITERAL = re.compile(r"/(.*)/([a-z]*)", re.DOTALL)
_LITERALS = {"true": True, "false": False, "null": None}
_ORDERING = {"<": operator.lt, "<=": operator.le, ">": operator.gt, ">=": operator.ge}


def path(expression: str, data: Any) -> Any:
    """Look up the value that a JSONPath expression selects in data."""
    if not isinstance(expression, str):
        raise TypeError("expression must be a string")
    return _evaluate(expression, data, data)


def _evaluate(expression: str, data: Any, root: Any) -> Any:
    expr = expression.strip()
    if not expr.startswith("$"):
        raise JsonPathError(f"expression must start with '$': {expression!r}")
    current = data
    for segment in _split_segments(expr[1:]):
        recursive, name, selectors = _parse_segment(segment)
        if recursive:
            current = _descend(current, name)
        elif name:
            current = _get_key(current, name)
        for selector in selectors:
            current = _select(current, selector, root)
    return current


def _split_segments(body: str) -> list[str]:
    if body and body[0] not in ".[":
        raise JsonPathError(f"unexpected {body[0]!r} after '$'")
    segments: list[str] = []
    buf: list[str] = []
    depth = 0
    quote: str | None = None
    i = 0
    while i < len(body):
        ch = body[i]
        if quote:
            if ch == quote:
                quote = None
        elif depth and ch in "'\"":
            quote = ch
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth < 0:
                raise JsonPathError("unbalanced ']' in expression")
        elif ch == "." and depth == 0:
            if buf:
                segments.append("".join(buf))
                buf = []
            if body.startswith("..", i):
                buf = [".."]
                i += 2
            else:
                i += 1
            continue
        buf.append(ch)
        i += 1
    if quote or depth:
        raise JsonPathError("unterminated bracket or quote in expression")
    if body.endswith("."):
        raise JsonPathError("expression must not end with '.'")
    if buf:
        segments.append("".join(buf))
    return segments


def _parse_segment(segment: str) -> tuple[bool, str, list[str]]:
    recursive = segment.startswith("..")
    if recursive:
        segment = segment[2:]
    bracket = segment.find("[")
    name = segment if bracket < 0 else segment[:bracket]
    selectors = [] if bracket < 0 else _split_selectors(segment[bracket:])
    if not name and (recursive or not selectors):
        raise JsonPathError("empty path segment")
    return recursive, name.strip(), selectors


def _split_selectors(text: str) -> list[str]:
    selectors: list[str] = []
    depth = 0
    quote: str | None = None
    start = 0
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
        elif depth == 0 and ch != "[":
            raise JsonPathError(f"unexpected {ch!r} after ']'")
        elif ch in "'\"":
            quote = ch
        elif ch == "[":
            if depth == 0:
                start = i + 1
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                selectors.append(text[start:i].strip())
    return selectors


def _select(current: Any, selector: str, root: Any) -> Any:
    if not selector:
        raise JsonPathError("empty brackets in expression")
    if selector.startswith("?(") and selector.endswith(")"):
        return _filter(current, selector[2:-1], root)
    if selector == "*":
        return _all(current)
    if selector[0] in "'\"":
        if len(selector) < 2 or selector[-1] != selector[0]:
            raise JsonPathError(f"malformed quoted key {selector!r}")
        return _get_key(current, selector[1:-1])
    if ":" in selector:
        return _range(current, selector)
    if "," in selector:
        return [_index(current, _parse_int(part)) for part in selector.split(",")]
    return _index(current, _parse_int(selector))


def _parse_int(text: str) -> int:
    text = text.strip()
    if not _INT.fullmatch(text):
        raise JsonPathError(f"invalid index {text!r}")
    return int(text)


def _all(obj: Any) -> list[Any]:
    if isinstance(obj, list):
        return list(obj)
    if isinstance(obj, dict):
        return list(obj.values())
    raise JsonPathError("object is not a map or list")


def _get_key(obj: Any, key: str) -> Any:
    if isinstance(obj, dict):
        if key == "*":
            return list(obj.values())
        try:
            return obj[key]
        except KeyError:
            raise JsonPathError(f"key error: {key} not found in object") from None
    if isinstance(obj, list):
        results = []
        for item in obj:
            try:
                results.append(_get_key(item, key))
            except JsonPathError:
                continue
        return results
    raise JsonPathError(f"object is not a map or list, cannot get key {key!r}")


def _index(obj: Any, idx: int) -> Any:
    if not isinstance(obj, list):
        raise JsonPathError("object is not a list, cannot index it")
    position = idx + len(obj) if idx < 0 else idx
    if not 0 <= position < len(obj):
        raise JsonPathError(f"index out of range: len: {len(obj)}, idx: {idx}")
    return obj[position]


def _range(obj: Any, selector: str) -> list[Any]:
    if not isinstance(obj, list):
        raise JsonPathError("object is not a list, cannot take a range")
    parts = selector.split(":")
    if len(parts) != 2:
        raise JsonPathError(f"unsupported range {selector!r}")
    low, high = parts
    length = len(obj)
    start = _parse_int(low) if low.strip() else 0
    end = _parse_int(high) if high.strip() else length - 1
    if start < 0:
        start += length
    stop = end + length + 1 if end < 0 else end + 1
    if not 0 <= start < length:
        raise JsonPathError(f"index [from] out of range: len: {length}, from: {low.strip()}")
    if not 0 <= stop <= length or stop < start:
        raise JsonPathError(f"index [to] out of range: len: {length}, to: {high.strip()}")
    return obj[start:stop]


def _descend(node: Any, name: str) -> list[Any]:
    found: list[Any] = []

    def walk(value: Any) -> None:
        if isinstance(value, dict):
            if name == "*":
                found.extend(value.values())
            elif name in value:
                found.append(value[name])
            for child in value.values():
                walk(child)
        elif isinstance(value, list):
            if name == "*":
                found.extend(value)
            for child in value:
                walk(child)

    walk(node)
    return found


def _filter(obj: Any, expression: str, root: Any) -> list[Any]:
    return [item for item in _all(obj) if _matches(item, expression, root)]


def _matches(item: Any, expression: str, root: Any) -> bool:
    match = _COMPARISON.match(expression)
    if match is None:
        return _operand(expression.strip(), item, root) is not _MISSING
    left = _operand(match[1], item, root)
    op = match[2]
    if op == "=~":
        return _regex_match(left, match[3])
    right = _operand(match[3], item, root)
    return _compare(left, op, right)


def _resolve(expression: str, data: Any, root: Any) -> Any:
    try:
        return _evaluate(expression, data, root)
    except JsonPathError:
        return _MISSING


def _operand(text: str, item: Any, root: Any) -> Any:
    if text.startswith("@"):
        return _resolve("$" + text[1:], item, root)
    if text.startswith("$"):
        return _resolve(text, root, root)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1]
    if text in _LITERALS:
        return _LITERALS[text]
    if _INT.fullmatch(text):
        return int(text)
    if _NUMBER.fullmatch(text):
        return float(text)
    raise JsonPathError(f"invalid filter operand {text!r}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _equal(left: Any, right: Any) -> bool:
    if _is_number(left) and _is_number(right):
        return left == right
    if _is_number(left) or _is_number(right):
        return False
    return left == right


def _compare(left: Any, op: str, right: Any) -> bool:
    if left is _MISSING or right is _MISSING:
        return False
    if op == "==":
        return _equal(left, right)
    if op == "!=":
        return not _equal(left, right)
    comparable = (_is_number(left) and _is_number(right)) or (
        isinstance(left, str) and isinstance(right, str)
    )
    return comparable and _ORDERING[op](left, right)


def _regex_match(left: Any, pattern_text: str) -> bool:
    literal = _REGEX_LITERAL.fullmatch(pattern_text.strip())
    if literal is None:
        raise JsonPathError(f"invalid regular expression {pattern_text!r}")
    flags = re.IGNORECASE if "i" in literal[2] else 0
    try:
        pattern = re.compile(literal[1], flags)
    except re.error as exc:
        raise JsonPathError(f"invalid regular expression {pattern_text!r}: {exc}") from exc
    return isinstance(left, str) and pattern.search(left) is not None