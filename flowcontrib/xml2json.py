"""Conversion of XML documents into JSON-style objects, and its activity."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Any

from flowcontrib.activity import Activity, ActivityContext, ActivityError
from flowcontrib.coerce import to_string

__all__ = ["Xml2JsonActivity", "convert"]

_ATTRIBUTE_PREFIX = "-"
_CONTENT_KEY = "#content"
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _scalar(text: str) -> Any:
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if text == "null":
        return None
    if _NUMBER.fullmatch(text):
        return float(text)
    return text


def _add(members: dict[str, Any], key: str, value: Any) -> None:
    if key not in members:
        members[key] = value
    elif isinstance(members[key], _Repeated):
        members[key].append(value)
    else:
        members[key] = _Repeated([members[key], value])


class _Repeated(list):
    """Values of an element name seen more than once."""


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, _Repeated):
        return [_plain(item) for item in value]
    return value


def _node(element: ET.Element) -> Any:
    members: dict[str, Any] = {}
    for name, value in element.attrib.items():
        _add(members, _ATTRIBUTE_PREFIX + _local(name), _scalar(value))
    texts = [element.text or ""]
    for child in element:
        _add(members, _local(child.tag), _node(child))
        texts.append(child.tail or "")
    text = "".join(texts).strip()
    if not members:
        return _scalar(text)
    if text:
        members[_CONTENT_KEY] = _scalar(text)
    return members


def convert(xml_data: str) -> dict[str, Any]:
    """Convert an XML document into an object keyed by its root element's name."""
    try:
        root = ET.fromstring(xml_data.encode("utf-8"))
    except ET.ParseError as exc:
        raise ValueError(f"invalid XML: {exc}") from exc
    return {_local(root.tag): _plain(_node(root))}


class Xml2JsonActivity(Activity):
    """Converts its xmlData input into the jsonObject output."""

    def eval(self, ctx: ActivityContext) -> bool:
        ctx.logger.debug("Executing XML2JSON activity")
        xml_data = to_string(ctx.get_input("xmlData"))
        try:
            result = convert(xml_data)
        except ValueError as exc:
            ctx.logger.error("%s", exc)
            raise ActivityError("Failed to convert XML data") from exc
        ctx.set_output("jsonObject", result)
        ctx.logger.debug("XML2JSON activity completed")
        return True