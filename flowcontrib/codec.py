"""Base64 string encoding and random UUID generation."""

from __future__ import annotations

import base64
import binascii
import uuid

__all__ = ["decode_string", "encode_string", "new_uuid"]


def encode_string(text: str) -> str:
    """Encode text as standard, padded base64 of its UTF-8 bytes."""
    if not isinstance(text, str):
        raise TypeError("text must be a string")
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_string(text: str) -> str:
    """Decode standard, padded base64 into text."""
    if not isinstance(text, str):
        raise TypeError("text must be a string")
    try:
        raw = base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"error: {exc}") from exc
    return raw.decode("utf-8", errors="replace")


def new_uuid() -> str:
    """Return a random (version 4) UUID in its canonical text form."""
    return str(uuid.uuid4())