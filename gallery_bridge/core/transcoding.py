"""Conversion between base64 text payloads and raw image bytes."""
from __future__ import annotations

import base64
import binascii
import re

from .errors import DecodeError

_data_uri_prefix = re.compile(r"^data:image/[\w.+-]+;base64,")


def strip_data_uri(text: str) -> str:
    """Remove a leading `data:image/<subtype>;base64,` prefix if present."""
    return _data_uri_prefix.sub("", text, count=1)


def to_bytes(text: str) -> bytes:
    """Decode base64 text (optionally a data URI) into bytes.

    Raises:
        DecodeError: If the payload is not valid base64.
    """
    payload = strip_data_uri(text)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 payload: {e}") from e


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def to_data_uri(b64: str, subtype: str = "png") -> str:
    return f"data:image/{subtype};base64,{b64}"
