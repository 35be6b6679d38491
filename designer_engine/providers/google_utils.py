"""Shared helpers for Google image providers."""

from __future__ import annotations

import base64
import binascii
import re


_DATA_URI_RE = re.compile(r"^\s*data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^,]*)?,", re.IGNORECASE)

DEFAULT_IMAGE_MIME = "image/png"


def strip_data_uri_prefix(value: str) -> str:
    """Drop a leading ``data:<mime>;base64,`` header, if any."""
    text = str(value or "")
    match = _DATA_URI_RE.match(text)
    if not match:
        return text.strip()
    return text[match.end():].strip()


def data_uri_mime(value: str, default: str = DEFAULT_IMAGE_MIME) -> str:
    match = _DATA_URI_RE.match(str(value or ""))
    if match and match.group("mime"):
        return match.group("mime").lower()
    return default


def decode_image_payload(value: str) -> bytes:
    payload = strip_data_uri_prefix(value)
    try:
        return base64.b64decode(payload, validate=False)
    except binascii.Error as exc:
        raise ValueError("Image payload is not valid base64.") from exc


def to_png_data_uri(data: bytes) -> str:
    encoded = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:{DEFAULT_IMAGE_MIME};base64,{encoded}"

