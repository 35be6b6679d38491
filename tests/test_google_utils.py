from __future__ import annotations

import base64

from designer_engine.providers.google_utils import (
    data_uri_mime,
    decode_image_payload,
    strip_data_uri_prefix,
    to_png_data_uri,
)


def test_strip_data_uri_prefix() -> None:
    assert strip_data_uri_prefix("data:image/jpeg;base64,QUJD") == "QUJD"
    assert strip_data_uri_prefix("QUJD") == "QUJD"


def test_data_uri_mime_defaults_to_png() -> None:
    assert data_uri_mime("data:image/webp;base64,QUJD") == "image/webp"
    assert data_uri_mime("QUJD") == "image/png"


def test_decode_image_payload_and_png_data_uri() -> None:
    raw = b"\x89PNG fake"
    uri = to_png_data_uri(raw)
    assert uri.startswith("data:image/png;base64,")
    assert decode_image_payload(uri) == raw
    assert decode_image_payload(base64.b64encode(raw).decode("ascii")) == raw
