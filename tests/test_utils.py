from __future__ import annotations

import os
from pathlib import Path

import pytest

from designer_engine.utils import load_dotenv, sanitize_payload


def test_load_dotenv_respects_existing_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "# comment\nexport GEMINI_API_KEY='from-file'\nDESIGNER_IMAGE_MODEL=\"gemini-x\"\nbroken line\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    monkeypatch.setenv("DESIGNER_IMAGE_MODEL", "placeholder")
    monkeypatch.delenv("DESIGNER_IMAGE_MODEL")

    assert load_dotenv(env_path) is True
    assert os.environ["GEMINI_API_KEY"] == "from-env"
    assert os.environ["DESIGNER_IMAGE_MODEL"] == "gemini-x"

    assert load_dotenv(env_path, override=True) is True
    assert os.environ["GEMINI_API_KEY"] == "from-file"


def test_load_dotenv_missing_file(tmp_path: Path) -> None:
    assert load_dotenv(tmp_path / "missing.env") is False


def test_sanitize_payload_strips_binary_and_data_uris() -> None:
    payload = {
        "prompt": "hello",
        "inline_data": b"\x89PNG",
        "nested": [b"abc", "data:image/png;base64,AAAA", 3],
    }
    assert sanitize_payload(payload) == {
        "prompt": "hello",
        "inline_data": "<omitted>",
        "nested": ["<bytes:3>", "<data-uri:26>", 3],
    }
