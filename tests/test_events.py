from __future__ import annotations

import json
import threading
from pathlib import Path

from designer_engine.runs.events import EventWriter


def test_event_writer(tmp_path: Path) -> None:
    path = tmp_path / "events.jsonl"
    writer = EventWriter(path, "session-123")
    writer.emit("run_started", out_dir="/tmp/session")
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["type"] == "run_started"
    assert payload["session_id"] == "session-123"
    assert "ts" in payload
    assert payload["out_dir"] == "/tmp/session"


def test_event_writer_omits_image_payloads(tmp_path: Path) -> None:
    writer = EventWriter(tmp_path / "events.jsonl", "s")
    event = writer.emit(
        "asset_generated",
        provider_request={"prompt": "hello", "image_data": "data:image/png;base64,AAAA"},
        preview="data:image/png;base64,BBBB",
    )
    assert event["provider_request"]["prompt"] == "hello"
    assert event["provider_request"]["image_data"] == "<omitted>"
    assert event["preview"].startswith("<data-uri:")


def test_event_writer_keeps_lines_whole_across_threads(tmp_path: Path) -> None:
    writer = EventWriter(tmp_path / "events.jsonl", "s")

    def emit_many(category: str) -> None:
        for idx in range(25):
            writer.emit("asset_generation_started", category=category, generation=idx)

    threads = [threading.Thread(target=emit_many, args=(name,)) for name in ("A", "B", "C", "D")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    events = writer.read_all()
    assert len(events) == 100
    assert {event["category"] for event in events} == {"A", "B", "C", "D"}
