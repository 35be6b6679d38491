"""Local gallery web server.

Endpoints:
  GET  /                          single-page gallery
  GET  /healthz
  GET  /api/state
  POST /api/reference             {"image": "<data uri>"}
  POST /api/note                  {"note": "..."}
  POST /api/design                analysis + fan-out in the background
  POST /api/assets/<CATEGORY>/retry
  GET  /api/assets/<CATEGORY>/image
  GET  /api/assets/<CATEGORY>/download
"""

from __future__ import annotations

import json
import sys
import threading
import time
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import unquote, urlparse

from .assets.categories import AssetCategory, category_spec
from .engine import DesignerEngine
from .gallery.page import render_index


def _json_dumps(obj: Any) -> bytes:
    return (json.dumps(obj, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def _parse_asset_path(path: str) -> tuple[AssetCategory, str] | None:
    parts = [unquote(p) for p in path.strip("/").split("/")]
    if len(parts) != 4 or parts[0] != "api" or parts[1] != "assets":
        return None
    try:
        category = AssetCategory.parse(parts[2])
    except ValueError:
        return None
    return category, parts[3]


class GalleryServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], engine: DesignerEngine) -> None:
        super().__init__(address, _Handler)
        self.engine = engine
        self.design_lock = threading.Lock()


class _Handler(BaseHTTPRequestHandler):
    server_version = "designer-gallery/0"
    server: GalleryServer

    def _send_json(self, status: int, payload: Any) -> None:
        body = _json_dumps(payload)
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _send_bytes(self, content_type: str, body: bytes, headers: dict[str, str] | None = None) -> None:
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        if headers:
            for k, v in headers.items():
                self.send_header(k, v)
        self.end_headers()
        self.wfile.write(body)

    def _read_json_body(self) -> dict[str, Any] | None:
        try:
            length = int(self.headers.get("Content-Length", "0"))
        except ValueError:
            return None
        if length <= 0:
            return {}
        raw = self.rfile.read(length)
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return None
        return payload if isinstance(payload, dict) else None

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002 (BaseHTTPRequestHandler API)
        sys.stderr.write(f"{self.address_string()} - {format % args}\n")

    def do_GET(self) -> None:  # noqa: N802 (BaseHTTPRequestHandler API)
        parsed = urlparse(self.path)
        engine = self.server.engine
        if parsed.path in {"/", "/index.html"}:
            self._send_bytes("text/html; charset=utf-8", render_index().encode("utf-8"))
            return
        if parsed.path == "/healthz":
            self._send_json(HTTPStatus.OK, {"ok": True, "ts": int(time.time())})
            return
        if parsed.path == "/api/state":
            self._send_json(HTTPStatus.OK, engine.session.snapshot())
            return

        asset_route = _parse_asset_path(parsed.path)
        if asset_route and asset_route[1] in {"image", "download"}:
            category, action = asset_route
            data = engine.asset_bytes(category)
            if data is None:
                self._send_json(HTTPStatus.NOT_FOUND, {"error": "asset not ready"})
                return
            headers = {"Cache-Control": "no-store"}
            if action == "download":
                filename = category_spec(category).download_name
                headers["Content-Disposition"] = f'attachment; filename="{filename}"'
            self._send_bytes("image/png", data, headers)
            return

        self._send_json(HTTPStatus.NOT_FOUND, {"error": "not found"})

    def do_POST(self) -> None:  # noqa: N802 (BaseHTTPRequestHandler API)
        parsed = urlparse(self.path)
        engine = self.server.engine
        req = self._read_json_body()
        if req is None:
            self._send_json(HTTPStatus.BAD_REQUEST, {"error": "invalid json"})
            return

        if parsed.path == "/api/reference":
            image = req.get("image")
            if not isinstance(image, str) or not image.strip():
                self._send_json(HTTPStatus.BAD_REQUEST, {"error": "missing image"})
                return
            engine.set_reference(image)
            self._send_json(HTTPStatus.OK, engine.session.snapshot())
            return

        if parsed.path == "/api/note":
            note = req.get("note", "")
            if not isinstance(note, str):
                self._send_json(HTTPStatus.BAD_REQUEST, {"error": "note must be a string"})
                return
            engine.set_note(note)
            self._send_json(HTTPStatus.OK, engine.session.snapshot())
            return

        if parsed.path == "/api/design":
            with self.server.design_lock:
                if not engine.session.reference_image:
                    self._send_json(HTTPStatus.BAD_REQUEST, {"error": "upload a reference image first"})
                    return
                if engine.session.analyzing:
                    self._send_json(HTTPStatus.CONFLICT, {"error": "analysis already in progress"})
                    return
                engine.session.begin_analysis()
                worker = threading.Thread(target=engine.start_design_process, daemon=True)
                worker.start()
            self._send_json(HTTPStatus.ACCEPTED, engine.session.snapshot())
            return

        asset_route = _parse_asset_path(parsed.path)
        if asset_route and asset_route[1] == "retry":
            category = asset_route[0]
            if engine.regenerate(category) is None:
                self._send_json(HTTPStatus.CONFLICT, {"error": "no style analysis yet"})
                return
            self._send_json(HTTPStatus.ACCEPTED, engine.session.snapshot())
            return

        self._send_json(HTTPStatus.NOT_FOUND, {"error": "not found"})


def serve(engine: DesignerEngine, host: str = "127.0.0.1", port: int = 8765) -> int:
    server = GalleryServer((host, port), engine)
    sys.stderr.write(f"Designer gallery listening on http://{host}:{server.server_port}\n")
    sys.stderr.write(f"Session dir: {engine.run_dir}\n")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        sys.stderr.write("Shutting down...\n")
    finally:
        server.server_close()
        engine.close()
    return 0
