from __future__ import annotations

import base64
import io
import json
import threading
import time
from pathlib import Path
from urllib.error import HTTPError
from urllib.request import Request, urlopen

import pytest
from PIL import Image

from designer_engine.engine import DesignerEngine
from designer_engine.providers import DryRunProvider
from designer_engine.providers.base import ProviderRegistry
from designer_engine.server import GalleryServer


def _png_data_uri() -> str:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (20, 60, 200)).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture()
def gallery(tmp_path: Path):
    engine = DesignerEngine(tmp_path / "session", provider="dryrun")
    server = GalleryServer(("127.0.0.1", 0), engine)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    base_url = f"http://127.0.0.1:{server.server_port}"
    try:
        yield base_url, engine
    finally:
        server.shutdown()
        server.server_close()
        engine.close()


def _get(url: str) -> tuple[int, dict[str, str], bytes]:
    with urlopen(url, timeout=5) as response:
        return response.status, dict(response.headers), response.read()


def _post(url: str, payload: dict | None = None) -> tuple[int, dict]:
    body = json.dumps(payload or {}).encode("utf-8")
    req = Request(url, data=body, headers={"Content-Type": "application/json"}, method="POST")
    try:
        with urlopen(req, timeout=5) as response:
            return response.status, json.loads(response.read().decode("utf-8"))
    except HTTPError as exc:
        return exc.code, json.loads(exc.read().decode("utf-8"))


def _wait_for(base_url: str, predicate, timeout_s: float = 10.0) -> dict:
    deadline = time.monotonic() + timeout_s
    while True:
        _, _, raw = _get(f"{base_url}/api/state")
        state = json.loads(raw.decode("utf-8"))
        if predicate(state) or time.monotonic() > deadline:
            return state
        time.sleep(0.05)


def test_index_lists_all_categories(gallery) -> None:
    base_url, _ = gallery
    status, headers, body = _get(f"{base_url}/")
    html = body.decode("utf-8")
    assert status == 200
    assert headers["Content-Type"].startswith("text/html")
    for value in ("AVATAR_FRAME", "ENTRANCE_SHOW", "MEDAL", "WALLPAPER"):
        assert f"data-retry='{value}'" in html


def test_design_requires_reference(gallery) -> None:
    base_url, _ = gallery
    status, payload = _post(f"{base_url}/api/design")
    assert status == 400
    assert "reference" in payload["error"]


def test_retry_before_analysis_conflicts(gallery) -> None:
    base_url, _ = gallery
    status, _ = _post(f"{base_url}/api/assets/MEDAL/retry")
    assert status == 409


def test_unknown_category_is_not_found(gallery) -> None:
    base_url, _ = gallery
    status, _ = _post(f"{base_url}/api/assets/POSTER/retry")
    assert status == 404


def test_full_design_flow_and_download(gallery) -> None:
    base_url, _ = gallery
    status, _ = _post(f"{base_url}/api/reference", {"image": _png_data_uri()})
    assert status == 200
    status, state = _post(f"{base_url}/api/note", {"note": "art deco"})
    assert state["note"] == "art deco"

    status, _ = _post(f"{base_url}/api/design")
    assert status == 202

    state = _wait_for(
        base_url,
        lambda s: all(asset["status"] == "success" for asset in s["assets"].values()),
    )
    assert state["analysis"]["text"].startswith("dryrun palette")
    assert all(asset["status"] == "success" for asset in state["assets"].values())

    status, headers, body = _get(f"{base_url}/api/assets/WALLPAPER/download")
    assert status == 200
    assert headers["Content-Type"] == "image/png"
    assert 'filename="design-WALLPAPER.png"' in headers["Content-Disposition"]
    with Image.open(io.BytesIO(body)) as image:
        assert image.size == (720, 1280)

    status, _ = _post(f"{base_url}/api/assets/MEDAL/retry")
    assert status == 202
    state = _wait_for(base_url, lambda s: s["assets"]["MEDAL"]["status"] == "success")
    assert state["assets"]["MEDAL"]["generation"] == 2


def test_image_not_ready_is_not_found(gallery) -> None:
    base_url, _ = gallery
    with pytest.raises(HTTPError) as excinfo:
        _get(f"{base_url}/api/assets/MEDAL/image")
    assert excinfo.value.code == 404


def test_invalid_json_is_rejected(gallery) -> None:
    base_url, _ = gallery
    req = Request(f"{base_url}/api/note", data=b"{not json", headers={"Content-Type": "application/json"}, method="POST")
    with pytest.raises(HTTPError) as excinfo:
        urlopen(req, timeout=5)
    assert excinfo.value.code == 400


def test_second_design_while_analyzing_conflicts(tmp_path: Path) -> None:
    analysis_started = threading.Event()
    release = threading.Event()

    class SlowAnalysisProvider(DryRunProvider):
        def analyze(self, request):
            analysis_started.set()
            release.wait(timeout=10)
            return super().analyze(request)

    engine = DesignerEngine(
        tmp_path / "session",
        provider="dryrun",
        provider_registry=ProviderRegistry([SlowAnalysisProvider()]),
    )
    server = GalleryServer(("127.0.0.1", 0), engine)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    base_url = f"http://127.0.0.1:{server.server_port}"
    try:
        _post(f"{base_url}/api/reference", {"image": _png_data_uri()})
        status, _ = _post(f"{base_url}/api/design")
        assert status == 202
        assert analysis_started.wait(timeout=5)

        status, payload = _post(f"{base_url}/api/design")
        assert status == 409
        assert "error" in payload

        release.set()
        state = _wait_for(
            base_url,
            lambda s: all(asset["status"] == "success" for asset in s["assets"].values()),
        )
        assert state["analyzing"] is False
        assert all(asset["generation"] == 1 for asset in state["assets"].values())
    finally:
        release.set()
        server.shutdown()
        server.server_close()
        engine.close(timeout=5)
