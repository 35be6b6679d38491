from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from designer_engine.assets.categories import AssetCategory, category_spec
from designer_engine.assets.generator import build_asset_request
from designer_engine.providers.dryrun import DryRunProvider
from designer_engine.style.analysis import analyze_style


def _png_data_uri(color: tuple[int, int, int]) -> str:
    buf = io.BytesIO()
    Image.new("RGB", (16, 16), color).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def test_dryrun_analysis_reports_average_color() -> None:
    description = analyze_style(_png_data_uri((200, 40, 30)), provider=DryRunProvider())
    assert "#c8281e" in description.text
    assert "warm" in description.text
    assert len(description.keywords) == 10


def test_dryrun_analysis_tolerates_non_image_bytes() -> None:
    payload = "data:image/png;base64," + base64.b64encode(b"not an image").decode("ascii")
    description = analyze_style(payload, provider=DryRunProvider())
    assert description.text.startswith("dryrun palette anchored on #")


@pytest.mark.parametrize("category", list(AssetCategory))
def test_dryrun_generate_uses_category_canvas(category: AssetCategory) -> None:
    response = DryRunProvider().generate(build_asset_request(category, "style", ""))
    spec = category_spec(category)
    with Image.open(io.BytesIO(response.image.data)) as image:
        assert image.size == (spec.width, spec.height)
        assert image.format == "PNG"
    assert response.image.width == spec.width
    assert response.image.height == spec.height
    assert response.provider_response["dryrun"] is True
