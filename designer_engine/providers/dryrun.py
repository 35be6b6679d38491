"""Dry-run design provider (offline)."""

from __future__ import annotations

import hashlib
import io
import time
from typing import Any

from PIL import Image, ImageDraw, ImageFont

from ..assets.categories import category_spec
from .base import AnalysisRequest, AnalysisResponse, AssetRequest, GeneratedImage, ProviderResponse
from .google_utils import decode_image_payload


class DryRunProvider:
    name = "dryrun"

    def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        start = time.monotonic()
        color = _average_color(decode_image_payload(request.image))
        hex_color = "#{:02x}{:02x}{:02x}".format(*color)
        text = (
            f"dryrun palette anchored on {hex_color} with {_tone_word(color)} tones, "
            "smooth gradients, soft studio lighting and a clean minimal composition"
        )
        return AnalysisResponse(
            text=text,
            provider_request={"instruction_chars": len(request.instruction)},
            provider_response={"elapsed": time.monotonic() - start, "dryrun": True},
        )

    def generate(self, request: AssetRequest) -> ProviderResponse:
        start = time.monotonic()
        spec = category_spec(request.category)
        width, height = spec.width, spec.height
        image = Image.new("RGB", (width, height), _color_from_prompt(request.prompt))
        draw = ImageDraw.Draw(image)
        draw.text((20, 20), f"dryrun\n{spec.label}", fill=(255, 255, 255), font=ImageFont.load_default())
        buf = io.BytesIO()
        image.save(buf, format="PNG")
        provider_request: dict[str, Any] = {
            "category": request.category.value,
            "prompt": request.prompt,
            "aspect_ratio": request.aspect_ratio,
            "has_reference": bool(request.reference_image),
        }
        provider_response: dict[str, Any] = {
            "elapsed": time.monotonic() - start,
            "dryrun": True,
        }
        return ProviderResponse(
            image=GeneratedImage(data=buf.getvalue(), mime_type="image/png", width=width, height=height),
            provider_request=provider_request,
            provider_response=provider_response,
            warnings=[],
        )


def _average_color(data: bytes) -> tuple[int, int, int]:
    try:
        with Image.open(io.BytesIO(data)) as image:
            pixel = image.convert("RGB").resize((1, 1)).getpixel((0, 0))
            return int(pixel[0]), int(pixel[1]), int(pixel[2])
    except OSError:
        digest = hashlib.sha256(data).digest()
        return digest[0], digest[1], digest[2]


def _tone_word(color: tuple[int, int, int]) -> str:
    r, g, b = color
    if max(color) - min(color) < 24:
        return "neutral"
    if r >= g and r >= b:
        return "warm"
    if b >= r and b >= g:
        return "cool"
    return "natural"


def _color_from_prompt(prompt: str) -> tuple[int, int, int]:
    digest = hashlib.sha256(prompt.encode("utf-8")).digest()
    return digest[0], digest[1], digest[2]
