"""Gemini provider."""

from __future__ import annotations

import io
import os
from typing import Any, Mapping, Sequence

from google import genai
from google.genai import types
from PIL import Image

from .base import (
    AnalysisRequest,
    AnalysisResponse,
    AssetRequest,
    GeneratedImage,
    NoImageProducedError,
    ProviderResponse,
)
from .google_utils import data_uri_mime, decode_image_payload

DEFAULT_ANALYSIS_MODEL = "gemini-3-flash-preview"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"


class GeminiProvider:
    name = "gemini"

    def __init__(self, client: Any | None = None) -> None:
        self._client = client

    def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        client = self._resolve_client()
        model = request.model or os.getenv("DESIGNER_ANALYSIS_MODEL") or DEFAULT_ANALYSIS_MODEL
        contents = [_image_part(request.image), types.Part(text=request.instruction)]
        raw_request = {
            "model": model,
            "parts": _describe_parts(contents),
        }
        response = client.models.generate_content(model=model, contents=contents)
        text = getattr(response, "text", None)
        raw_response: dict[str, Any] = {"model": model, "text_chars": len(text or "")}
        usage_summary = _extract_usage_summary(response)
        if usage_summary:
            raw_response["usage"] = usage_summary
        return AnalysisResponse(
            text=text if isinstance(text, str) else None,
            provider_request=raw_request,
            provider_response=raw_response,
        )

    def generate(self, request: AssetRequest) -> ProviderResponse:
        client = self._resolve_client()
        model = request.model or os.getenv("DESIGNER_IMAGE_MODEL") or DEFAULT_IMAGE_MODEL
        aspect_ratio = request.aspect_ratio
        content_config = _build_content_config(aspect_ratio=aspect_ratio)
        contents = _build_message_parts(request)
        raw_request = {
            "model": model,
            "category": request.category.value,
            "prompt": request.prompt,
            "aspect_ratio": aspect_ratio,
            "parts": _describe_parts(contents),
        }

        response = client.models.generate_content(model=model, contents=contents, config=content_config)

        candidates = getattr(response, "candidates", []) or []
        raw_response: dict[str, Any] = {"model": model, "candidates": len(candidates)}
        usage_summary = _extract_usage_summary(response)
        if usage_summary:
            raw_response["usage"] = usage_summary
        blob = _extract_first_image(candidates)
        if blob is None:
            raise NoImageProducedError()
        width, height = _image_dims(blob["bytes"])
        return ProviderResponse(
            image=GeneratedImage(
                data=blob["bytes"],
                mime_type=blob.get("mime_type"),
                width=width,
                height=height,
            ),
            provider_request=raw_request,
            provider_response=raw_response,
            warnings=[],
        )

    def _resolve_client(self) -> Any:
        if self._client is not None:
            return self._client
        # Key is looked up per call; a missing key surfaces as the SDK's own error.
        return genai.Client(api_key=_api_key())


def _api_key() -> str | None:
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY")


def _build_content_config(*, aspect_ratio: str) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        response_modalities=["IMAGE"],
        image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
    )


def _image_part(value: str) -> types.Part:
    return types.Part(
        inline_data=types.Blob(
            data=decode_image_payload(value),
            mime_type=data_uri_mime(value),
        )
    )


def _build_message_parts(request: AssetRequest) -> list[types.Part]:
    parts: list[types.Part] = []
    if request.reference_image:
        parts.append(_image_part(request.reference_image))
    parts.append(types.Part(text=request.prompt))
    return parts


def _describe_parts(parts: Sequence[Any]) -> list[dict[str, Any]]:
    entries: list[dict[str, Any]] = []
    for idx, part in enumerate(parts):
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None:
            data = getattr(inline_data, "data", None) or b""
            entries.append(
                {
                    "part_type": "image",
                    "part_index": idx,
                    "mime_type": getattr(inline_data, "mime_type", None),
                    "byte_count": len(data),
                }
            )
            continue
        text = str(getattr(part, "text", "") or "")
        entries.append({"part_type": "text", "part_index": idx, "text_chars": len(text)})
    return entries


def _extract_first_image(candidates: Sequence[Any]) -> dict[str, Any] | None:
    if not candidates:
        return None
    candidate = candidates[0]
    content = getattr(candidate, "content", None)
    parts = getattr(content, "parts", None) or getattr(candidate, "parts", None) or []
    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        data = getattr(inline_data, "data", None) if inline_data else None
        if not data:
            continue
        if isinstance(data, str):
            data = data.encode("latin1")
        if isinstance(data, (bytes, bytearray)):
            return {"bytes": bytes(data), "mime_type": getattr(inline_data, "mime_type", None)}
    return None


def _image_dims(data: bytes) -> tuple[int | None, int | None]:
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.size
    except OSError:
        return None, None


def _to_dict(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(k): _to_dict(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_dict(v) for v in value]
    if hasattr(value, "model_dump"):
        return _to_dict(value.model_dump())
    if hasattr(value, "__dict__"):
        return {str(k): _to_dict(v) for k, v in value.__dict__.items() if not str(k).startswith("_")}
    return str(value)


def _extract_usage_summary(response: Any) -> Mapping[str, Any] | None:
    if response is None:
        return None
    raw = getattr(response, "usage_metadata", None)
    mapped = _to_dict(raw)
    if isinstance(mapped, Mapping):
        return {k: v for k, v in mapped.items() if v is not None}
    return None
