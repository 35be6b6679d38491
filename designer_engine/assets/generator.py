"""Asset generation requests."""

from __future__ import annotations

from ..providers.base import AssetRequest, DesignProvider, ProviderResponse
from ..providers.google_utils import to_png_data_uri
from .categories import AssetCategory, category_spec
from .prompts import build_asset_prompt


def build_asset_request(
    category: AssetCategory | str,
    style_text: str,
    user_note: str = "",
    reference_image: str | None = None,
    model: str | None = None,
) -> AssetRequest:
    spec = category_spec(category)
    return AssetRequest(
        category=spec.category,
        prompt=build_asset_prompt(spec.category, style_text, user_note),
        aspect_ratio=spec.aspect_ratio,
        reference_image=reference_image or None,
        model=model,
    )


def request_asset(request: AssetRequest, provider: DesignProvider) -> ProviderResponse:
    return provider.generate(request)


def generate_asset(
    category: AssetCategory | str,
    style_text: str,
    user_note: str = "",
    reference_image: str | None = None,
    provider: DesignProvider | None = None,
) -> str:
    """Generate one asset and return it as a PNG data URI."""
    if provider is None:
        from ..providers.gemini import GeminiProvider

        provider = GeminiProvider()
    response = request_asset(build_asset_request(category, style_text, user_note, reference_image), provider)
    return to_png_data_uri(response.image.data)
