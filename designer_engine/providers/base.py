"""Provider base classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol

from ..assets.categories import AssetCategory


NO_IMAGE_MESSAGE = "Generation produced no image. Check the API key or the input."


class NoImageProducedError(RuntimeError):
    def __init__(self, message: str = NO_IMAGE_MESSAGE) -> None:
        super().__init__(message)


@dataclass
class AnalysisRequest:
    image: str
    instruction: str
    model: str | None = None


@dataclass
class AnalysisResponse:
    text: str | None
    provider_request: Mapping[str, Any]
    provider_response: Mapping[str, Any]


@dataclass
class AssetRequest:
    category: AssetCategory
    prompt: str
    aspect_ratio: str
    reference_image: str | None = None
    model: str | None = None


@dataclass
class GeneratedImage:
    data: bytes
    mime_type: str | None = None
    width: int | None = None
    height: int | None = None


@dataclass
class ProviderResponse:
    image: GeneratedImage
    provider_request: Mapping[str, Any]
    provider_response: Mapping[str, Any]
    warnings: list[str]


class DesignProvider(Protocol):
    name: str

    def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        ...

    def generate(self, request: AssetRequest) -> ProviderResponse:
        ...


class ProviderRegistry:
    def __init__(self, providers: Iterable[DesignProvider]) -> None:
        self._providers = {provider.name: provider for provider in providers}

    def get(self, name: str) -> DesignProvider | None:
        return self._providers.get(name)
