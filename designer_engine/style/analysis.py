"""Style analysis of a reference image.

The vision model is asked for one paragraph covering palette, materials,
motifs and composition. That paragraph is reused verbatim as the style clause
of every asset prompt, so nothing here rewrites or trims the model output.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..providers.base import AnalysisRequest, AnalysisResponse, DesignProvider

FALLBACK_STYLE_TEXT = "modern professional design style"
KEYWORD_LIMIT = 10


def analysis_instruction() -> str:
    return (
        "As a professional visual designer, analyze the style of this image precisely.\n"
        "Focus on:\n"
        "1. Color scheme (primary, secondary and accent colors).\n"
        "2. Materials and texture (brushed metal, fluid neon, frosted glass, sparkling gems, etc.).\n"
        "3. Visual symbols and decorative elements.\n"
        "4. Composition style and lighting mood (cyberpunk, minimalist luxury, anime, futurism, etc.).\n"
        "Summarize the style in one concise paragraph that can be used as a prompt for later AI image generation."
    )


@dataclass(frozen=True)
class StyleDescription:
    text: str
    keywords: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str | None) -> "StyleDescription":
        resolved = text if text else FALLBACK_STYLE_TEXT
        return cls(text=resolved, keywords=tuple(resolved.split()[:KEYWORD_LIMIT]))

    def to_dict(self) -> dict[str, object]:
        return {"text": self.text, "keywords": list(self.keywords)}


def request_analysis(image: str, provider: DesignProvider, model: str | None = None) -> AnalysisResponse:
    return provider.analyze(AnalysisRequest(image=image, instruction=analysis_instruction(), model=model))


def analyze_style(image: str, provider: DesignProvider | None = None) -> StyleDescription:
    if provider is None:
        from ..providers.gemini import GeminiProvider

        provider = GeminiProvider()
    response = request_analysis(image, provider)
    return StyleDescription.from_text(response.text)
