"""Category-specific prompt templates for asset generation."""

from __future__ import annotations

from .categories import AssetCategory, category_spec


def combined_context(style_text: str, user_note: str) -> str:
    style = str(style_text or "").strip()
    note = str(user_note or "").strip()
    return f"[Core style]: {style}. [User requirements]: {note}."


def build_asset_prompt(category: AssetCategory | str, style_text: str, user_note: str = "") -> str:
    """Assemble the full text prompt for one category.

    Layout: headline, rules heading, numbered hard constraints, the combined
    style/note context, then the finish directive. Constraint phrases are
    inserted verbatim so they can be checked against the category metadata.
    """
    spec = category_spec(category)
    lines = [spec.headline, spec.rules_heading]
    for idx, constraint in enumerate(spec.constraints, start=1):
        lines.append(f"{idx}. {constraint}")
    lines.append(combined_context(style_text, user_note))
    lines.append(spec.finish)
    return "\n".join(lines)
