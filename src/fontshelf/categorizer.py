"""Heuristic font categorization into a fixed taxonomy.

Keyword sets overlap between tiers, so the order of the checks in
``categorize`` decides ties. All tests are case-insensitive substring
matches on "family subfamily".
"""

from __future__ import annotations

from typing import NamedTuple

from fontshelf.config import (
    BLACKLETTER_KEYWORDS,
    CURSIVE_KEYWORDS,
    DIDONE_KEYWORDS,
    DISPLAY_KEYWORDS,
    GEOMETRIC_KEYWORDS,
    GROTESQUE_KEYWORDS,
    HANDWRITING_KEYWORDS,
    HUMANIST_KEYWORDS,
    MONOSPACE_TERMS,
    OLD_STYLE_KEYWORDS,
    SANS_KEYWORDS,
    SLAB_KEYWORDS,
    STENCIL_KEYWORDS,
    TAXONOMY,
)


class Category(NamedTuple):
    category: str
    subcategory: str


DEFAULT_CATEGORY = Category("Sans Serif", "Neo-Grotesque")


def _has_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(kw in text for kw in keywords)


def categorize(family: str, subfamily: str = "", monospace: bool | int = False) -> Category:
    """Map normalized font names to (category, subcategory).

    Every input is classified; unmatched names fall back to
    Sans Serif / Neo-Grotesque.
    """
    text = f"{family or ''} {subfamily or ''}".lower()

    if monospace or _has_any(text, MONOSPACE_TERMS):
        return Category("Monospace", "Code")

    # Cursive before Display so script-style display faces stay cursive
    if _has_any(text, HANDWRITING_KEYWORDS):
        return Category("Cursive", "Handwriting")
    if _has_any(text, CURSIVE_KEYWORDS):
        return Category("Cursive", "Script")

    if _has_any(text, BLACKLETTER_KEYWORDS):
        return Category("Display", "Blackletter")
    if _has_any(text, STENCIL_KEYWORDS):
        return Category("Display", "Stencil")
    if _has_any(text, DISPLAY_KEYWORDS):
        return Category("Display", "Decorative")

    if "serif" in text and "sans" not in text:
        if _has_any(text, SLAB_KEYWORDS):
            return Category("Serif", "Slab Serif")
        if _has_any(text, OLD_STYLE_KEYWORDS):
            return Category("Serif", "Old Style")
        if _has_any(text, DIDONE_KEYWORDS):
            return Category("Serif", "Didone")
        return Category("Serif", "Transitional")

    if _has_any(text, SANS_KEYWORDS):
        if _has_any(text, GEOMETRIC_KEYWORDS):
            return Category("Sans Serif", "Geometric")
        if _has_any(text, HUMANIST_KEYWORDS):
            return Category("Sans Serif", "Humanist")
        if _has_any(text, GROTESQUE_KEYWORDS):
            return Category("Sans Serif", "Grotesque")
        return Category("Sans Serif", "Neo-Grotesque")

    return DEFAULT_CATEGORY


def is_valid(category: str | None, subcategory: str | None) -> bool:
    """True when the pair belongs to the fixed taxonomy."""
    return category in TAXONOMY and subcategory in TAXONOMY[category]
