"""Family/subfamily name normalization.

The helpers here are applied by ``extractor.normalize`` in a fixed order:
clean, fold a repeated subfamily suffix, then strip qualifier suffixes.
Grouping by family depends on that order.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache

from fontshelf.config import LICENSE_SUFFIXES, MONOSPACE_TERMS, STYLE_SUFFIXES


class FamilyPolicy(str, Enum):
    """Which trailing qualifiers are folded out of family names."""

    LICENSE = "license"
    STYLE_WORDS = "style-words"

    @property
    def suffixes(self) -> tuple[str, ...]:
        if self is FamilyPolicy.STYLE_WORDS:
            return LICENSE_SUFFIXES + STYLE_SUFFIXES
        return LICENSE_SUFFIXES


def clean_string(value: object) -> str:
    """Drop NUL characters and surrounding whitespace; non-strings become ""."""
    if not isinstance(value, str):
        return ""
    return value.replace("\0", "").strip()


def fold_subfamily_suffix(family: str, subfamily: str) -> str:
    """Strip a trailing " <subfamily>" from family, case-insensitively.

    "Arial Bold" + "Bold" -> "Arial"
    """
    if subfamily and family.lower().endswith(" " + subfamily.lower()):
        return family[: -len(subfamily) - 1].strip()
    return family


@lru_cache(maxsize=8)
def _suffix_patterns(suffixes: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    # Longest first so "Personal Use Only" wins over "Personal Use"
    ordered = sorted(suffixes, key=len, reverse=True)
    return tuple(
        re.compile(r"[\s\-–—]+" + re.escape(suffix) + r"\s*$", re.IGNORECASE)
        for suffix in ordered
    )


def strip_qualifiers(family: str, suffixes: tuple[str, ...] = LICENSE_SUFFIXES) -> str:
    """Repeatedly strip known trailing qualifiers from a family name.

    Each qualifier must be separated from the rest of the name by whitespace
    or a dash. A strip that would leave an empty name is not applied.

    "Roboto Condensed Trial" -> "Roboto Condensed"
    "Brand - Demo Free"      -> "Brand"
    """
    patterns = _suffix_patterns(tuple(suffixes))
    stripped = True
    while stripped:
        stripped = False
        for pattern in patterns:
            candidate = pattern.sub("", family).strip()
            if candidate and candidate != family:
                family = candidate
                stripped = True
                break
    return family


def has_monospace_term(*names: str) -> bool:
    """True when any of the names mentions a monospace-indicating term."""
    text = " ".join(names).lower()
    return any(term in text for term in MONOSPACE_TERMS)
