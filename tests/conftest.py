"""Shared fixtures for fontshelf tests."""

from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from fontshelf.schema import FontMetrics, FontRecord
from fontshelf.store import FontStore

# -- Font file builder ------------------------------------------------------

GLYPH_ORDER = [".notdef", "A", "B", "space"]

LIGA_AND_KERN = """
languagesystem DFLT dflt;
feature liga { sub A B by A; } liga;
feature kern { pos A B -50; } kern;
"""


def _box_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((100, 0))
    pen.lineTo((100, 700))
    pen.lineTo((500, 700))
    pen.lineTo((500, 0))
    pen.closePath()
    return pen.glyph()


def make_font(
    path: Path,
    family: str,
    style: str = "Regular",
    *,
    typographic_family: str | None = None,
    typographic_subfamily: str | None = None,
    weight: int = 400,
    fixed_pitch: bool = False,
    italic_angle: float = 0.0,
    features: str | None = None,
) -> Path:
    """Build a small valid TrueType font at ``path`` and return the path."""
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(GLYPH_ORDER)
    fb.setupCharacterMap({ord("A"): "A", ord("B"): "B", ord(" "): "space"})
    fb.setupGlyf({name: _box_glyph() for name in GLYPH_ORDER})
    fb.setupHorizontalMetrics({name: (600, 100) for name in GLYPH_ORDER})
    fb.setupHorizontalHeader(ascent=800, descent=-200)

    names = {
        "familyName": family,
        "styleName": style,
        "fullName": f"{family} {style}",
        "psName": f"{family}-{style}".replace(" ", ""),
        "version": "Version 1.000",
        "copyright": "Copyright (c) Test Foundry",
    }
    if typographic_family:
        names["typographicFamily"] = typographic_family
    if typographic_subfamily:
        names["typographicSubfamily"] = typographic_subfamily
    fb.setupNameTable(names)

    fb.setupOS2(usWeightClass=weight)
    fb.setupPost(isFixedPitch=int(fixed_pitch), italicAngle=italic_angle)
    if features:
        fb.addOpenTypeFeatures(features)

    path.parent.mkdir(parents=True, exist_ok=True)
    fb.save(str(path))
    return path


def make_corrupt_font(path: Path) -> Path:
    """Write a file with a font extension but no font inside."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"this is definitely not a font file")
    return path


def make_record(path: str, family: str, subfamily: str = "Regular", **overrides) -> FontRecord:
    """An unsaved FontRecord with sensible defaults."""
    data = {
        "path": path,
        "file_hash": "0" * 64,
        "family": family,
        "subfamily": subfamily,
        "category": "Sans Serif",
        "subcategory": "Neo-Grotesque",
        "metrics": FontMetrics(units_per_em=1000, glyph_count=4, features=["kern"]),
    }
    data.update(overrides)
    return FontRecord(**data)


# -- Fixtures ---------------------------------------------------------------


@pytest.fixture()
def store():
    """An in-memory FontStore, closed after the test."""
    font_store = FontStore(":memory:")
    yield font_store
    font_store.close()


@pytest.fixture()
def font_dir(tmp_path):
    """A directory holding a small Inter-like family plus a nested mono font."""
    root = tmp_path / "fonts"
    make_font(root / "Inter-Regular.ttf", "Inter", "Regular")
    make_font(root / "Inter-Bold.ttf", "Inter Bold", "Bold", weight=700)
    make_font(root / "Inter-Italic.ttf", "Inter", "Italic", italic_angle=-10.0)
    make_font(root / "nested" / "deeper" / "Fira Code.ttf", "Fira Code", "Regular", fixed_pitch=True)
    return root


@pytest.fixture()
def feature_font(tmp_path):
    """A font with liga (GSUB) and kern (GPOS) features."""
    return make_font(tmp_path / "Featured.ttf", "Featured Sans", "Regular", features=LIGA_AND_KERN)
