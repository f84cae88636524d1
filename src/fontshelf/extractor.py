"""Font metadata extraction: fontTools parsing + name/field normalization.

``read_font`` is the only function that touches the binary file. Everything
after it (``normalize``) is pure and works on a ``RawFontInfo``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError

from fontshelf.config import DEFAULT_WIDTH
from fontshelf.errors import FileAccessError, ParseError, UnsupportedFormatError
from fontshelf.naming import (
    FamilyPolicy,
    clean_string,
    fold_subfamily_suffix,
    has_monospace_term,
    strip_qualifiers,
)
from fontshelf.schema import FontMetrics, clamp_weight

logger = logging.getLogger(__name__)

# name table IDs
NAME_COPYRIGHT = 0
NAME_FAMILY = 1
NAME_SUBFAMILY = 2
NAME_FULL = 4
NAME_VERSION = 5
NAME_POSTSCRIPT = 6
NAME_TYPO_FAMILY = 16
NAME_TYPO_SUBFAMILY = 17

_NO_REQUIRED_FEATURE = 0xFFFF


@dataclass
class RawFontInfo:
    """Fields read from a font file, before any normalization."""

    family: str | None = None
    subfamily: str | None = None
    typographic_family: str | None = None
    typographic_subfamily: str | None = None
    full_name: str | None = None
    postscript_name: str | None = None
    version: str | None = None
    copyright: str | None = None
    weight_class: int | None = None
    width_class: int | None = None
    italic_angle: float = 0.0
    is_fixed_pitch: bool = False
    units_per_em: int | None = None
    glyph_count: int = 0
    character_set: list[int] = field(default_factory=list)
    feature_tags: list[str] = field(default_factory=list)
    raw_feature_tags: list[str] = field(default_factory=list)


@dataclass
class NormalizedFont:
    """Normalized identity fields ready to become a FontRecord."""

    family: str
    subfamily: str
    full_name: str
    postscript_name: str
    weight: int
    width: int
    italic: bool
    monospace: bool
    version: str
    copyright: str
    metrics: FontMetrics


# -- Reading ---------------------------------------------------------------------------


def _get_name_entry(font: TTFont, name_id: int) -> str | None:
    """Extract a string from the font's name table by nameID."""
    if "name" not in font:
        return None
    name_table = font["name"]
    record = name_table.getName(name_id, 3, 1, 0x0409)  # Windows, Unicode BMP, English
    if record is None:
        record = name_table.getName(name_id, 1, 0, 0)  # Mac, Roman, English
    if record is None:
        return name_table.getDebugName(name_id)
    return record.toUnicode()


def _layout_feature_tags(font: TTFont, table_tag: str) -> tuple[set[str], set[str]]:
    """Return (tags reachable from the script list, all FeatureList tags) for GSUB/GPOS."""
    if table_tag not in font:
        return set(), set()
    table = font[table_tag].table
    feature_list = getattr(table, "FeatureList", None)
    records = feature_list.FeatureRecord if feature_list is not None else []
    raw = {record.FeatureTag for record in records}

    reachable: set[str] = set()
    script_list = getattr(table, "ScriptList", None)
    if script_list is None:
        return reachable, raw

    for script_record in script_list.ScriptRecord:
        script = script_record.Script
        lang_systems = [lang.LangSys for lang in script.LangSysRecord]
        if script.DefaultLangSys is not None:
            lang_systems.append(script.DefaultLangSys)
        for lang_sys in lang_systems:
            indices = list(lang_sys.FeatureIndex)
            if lang_sys.ReqFeatureIndex != _NO_REQUIRED_FEATURE:
                indices.append(lang_sys.ReqFeatureIndex)
            for index in indices:
                if 0 <= index < len(records):
                    reachable.add(records[index].FeatureTag)
    return reachable, raw


def _read_tables(font: TTFont) -> RawFontInfo:
    info = RawFontInfo(
        family=_get_name_entry(font, NAME_FAMILY),
        subfamily=_get_name_entry(font, NAME_SUBFAMILY),
        typographic_family=_get_name_entry(font, NAME_TYPO_FAMILY),
        typographic_subfamily=_get_name_entry(font, NAME_TYPO_SUBFAMILY),
        full_name=_get_name_entry(font, NAME_FULL),
        postscript_name=_get_name_entry(font, NAME_POSTSCRIPT),
        version=_get_name_entry(font, NAME_VERSION),
        copyright=_get_name_entry(font, NAME_COPYRIGHT),
    )

    os2 = font.get("OS/2")
    if os2 is not None:
        info.weight_class = getattr(os2, "usWeightClass", None)
        info.width_class = getattr(os2, "usWidthClass", None)

    post = font.get("post")
    if post is not None:
        info.italic_angle = float(getattr(post, "italicAngle", 0) or 0)
        info.is_fixed_pitch = bool(getattr(post, "isFixedPitch", 0))

    if "head" in font:
        info.units_per_em = font["head"].unitsPerEm

    if "maxp" in font:
        info.glyph_count = font["maxp"].numGlyphs
    else:
        info.glyph_count = len(font.getGlyphOrder())

    cmap = font.getBestCmap() or {}
    info.character_set = sorted(cmap)

    primary: set[str] = set()
    fallback: set[str] = set()
    for table_tag in ("GSUB", "GPOS"):
        reachable, raw = _layout_feature_tags(font, table_tag)
        primary |= reachable
        fallback |= raw
    info.feature_tags = sorted(primary)
    info.raw_feature_tags = sorted(fallback)
    return info


def read_font(font_path: str | Path) -> RawFontInfo:
    """Open a font with fontTools and read its identity fields.

    Collections (.ttc/.otc) are read from their first face.

    Raises:
        FileAccessError: The file cannot be opened.
        UnsupportedFormatError: fontTools does not recognize the container.
        ParseError: The container opened but a table could not be read.
    """
    try:
        font = TTFont(str(font_path), fontNumber=0)
    except OSError as e:
        raise FileAccessError(font_path, f"cannot open font ({e})", e) from e
    except TTLibError as e:
        raise UnsupportedFormatError(font_path, f"unsupported font format ({e})", e) from e
    except Exception as e:
        raise ParseError(font_path, f"cannot parse font ({e})", e) from e

    try:
        return _read_tables(font)
    except OSError as e:
        raise FileAccessError(font_path, f"cannot read font ({e})", e) from e
    except Exception as e:
        raise ParseError(font_path, f"cannot parse font tables ({e})", e) from e
    finally:
        font.close()


# -- Normalization ---------------------------------------------------------------------


def normalize(
    raw: RawFontInfo,
    family_policy: FamilyPolicy = FamilyPolicy.LICENSE,
    fallback_family: str = "",
) -> NormalizedFont:
    """Derive record fields from raw font data.

    Steps (order matters for grouping):
    1. Prefer typographic family/subfamily (IDs 16/17) over legacy (IDs 1/2)
    2. Strip NULs and surrounding whitespace from every string
    3. Fold "Family Style" + "Style" into "Family"
    4. Strip trailing qualifiers selected by ``family_policy``
    5. monospace = fixed-pitch flag or a monospace term in the names
    6. weight = OS/2 weight class clamped to [1, 900], else 400
    7. italic = italic angle != 0
    8. features = primary tags | fallback tags, deduplicated
    """
    family = clean_string(raw.typographic_family) or clean_string(raw.family)
    subfamily = clean_string(raw.typographic_subfamily) or clean_string(raw.subfamily)
    if not family:
        family = clean_string(fallback_family)

    family = fold_subfamily_suffix(family, subfamily)
    family = strip_qualifiers(family, family_policy.suffixes)

    metrics = FontMetrics(
        units_per_em=raw.units_per_em,
        glyph_count=raw.glyph_count,
        features=[*raw.feature_tags, *raw.raw_feature_tags],
        character_set=raw.character_set,
    )

    return NormalizedFont(
        family=family,
        subfamily=subfamily,
        full_name=clean_string(raw.full_name),
        postscript_name=clean_string(raw.postscript_name),
        weight=clamp_weight(raw.weight_class),
        width=raw.width_class or DEFAULT_WIDTH,
        italic=raw.italic_angle != 0,
        monospace=raw.is_fixed_pitch or has_monospace_term(family, subfamily),
        version=clean_string(raw.version),
        copyright=clean_string(raw.copyright),
        metrics=metrics,
    )


def extract(font_path: str | Path, family_policy: FamilyPolicy = FamilyPolicy.LICENSE) -> NormalizedFont:
    """Read and normalize one font file. Raises the errors of ``read_font``."""
    raw = read_font(font_path)
    normalized = normalize(raw, family_policy, fallback_family=Path(font_path).stem)
    logger.debug("Extracted %s -> %r / %r", font_path, normalized.family, normalized.subfamily)
    return normalized
