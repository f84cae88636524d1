"""Pydantic v2 models for stored font records and derived family rows."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fontshelf.config import DEFAULT_WEIGHT, DEFAULT_WIDTH, WEIGHT_MAX, WEIGHT_MIN


def clamp_weight(value: int | None) -> int:
    """Clamp an OS/2 weight class to [1, 900], defaulting to 400."""
    if value is None:
        return DEFAULT_WEIGHT
    return min(WEIGHT_MAX, max(WEIGHT_MIN, int(value)))


class FontMetrics(BaseModel):
    """Metadata blob persisted as JSON alongside each record."""

    units_per_em: int | None = None
    glyph_count: int = 0
    features: list[str] = Field(default_factory=list)
    character_set: list[int] = Field(default_factory=list)

    @field_validator("features")
    @classmethod
    def features_clean(cls, v: list[str]) -> list[str]:
        return sorted({tag.strip() for tag in v if tag and tag.strip()})

    @field_validator("character_set")
    @classmethod
    def character_set_sorted(cls, v: list[int]) -> list[int]:
        return sorted(set(v))


class FontRecord(BaseModel):
    """One indexed font file, keyed by path."""

    model_config = ConfigDict(validate_assignment=True)

    id: int | None = None
    path: str
    file_hash: str
    family: str
    subfamily: str = ""
    full_name: str = ""
    postscript_name: str = ""
    weight: int = DEFAULT_WEIGHT
    width: int = DEFAULT_WIDTH
    italic: bool = False
    monospace: bool = False
    category: str | None = None
    subcategory: str | None = None
    version: str = ""
    copyright: str = ""
    metrics: FontMetrics = Field(default_factory=FontMetrics)
    last_seen: int = 0
    is_favorite: bool = False

    @field_validator("path")
    @classmethod
    def path_not_empty(cls, v: str) -> str:
        if not v:
            msg = "Font record path must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("weight", mode="before")
    @classmethod
    def weight_clamped(cls, v: int | None) -> int:
        return clamp_weight(v)

    @field_validator("width", mode="before")
    @classmethod
    def width_in_range(cls, v: int | None) -> int:
        if v is None or not 1 <= int(v) <= 9:
            return DEFAULT_WIDTH
        return int(v)


class FontFamily(BaseModel):
    """Aggregate of all records sharing an exact family string."""

    id: int
    family: str
    subfamily: str
    file_path: str
    all_file_paths: list[str]
    category: str | None = None
    subcategory: str | None = None
    is_favorite: bool = False
    variant_count: int
