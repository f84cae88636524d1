"""Tests for the pydantic record models."""

import pytest
from pydantic import ValidationError

from fontshelf.schema import FontFamily, FontMetrics, FontRecord, clamp_weight

# ---------------------------------------------------------------------------
# clamp_weight
# ---------------------------------------------------------------------------


class TestClampWeight:
    def test_in_range(self):
        assert clamp_weight(700) == 700

    def test_bounds(self):
        assert clamp_weight(0) == 1
        assert clamp_weight(1000) == 900

    def test_none_defaults_to_regular(self):
        assert clamp_weight(None) == 400


# ---------------------------------------------------------------------------
# FontRecord
# ---------------------------------------------------------------------------


class TestFontRecord:
    def _make(self, **overrides):
        defaults = {"path": "/f/a.ttf", "file_hash": "abc", "family": "Inter"}
        defaults.update(overrides)
        return FontRecord(**defaults)

    def test_defaults(self):
        rec = self._make()
        assert rec.weight == 400
        assert rec.width == 5
        assert rec.is_favorite is False
        assert rec.metrics == FontMetrics()

    def test_weight_clamped_on_create(self):
        assert self._make(weight=1200).weight == 900
        assert self._make(weight=-5).weight == 1

    def test_weight_clamped_on_assignment(self):
        rec = self._make()
        rec.weight = 2000
        assert rec.weight == 900

    def test_invalid_width_falls_back(self):
        assert self._make(width=42).width == 5

    def test_empty_path_raises(self):
        with pytest.raises(ValidationError, match="path must not be empty"):
            self._make(path="")


# ---------------------------------------------------------------------------
# FontMetrics / FontFamily
# ---------------------------------------------------------------------------


class TestFontMetrics:
    def test_features_cleaned_and_sorted(self):
        m = FontMetrics(features=["liga", " kern ", "", "liga"])
        assert m.features == ["kern", "liga"]

    def test_character_set_sorted_unique(self):
        assert FontMetrics(character_set=[66, 65, 66]).character_set == [65, 66]

    def test_json_round_trip(self):
        m = FontMetrics(units_per_em=1000, glyph_count=3, features=["kern"], character_set=[65])
        assert FontMetrics.model_validate_json(m.model_dump_json()) == m


class TestFontFamily:
    def test_json_dump(self):
        fam = FontFamily(
            id=1,
            family="Inter",
            subfamily="Regular, Bold",
            file_path="/f/a.ttf",
            all_file_paths=["/f/a.ttf", "/f/b.ttf"],
            variant_count=2,
        )
        data = fam.model_dump(mode="json")
        assert data["variant_count"] == 2
        assert data["is_favorite"] is False
