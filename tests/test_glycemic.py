"""Tests for glycemic band classification."""

import pytest

from glycemic_tracker.domain.glycemic import (
    GlycemicBand,
    band_advice,
    classify_glycemic_score,
)


@pytest.mark.parametrize(
    ("score", "band"),
    [
        (0, GlycemicBand.LOW),
        (54, GlycemicBand.LOW),
        (55, GlycemicBand.MEDIUM),
        (69, GlycemicBand.MEDIUM),
        (70, GlycemicBand.HIGH),
        (100, GlycemicBand.HIGH),
    ],
)
def test_classify_band_boundaries(score: int, band: GlycemicBand) -> None:
    assert classify_glycemic_score(score) == band


def test_out_of_range_scores_are_not_clamped() -> None:
    assert classify_glycemic_score(-10) == GlycemicBand.LOW
    assert classify_glycemic_score(140) == GlycemicBand.HIGH


def test_band_advice_differs_by_band() -> None:
    low = band_advice(30)
    medium = band_advice(60)
    high = band_advice(85)

    assert low and medium and high
    assert low != medium != high
    assert "low glycemic impact" in low[0]
