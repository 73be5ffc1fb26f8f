"""Glycemic impact bands."""

from enum import StrEnum

LOW_UPPER_BOUND = 55
MEDIUM_UPPER_BOUND = 70


class GlycemicBand(StrEnum):
    """Three-way banding of a 0-100 glycemic score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_BAND_ADVICE: dict[GlycemicBand, tuple[str, ...]] = {
    GlycemicBand.LOW: (
        "Great choice: this meal has a low glycemic impact.",
        "Keep favoring whole foods and lean proteins.",
    ),
    GlycemicBand.MEDIUM: (
        "This meal has a medium glycemic impact.",
        "Consider adding more fiber and protein.",
    ),
    GlycemicBand.HIGH: (
        "High glycemic impact: enjoy in moderation.",
        "Prefer complex, whole-grain carbohydrates.",
    ),
}


def classify_glycemic_score(score: float) -> GlycemicBand:
    """Return the band for a score; out-of-range values are not clamped."""
    if score < LOW_UPPER_BOUND:
        return GlycemicBand.LOW
    if score < MEDIUM_UPPER_BOUND:
        return GlycemicBand.MEDIUM
    return GlycemicBand.HIGH


def band_advice(score: float) -> list[str]:
    """Return short advisory strings for the score's band."""
    return list(_BAND_ADVICE[classify_glycemic_score(score)])
