"""Score to grade-band classification shared by marks and bulletins."""

from typing import NamedTuple, Optional


class GradeBand(NamedTuple):
    color: str
    minimum: int
    label: str
    hex_color: str


GRADE_BANDS = (
    GradeBand("green", 80, "80-100", "#00B050"),
    GradeBand("blue", 70, "70-79", "#0070C0"),
    GradeBand("yellow", 50, "50-69", "#FFC000"),
    GradeBand("red", 0, "0-49", "#FF0000"),
)

MIN_SCORE = 0
MAX_SCORE = 100


def is_valid_score(score) -> bool:
    return score is not None and MIN_SCORE <= score <= MAX_SCORE


def classify_score(score: int) -> str:
    """Return the grade color for a score; lower bounds are inclusive."""
    for band in GRADE_BANDS:
        if score >= band.minimum:
            return band.color
    return GRADE_BANDS[-1].color


def band_for_color(color: Optional[str]) -> Optional[GradeBand]:
    if not color:
        return None
    for band in GRADE_BANDS:
        if band.color == color:
            return band
    return None
