from dataclasses import dataclass
from typing import Dict, List, Tuple

# (cutoff, letter, grade point); the first band whose cutoff the score reaches wins.
# E is worth 4 points and U is worth 0: there is no 5-point band.
GRADE_BANDS: List[Tuple[float, str, int]] = [
    (90, "S", 10),
    (80, "A", 9),
    (70, "B", 8),
    (60, "C", 7),
    (50, "D", 6),
    (40, "E", 4),
    (float("-inf"), "U", 0),
]

GRADE_THRESHOLDS: Dict[str, float] = {letter: cutoff for cutoff, letter, _ in GRADE_BANDS if letter != "U"}

TARGET_GRADES: Tuple[str, ...] = tuple(GRADE_THRESHOLDS)


@dataclass(frozen=True)
class GradeResult:
    score: float
    letter: str
    points: int


def classify(score: float) -> Tuple[str, int]:
    for cutoff, letter, points in GRADE_BANDS:
        if score >= cutoff:
            return letter, points
    return "U", 0


def letter_grade(score: float) -> str:
    return classify(score)[0]


def grade_points(score: float) -> int:
    return classify(score)[1]


def grade_result(score: float, *, round_to: int = 2) -> GradeResult:
    rounded = round(score, round_to)
    letter, points = classify(rounded)
    return GradeResult(score=rounded, letter=letter, points=points)
