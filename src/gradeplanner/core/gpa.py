from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from gradeplanner.core.scores import parse_float

GRADE_POINTS: Dict[str, int] = {
    "10": 10,
    "9": 9,
    "8": 8,
    "7": 7,
    "6": 6,
    "5": 5,
    "4": 4,
    "0": 0,
}

GRADE_OPTIONS: List[Tuple[str, str]] = [
    ("10", "S (10)"),
    ("9", "A (9)"),
    ("8", "B (8)"),
    ("7", "C (7)"),
    ("6", "D (6)"),
    ("5", "E (5)"),
    ("4", "U (4)"),
    ("0", "Fail (0)"),
]

DISTRIBUTION_BUCKETS: Dict[str, str] = {"10": "S", "9": "A", "8": "B", "7": "C"}

PERFORMANCE_TIERS: List[Tuple[float, str]] = [
    (9.0, "Outstanding"),
    (8.0, "Very Good"),
    (7.0, "Good"),
    (6.0, "Satisfactory"),
]
LOWEST_TIER = "Action Required"


@dataclass
class Course:
    id: str
    name: str
    credits: Union[str, float] = "4"
    grade: str = "10"

    @property
    def credit_value(self) -> float:
        return parse_float(str(self.credits))

    @property
    def grade_point(self) -> int:
        try:
            return GRADE_POINTS[self.grade]
        except KeyError as exc:
            raise ValueError(f"Unsupported grade: {self.grade}") from exc


@dataclass(frozen=True)
class CGPASummary:
    semester_gpa: float
    cumulative_cgpa: float
    total_credits: float
    total_subjects: int
    distribution: Dict[str, int] = field(default_factory=dict)
    tier: str = LOWEST_TIER


@dataclass(frozen=True)
class Projection:
    required_gpa: Optional[float]
    possible: bool


def _weighted(courses: Iterable[Course]) -> Tuple[float, float]:
    points = 0.0
    credits = 0.0
    for course in courses:
        points += course.grade_point * course.credit_value
        credits += course.credit_value
    return points, credits


def calculate_sgpa(courses: Iterable[Course]) -> float:
    """
    SGPA = Σ(credits * grade_point) / Σ(credits); 0 when there are no credits.
    """
    points, credits = _weighted(courses)
    if credits <= 0:
        return 0.0
    return points / credits


def calculate_cgpa(prior_cgpa: float, prior_credits: float, courses: Iterable[Course]) -> float:
    """
    CGPA = (prior_cgpa * prior_credits + Σ(credits * grade_point)) / (prior_credits + Σ(credits))
    """
    points, credits = _weighted(courses)
    total_credits = prior_credits + credits
    if total_credits <= 0:
        return 0.0
    return (prior_cgpa * prior_credits + points) / total_credits


def grade_distribution(courses: Iterable[Course]) -> Dict[str, int]:
    distribution = {"S": 0, "A": 0, "B": 0, "C": 0, "Others": 0}
    for course in courses:
        distribution[DISTRIBUTION_BUCKETS.get(course.grade, "Others")] += 1
    return distribution


def performance_tier(cgpa: float) -> str:
    for cutoff, label in PERFORMANCE_TIERS:
        if cgpa >= cutoff:
            return label
    return LOWEST_TIER


def summarize(
    courses: Sequence[Course],
    current_cgpa: Union[str, float] = "",
    credits_completed: Union[str, float] = "",
    subjects_completed: Union[str, float] = "",
) -> CGPASummary:
    prior_cgpa = parse_float(str(current_cgpa))
    prior_credits = parse_float(str(credits_completed))
    prior_subjects = int(parse_float(str(subjects_completed)))

    _, semester_credits = _weighted(courses)
    cumulative = calculate_cgpa(prior_cgpa, prior_credits, courses)
    return CGPASummary(
        semester_gpa=calculate_sgpa(courses),
        cumulative_cgpa=cumulative,
        total_credits=prior_credits + semester_credits,
        total_subjects=prior_subjects + len(courses),
        distribution=grade_distribution(courses),
        tier=performance_tier(cumulative),
    )


def project_required_gpa(target_cgpa: float, future_credits: float, summary: CGPASummary) -> Projection:
    if future_credits <= 0:
        return Projection(required_gpa=None, possible=False)
    required = (
        target_cgpa * (summary.total_credits + future_credits) - summary.cumulative_cgpa * summary.total_credits
    ) / future_credits
    return Projection(required_gpa=required, possible=0 <= required <= 10)
