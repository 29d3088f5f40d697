from typing import Mapping, Optional, Sequence

from gradeplanner.core.gpa import GRADE_OPTIONS, CGPASummary, Course, Projection
from gradeplanner.core.grades import GradeResult
from gradeplanner.core.predictor import PredictionResult

APP_NAME = "UI Grade Planner"


def _number(value: float) -> str:
    return f"{value:g}"


def grade_share_text(result: GradeResult) -> str:
    return f"My projected grade is {result.letter} ({_number(result.score)}%)! Checked with {APP_NAME}."


def prediction_summary(target_grade: str, result: PredictionResult) -> str:
    if result.guaranteed:
        return (
            f"Grade {target_grade} is already secured with your current internal scores. "
            f"Your total course score is at least {_number(result.final_grade)}."
        )
    if result.possible and result.required is not None:
        return (
            f"To achieve Grade {target_grade}, you must score at least {_number(result.required)} marks "
            f"in the End Term Exam. This will bring your total course score to {_number(result.final_grade)}."
        )
    return (
        f"Based on your current internal scores, it is mathematically impossible to achieve "
        f"Grade {target_grade} even with a full score in the End Term Exam. "
        f"Please try calculating for a lower grade."
    )


def prediction_share_text(target_grade: str, result: PredictionResult) -> str:
    if result.possible and result.required is not None:
        return f"I need {_number(result.required)} marks to get Grade {target_grade}!"
    return f"Grade {target_grade} is out of reach this term."


def prediction_table(results: Mapping[str, PredictionResult]) -> str:
    lines = ["Grade  Required End Term"]
    for grade, result in results.items():
        if result.guaranteed:
            required = "Secured"
        elif result.possible and result.required is not None:
            required = f"{result.required:.2f}"
        else:
            required = "Not Possible"
        lines.append(f"{grade:<6} {required}")
    return "\n".join(lines)


def cgpa_report(summary: CGPASummary, courses: Sequence[Course], projection: Optional[Projection] = None) -> str:
    labels = dict(GRADE_OPTIONS)
    lines = [
        "CGPA Report",
        f"Semester GPA: {summary.semester_gpa:.2f}",
        f"Cumulative CGPA: {summary.cumulative_cgpa:.2f} ({summary.tier})",
        f"Total credits: {_number(summary.total_credits)}",
        f"Total subjects: {summary.total_subjects}",
        "",
        "Courses:",
    ]
    for course in courses:
        lines.append(f"- {course.name}: {course.credits} credits, grade {labels.get(course.grade, course.grade)}")
    lines.append("")
    lines.append(
        "Distribution: " + ", ".join(f"{bucket} {count}" for bucket, count in summary.distribution.items())
    )
    if projection is not None:
        if projection.required_gpa is None:
            lines.append("Required GPA: add future credits to project a target.")
        elif projection.possible:
            lines.append(f"Required GPA over future credits: {projection.required_gpa:.2f}")
        else:
            lines.append(f"Required GPA over future credits: {projection.required_gpa:.2f} (not achievable)")
    return "\n".join(lines)
