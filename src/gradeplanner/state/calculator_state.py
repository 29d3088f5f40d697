from dataclasses import dataclass, field
from itertools import count
from typing import Dict, List, Optional, Union

from gradeplanner.core.catalog import Subject
from gradeplanner.core.evaluator import FormulaEvaluator, SubjectNotFound
from gradeplanner.core.gpa import GRADE_POINTS, CGPASummary, Course, Projection, project_required_gpa, summarize
from gradeplanner.core.grades import GradeResult
from gradeplanner.core.predictor import PredictionResult, Predictor
from gradeplanner.core.scores import accept_input, parse_float, to_numeric


@dataclass
class ScoreFormState:
    subject_key: Optional[str] = None
    inputs: Dict[str, str] = field(default_factory=dict)

    def select_subject(self, subject_key: Optional[str]) -> None:
        self.subject_key = subject_key or None
        self.inputs = {}
        self.clear_result()

    def set_input(self, subject: Subject, field_id: str, value: str) -> bool:
        """Store raw text as typed; rejected keystrokes leave the form unchanged."""
        item = subject.field(field_id)
        if item is None or not accept_input(value, item.max):
            return False
        self.inputs[field_id] = value
        return True

    def numeric_values(self) -> Dict[str, float]:
        return to_numeric(self.inputs)

    def clear_result(self) -> None:
        pass

    def reset(self) -> None:
        self.inputs = {}
        self.clear_result()


@dataclass
class GradeCalculatorState(ScoreFormState):
    result: Optional[GradeResult] = None

    def clear_result(self) -> None:
        self.result = None

    def calculate(self, evaluator: FormulaEvaluator, level: Optional[str]) -> Union[GradeResult, SubjectNotFound, None]:
        if not self.subject_key:
            return None
        outcome = evaluator.grade(level, self.subject_key, self.numeric_values())
        if isinstance(outcome, GradeResult):
            self.result = outcome
        else:
            self.result = None
        return outcome


@dataclass
class PredictorState(ScoreFormState):
    results: Optional[Dict[str, PredictionResult]] = None

    def clear_result(self) -> None:
        self.results = None

    def calculate(
        self, predictor: Predictor, level: Optional[str]
    ) -> Union[Dict[str, PredictionResult], SubjectNotFound, None]:
        if not self.subject_key:
            return None
        outcome = predictor.predict_all(level, self.subject_key, self.numeric_values())
        if isinstance(outcome, SubjectNotFound):
            self.results = None
        else:
            self.results = outcome
        return outcome


def _default_courses() -> List[Course]:
    return [Course(id="1", name="Course 1", credits="4", grade="10")]


@dataclass
class CGPACalculatorState:
    current_cgpa: str = ""
    credits_completed: str = ""
    subjects_completed: str = ""
    target_cgpa: str = ""
    future_credits: str = ""
    courses: List[Course] = field(default_factory=_default_courses)
    summary: CGPASummary = field(init=False)
    projection: Optional[Projection] = field(init=False, default=None)
    _ids: "count[int]" = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._ids = count(len(self.courses) + 1)
        self.recompute()

    def recompute(self) -> CGPASummary:
        self.summary = summarize(self.courses, self.current_cgpa, self.credits_completed, self.subjects_completed)
        if self.target_cgpa:
            self.projection = project_required_gpa(
                parse_float(self.target_cgpa), parse_float(self.future_credits), self.summary
            )
        else:
            self.projection = None
        return self.summary

    def set_prior(
        self,
        current_cgpa: Optional[str] = None,
        credits_completed: Optional[str] = None,
        subjects_completed: Optional[str] = None,
    ) -> CGPASummary:
        if current_cgpa is not None:
            self.current_cgpa = current_cgpa
        if credits_completed is not None:
            self.credits_completed = credits_completed
        if subjects_completed is not None:
            self.subjects_completed = subjects_completed
        return self.recompute()

    def set_target(self, target_cgpa: str, future_credits: str) -> Optional[Projection]:
        self.target_cgpa = target_cgpa
        self.future_credits = future_credits
        self.recompute()
        return self.projection

    def add_course(self) -> Course:
        course = Course(id=str(next(self._ids)), name=f"Course {len(self.courses) + 1}", credits="4", grade="10")
        self.courses.append(course)
        self.recompute()
        return course

    def remove_course(self, index: int) -> bool:
        # the list never drops below one course
        if len(self.courses) <= 1 or not 0 <= index < len(self.courses):
            return False
        del self.courses[index]
        self.recompute()
        return True

    def update_course(self, index: int, **changes: str) -> Course:
        course = self.courses[index]
        for name in changes:
            if name not in ("name", "credits", "grade"):
                raise ValueError(f"Unknown course attribute: {name}")
        if "grade" in changes and changes["grade"] not in GRADE_POINTS:
            raise ValueError(f"Unsupported grade: {changes['grade']}")
        for name, value in changes.items():
            setattr(course, name, value)
        self.recompute()
        return course

    def reset(self) -> None:
        self.current_cgpa = ""
        self.credits_completed = ""
        self.subjects_completed = ""
        self.target_cgpa = ""
        self.future_credits = ""
        self.courses = _default_courses()
        self._ids = count(2)
        self.recompute()
