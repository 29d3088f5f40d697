from dataclasses import dataclass
from typing import Mapping, Optional, Union

from gradeplanner.core.catalog import Subject, SubjectCatalog, normalize_level
from gradeplanner.core.grades import GradeResult, grade_result


@dataclass(frozen=True)
class SubjectNotFound:
    """Lookup miss, kept apart from a genuine score of 0."""

    level: str
    subject_key: str

    @property
    def message(self) -> str:
        return f"No formula for subject '{self.subject_key}' at level '{self.level}'"


class FormulaEvaluator:
    def __init__(self, catalog: SubjectCatalog) -> None:
        self.catalog = catalog

    def subject(self, level: Optional[str], subject_key: str) -> Optional[Subject]:
        return self.catalog.find(level, subject_key)

    def evaluate(
        self,
        level: Optional[str],
        subject_key: str,
        values: Mapping[str, float],
    ) -> Union[float, SubjectNotFound]:
        subject = self.subject(level, subject_key)
        if subject is None:
            return SubjectNotFound(normalize_level(level), subject_key)
        return subject.formula.evaluate(values)

    def grade(
        self,
        level: Optional[str],
        subject_key: str,
        values: Mapping[str, float],
    ) -> Union[GradeResult, SubjectNotFound]:
        score = self.evaluate(level, subject_key, values)
        if isinstance(score, SubjectNotFound):
            return score
        return grade_result(score)
