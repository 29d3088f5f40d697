from dataclasses import dataclass, field

from gradeplanner.core.catalog import DEFAULT_BRANCH, DEFAULT_LEVEL, Subject, SubjectCatalog, catalog_key
from gradeplanner.state.calculator_state import CGPACalculatorState, GradeCalculatorState, PredictorState


@dataclass
class AppState:
    catalog: SubjectCatalog
    level: str = DEFAULT_LEVEL
    branch: str = DEFAULT_BRANCH
    grade_calculator: GradeCalculatorState = field(default_factory=GradeCalculatorState)
    predictor: PredictorState = field(default_factory=PredictorState)
    cgpa: CGPACalculatorState = field(default_factory=CGPACalculatorState)

    @property
    def catalog_key(self) -> str:
        return catalog_key(self.level, self.branch)

    def subjects(self) -> tuple[Subject, ...]:
        return self.catalog.subjects_for(self.level, self.branch)

    def select(self, level: str, branch: str) -> None:
        self.level = level
        self.branch = branch
        self.grade_calculator.select_subject(None)
        self.predictor.select_subject(None)
