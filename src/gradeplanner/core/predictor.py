"""Minimum end-term score needed for each target grade.

A subject formula with every other field fixed is a non-decreasing, piecewise
linear function of the end-term ``F``. Where it can be expanded into affine
arms ``a_i * F + b_i`` whose maximum equals the formula, the answer is the
smallest per-arm solution and the arm that produces it is the binding one.
That algebraic answer is checked against the full formula; anything that
cannot be expanded or fails the check is solved by bisection instead.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Union

from gradeplanner.core.catalog import END_TERM_FIELD, SubjectCatalog, normalize_level
from gradeplanner.core.evaluator import SubjectNotFound
from gradeplanner.core.formulas import Affine, Capped, Expr
from gradeplanner.core.grades import GRADE_THRESHOLDS, TARGET_GRADES

logger = logging.getLogger(__name__)

EPSILON = 1e-9
MINIMALITY_STEP = 1e-4
BISECTION_STEPS = 80


@dataclass(frozen=True)
class PredictionResult:
    required: Optional[float]
    possible: bool
    final_grade: float
    guaranteed: bool = False


@dataclass(frozen=True)
class Inversion:
    value: float
    arm: Optional[Affine]


def _unwrap_cap(formula: Expr, threshold: float) -> Optional[Expr]:
    # min(cap, g) >= t  <=>  g >= t, as long as t <= cap
    while isinstance(formula, Capped):
        if threshold > formula.cap:
            return None
        formula = formula.expr
    return formula


def invert(formula: Expr, fixed: Mapping[str, float], free: str, threshold: float) -> Optional[Inversion]:
    """Solve ``formula >= threshold`` for the smallest value of ``free``.

    Returns ``None`` when the formula has no affine-arm form. The value is
    ``-inf`` when every value of ``free`` already meets the threshold and
    ``inf`` when none does.
    """
    expr = _unwrap_cap(formula, threshold)
    if expr is None:
        return Inversion(math.inf, None)
    arms = expr.arms(fixed, free)
    if arms is None:
        return None

    best = Inversion(math.inf, None)
    for arm in arms:
        if arm.slope > 0:
            candidate = (threshold - arm.intercept) / arm.slope
        elif arm.intercept >= threshold - EPSILON:
            candidate = -math.inf
        else:
            continue
        if candidate < best.value:
            best = Inversion(candidate, arm)
    return best


def _round_up(value: float, places: int = 2) -> float:
    factor = 10 ** places
    return math.ceil(value * factor - 1e-6) / factor


def _bisect(meets: Callable[[float], bool], low: float, high: float) -> float:
    for _ in range(BISECTION_STEPS):
        middle = (low + high) / 2
        if meets(middle):
            high = middle
        else:
            low = middle
    return high


def solve_required(
    formula: Expr,
    values: Mapping[str, float],
    threshold: float,
    *,
    free: str = END_TERM_FIELD,
    low: float = 0.0,
    high: float = 100.0,
) -> PredictionResult:
    fixed: Dict[str, float] = {key: value for key, value in values.items() if key != free}

    def score_at(x: float) -> float:
        return formula.evaluate({**fixed, free: x})

    def meets(x: float) -> bool:
        return score_at(x) >= threshold - EPSILON

    inversion = invert(formula, fixed, free, threshold)
    value: Optional[float] = None
    if inversion is not None:
        if inversion.value <= low:
            trusted = meets(low)
        elif inversion.value > high:
            trusted = not meets(high)
        else:
            trusted = meets(inversion.value) and not meets(max(low, inversion.value - MINIMALITY_STEP))
        if trusted:
            value = inversion.value
            logger.debug("binding arm %s gives %s=%.4f for threshold %s", inversion.arm, free, value, threshold)
        else:
            logger.debug("inverted value %.4f failed verification; bisecting", inversion.value)

    if value is None:
        if meets(low):
            value = -math.inf
        elif not meets(high):
            value = math.inf
        else:
            value = _bisect(meets, low, high)

    if value <= low:
        return PredictionResult(required=low, possible=True, final_grade=round(score_at(low), 2), guaranteed=True)
    if value > high:
        return PredictionResult(required=None, possible=False, final_grade=round(score_at(high), 2))

    required = min(high, _round_up(value))
    if not meets(required):
        required = min(high, required + 0.01)
    return PredictionResult(required=required, possible=True, final_grade=round(score_at(required), 2))


class Predictor:
    def __init__(self, catalog: SubjectCatalog) -> None:
        self.catalog = catalog

    def predict_required_score(
        self,
        level: Optional[str],
        subject_key: str,
        partial_values: Mapping[str, float],
        target_grade: str,
    ) -> Union[PredictionResult, SubjectNotFound]:
        subject = self.catalog.find(level, subject_key)
        if subject is None:
            return SubjectNotFound(normalize_level(level), subject_key)

        threshold = GRADE_THRESHOLDS.get(target_grade)
        if threshold is None:
            return PredictionResult(required=None, possible=False, final_grade=0.0)

        free = subject.free_field
        low, high = (free.min, free.max) if free is not None else (0.0, 100.0)
        return solve_required(subject.formula, partial_values, threshold, low=low, high=high)

    def predict_all(
        self,
        level: Optional[str],
        subject_key: str,
        partial_values: Mapping[str, float],
    ) -> Union[Dict[str, PredictionResult], SubjectNotFound]:
        results: Dict[str, PredictionResult] = {}
        for grade in TARGET_GRADES:
            result = self.predict_required_score(level, subject_key, partial_values, grade)
            if isinstance(result, SubjectNotFound):
                return result
            results[grade] = result
        return results
