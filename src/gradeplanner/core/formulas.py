"""Scoring formulas as small expression trees.

Every subject carries one expression built from these nodes. All weights are
non-negative, so every expression is non-decreasing in each of its fields,
which the predictor relies on when it inverts a formula for the end-term.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union

Number = Union[int, float]


class FormulaError(ValueError):
    pass


@dataclass(frozen=True)
class Affine:
    """``slope * x + intercept`` for a single free field ``x``."""

    slope: float
    intercept: float

    def at(self, x: float) -> float:
        return self.slope * x + self.intercept

    def plus(self, other: "Affine", weight: float = 1.0) -> "Affine":
        return Affine(self.slope + weight * other.slope, self.intercept + weight * other.intercept)

    @property
    def is_constant(self) -> bool:
        return self.slope == 0


Arms = Optional[Tuple[Affine, ...]]


def _terms(value: Union["Expr", Number]) -> Tuple[Tuple[float, "Expr"], ...]:
    if isinstance(value, Linear):
        return value.terms
    if isinstance(value, Expr):
        return ((1.0, value),)
    if isinstance(value, (int, float)):
        return ((1.0, Const(float(value))),)
    raise TypeError(f"Cannot combine formula with {type(value).__name__}")


class Expr:
    def evaluate(self, values: Mapping[str, float]) -> float:
        raise NotImplementedError

    def field_ids(self) -> frozenset:
        raise NotImplementedError

    def arms(self, values: Mapping[str, float], free: str) -> Arms:
        """Affine pieces in ``free`` whose maximum equals this expression.

        Returns ``None`` when the expression cannot be written that way with
        the other fields fixed at ``values``.
        """
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    def __add__(self, other: Union["Expr", Number]) -> "Linear":
        return Linear(_terms(self) + _terms(other))

    def __radd__(self, other: Union["Expr", Number]) -> "Linear":
        return Linear(_terms(other) + _terms(self))

    def __mul__(self, weight: Number) -> "Linear":
        if not isinstance(weight, (int, float)):
            return NotImplemented
        return Linear(tuple((float(weight) * w, e) for w, e in _terms(self)))

    __rmul__ = __mul__


@dataclass(frozen=True)
class Field(Expr):
    id: str

    def evaluate(self, values: Mapping[str, float]) -> float:
        return float(values.get(self.id, 0.0))

    def field_ids(self) -> frozenset:
        return frozenset({self.id})

    def arms(self, values: Mapping[str, float], free: str) -> Arms:
        if self.id == free:
            return (Affine(1.0, 0.0),)
        return (Affine(0.0, float(values.get(self.id, 0.0))),)

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.id}

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class Const(Expr):
    value: float

    def evaluate(self, values: Mapping[str, float]) -> float:
        return self.value

    def field_ids(self) -> frozenset:
        return frozenset()

    def arms(self, values: Mapping[str, float], free: str) -> Arms:
        return (Affine(0.0, self.value),)

    def to_dict(self) -> Dict[str, Any]:
        return {"const": self.value}

    def __str__(self) -> str:
        return f"{self.value:g}"


@dataclass(frozen=True)
class Linear(Expr):
    terms: Tuple[Tuple[float, Expr], ...]

    def __post_init__(self) -> None:
        if not self.terms:
            raise FormulaError("A weighted sum needs at least one term")
        for weight, _ in self.terms:
            if weight < 0:
                raise FormulaError(f"Negative weight {weight} breaks monotonic scoring")

    def evaluate(self, values: Mapping[str, float]) -> float:
        return sum(weight * expr.evaluate(values) for weight, expr in self.terms)

    def field_ids(self) -> frozenset:
        return frozenset().union(*(expr.field_ids() for _, expr in self.terms))

    def arms(self, values: Mapping[str, float], free: str) -> Arms:
        # w * max(a, b) == max(w*a, w*b) for w >= 0, so sums distribute over arms.
        combined: Tuple[Affine, ...] = (Affine(0.0, 0.0),)
        for weight, expr in self.terms:
            term_arms = expr.arms(values, free)
            if term_arms is None:
                return None
            combined = tuple(dict.fromkeys(a.plus(b, weight) for a in combined for b in term_arms))
        return combined

    def to_dict(self) -> Dict[str, Any]:
        return {"sum": [[weight, expr.to_dict()] for weight, expr in self.terms]}

    def __str__(self) -> str:
        parts = []
        for weight, expr in self.terms:
            if weight == 1:
                parts.append(str(expr))
            elif isinstance(expr, Linear):
                parts.append(f"{weight:g}({expr})")
            else:
                parts.append(f"{weight:g}{expr}")
        return " + ".join(parts)


def _constant_value(arms: Tuple[Affine, ...]) -> Optional[float]:
    if all(arm.is_constant for arm in arms):
        return max(arm.intercept for arm in arms)
    return None


@dataclass(frozen=True)
class BestOf(Expr):
    options: Tuple[Expr, ...]

    def __post_init__(self) -> None:
        if not self.options:
            raise FormulaError("BestOf needs at least one option")

    def evaluate(self, values: Mapping[str, float]) -> float:
        return max(option.evaluate(values) for option in self.options)

    def field_ids(self) -> frozenset:
        return frozenset().union(*(option.field_ids() for option in self.options))

    def arms(self, values: Mapping[str, float], free: str) -> Arms:
        collected: Tuple[Affine, ...] = ()
        for option in self.options:
            option_arms = option.arms(values, free)
            if option_arms is None:
                return None
            collected += option_arms
        return tuple(dict.fromkeys(collected))

    def to_dict(self) -> Dict[str, Any]:
        return {"best_of": [option.to_dict() for option in self.options]}

    def __str__(self) -> str:
        return "max(" + ", ".join(str(option) for option in self.options) + ")"


@dataclass(frozen=True)
class WorstOf(Expr):
    options: Tuple[Expr, ...]

    def __post_init__(self) -> None:
        if not self.options:
            raise FormulaError("WorstOf needs at least one option")

    def evaluate(self, values: Mapping[str, float]) -> float:
        return min(option.evaluate(values) for option in self.options)

    def field_ids(self) -> frozenset:
        return frozenset().union(*(option.field_ids() for option in self.options))

    def arms(self, values: Mapping[str, float], free: str) -> Arms:
        constants = []
        for option in self.options:
            option_arms = option.arms(values, free)
            value = _constant_value(option_arms) if option_arms is not None else None
            if value is None:
                return None
            constants.append(value)
        return (Affine(0.0, min(constants)),)

    def to_dict(self) -> Dict[str, Any]:
        return {"worst_of": [option.to_dict() for option in self.options]}

    def __str__(self) -> str:
        return "min(" + ", ".join(str(option) for option in self.options) + ")"


@dataclass(frozen=True)
class Mean(Expr):
    options: Tuple[Expr, ...]

    def __post_init__(self) -> None:
        if not self.options:
            raise FormulaError("Mean needs at least one option")

    def _as_linear(self) -> Linear:
        share = 1.0 / len(self.options)
        return Linear(tuple((share, option) for option in self.options))

    def evaluate(self, values: Mapping[str, float]) -> float:
        return sum(option.evaluate(values) for option in self.options) / len(self.options)

    def field_ids(self) -> frozenset:
        return frozenset().union(*(option.field_ids() for option in self.options))

    def arms(self, values: Mapping[str, float], free: str) -> Arms:
        return self._as_linear().arms(values, free)

    def to_dict(self) -> Dict[str, Any]:
        return {"mean": [option.to_dict() for option in self.options]}

    def __str__(self) -> str:
        return "avg(" + ", ".join(str(option) for option in self.options) + ")"


@dataclass(frozen=True)
class Capped(Expr):
    expr: Expr
    cap: float

    def evaluate(self, values: Mapping[str, float]) -> float:
        return min(self.cap, self.expr.evaluate(values))

    def field_ids(self) -> frozenset:
        return self.expr.field_ids()

    def arms(self, values: Mapping[str, float], free: str) -> Arms:
        inner = self.expr.arms(values, free)
        value = _constant_value(inner) if inner is not None else None
        if value is None:
            return None
        return (Affine(0.0, min(self.cap, value)),)

    def to_dict(self) -> Dict[str, Any]:
        return {"capped": self.expr.to_dict(), "cap": self.cap}

    def __str__(self) -> str:
        return f"min({self.cap:g}, {self.expr})"


def field(field_id: str) -> Field:
    return Field(field_id)


def best_of(*options: Union[Expr, Number]) -> BestOf:
    return BestOf(tuple(_coerce(option) for option in options))


def worst_of(*options: Union[Expr, Number]) -> WorstOf:
    return WorstOf(tuple(_coerce(option) for option in options))


def mean(*options: Union[Expr, Number]) -> Mean:
    return Mean(tuple(_coerce(option) for option in options))


def capped(expr: Expr, cap: Number) -> Capped:
    return Capped(expr, float(cap))


def _coerce(value: Union[Expr, Number]) -> Expr:
    if isinstance(value, Expr):
        return value
    if isinstance(value, (int, float)):
        return Const(float(value))
    raise TypeError(f"Cannot use {type(value).__name__} in a formula")


def formula_from_dict(data: Mapping[str, Any]) -> Expr:
    if not isinstance(data, Mapping):
        raise FormulaError(f"Formula node must be an object, got {type(data).__name__}")
    try:
        if "field" in data:
            return Field(str(data["field"]))
        if "const" in data:
            return Const(float(data["const"]))
        if "sum" in data:
            return Linear(tuple((float(weight), formula_from_dict(node)) for weight, node in data["sum"]))
        if "best_of" in data:
            return BestOf(tuple(formula_from_dict(node) for node in data["best_of"]))
        if "worst_of" in data:
            return WorstOf(tuple(formula_from_dict(node) for node in data["worst_of"]))
        if "mean" in data:
            return Mean(tuple(formula_from_dict(node) for node in data["mean"]))
        if "capped" in data:
            return Capped(formula_from_dict(data["capped"]), float(data["cap"]))
    except (KeyError, TypeError, ValueError) as exc:
        if isinstance(exc, FormulaError):
            raise
        raise FormulaError(f"Malformed formula node: {data!r}") from exc
    raise FormulaError(f"Unknown formula node: {sorted(data)}")
