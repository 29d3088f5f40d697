import re
from typing import Dict, Mapping, Optional

from gradeplanner.core.catalog import Subject

NUMERIC_PATTERN = re.compile(r"^\d*\.?\d*$")
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_float(text: Optional[str]) -> float:
    """Leading-number parse; anything unparseable (or NaN) counts as 0."""
    if text is None:
        return 0.0
    match = _LEADING_NUMBER.match(str(text))
    if not match:
        return 0.0
    return float(match.group(0))


def accept_input(value: str, maximum: float) -> bool:
    if value == "":
        return True
    if not NUMERIC_PATTERN.match(value):
        return False
    try:
        numeric = float(value)
    except ValueError:
        # "." on its own while the user is still typing
        return True
    return numeric <= maximum


def to_numeric(input_values: Mapping[str, str]) -> Dict[str, float]:
    return {field_id: parse_float(raw) for field_id, raw in input_values.items()}


def clamp_values(subject: Subject, values: Mapping[str, float]) -> Dict[str, float]:
    clamped: Dict[str, float] = {}
    for item in subject.fields:
        if item.id in values:
            clamped[item.id] = max(float(item.min), min(float(values[item.id]), float(item.max)))
    return clamped
