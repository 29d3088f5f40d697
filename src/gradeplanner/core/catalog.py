from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from gradeplanner.core.formulas import Expr, FormulaError, formula_from_dict

LEVELS: Tuple[str, ...] = ("foundation", "diploma", "degree")
DEFAULT_LEVEL = "foundation"
DEFAULT_BRANCH = "data-science"
BRANCH_SPECIFIC: Tuple[str, ...] = ("electronic-systems",)
END_TERM_FIELD = "F"


class CatalogError(ValueError):
    pass


@dataclass(frozen=True)
class SubjectField:
    id: str
    label: str
    min: float = 0
    max: float = 100


@dataclass(frozen=True)
class Subject:
    key: str
    name: str
    fields: Tuple[SubjectField, ...]
    formula: Expr

    def field(self, field_id: str) -> Optional[SubjectField]:
        for item in self.fields:
            if item.id == field_id:
                return item
        return None

    @property
    def field_ids(self) -> Tuple[str, ...]:
        return tuple(item.id for item in self.fields)

    @property
    def free_field(self) -> Optional[SubjectField]:
        return self.field(END_TERM_FIELD)


def normalize_level(level: Optional[str]) -> str:
    return (level or "").strip().lower() or DEFAULT_LEVEL


def normalize_branch(branch: Optional[str]) -> str:
    return re.sub(r"\s+", "-", (branch or "").strip().lower()) or DEFAULT_BRANCH


def catalog_key(level: Optional[str], branch: Optional[str]) -> str:
    normalized_level = normalize_level(level)
    normalized_branch = normalize_branch(branch)
    if normalized_branch in BRANCH_SPECIFIC and normalized_level in LEVELS:
        return f"{normalized_level}-{normalized_branch}"
    return normalized_level


def level_of(key: str) -> str:
    return key.split("-", 1)[0]


class SubjectCatalog:
    def __init__(self, entries: Mapping[str, Iterable[Subject]]) -> None:
        self._entries: Dict[str, Tuple[Subject, ...]] = {key: tuple(subjects) for key, subjects in entries.items()}
        self._validate()

    def _validate(self) -> None:
        seen: Dict[str, Dict[str, str]] = {}
        for bucket, subjects in self._entries.items():
            by_level = seen.setdefault(level_of(bucket), {})
            for subject in subjects:
                if subject.key in by_level:
                    raise CatalogError(
                        f"Duplicate subject key '{subject.key}' in '{bucket}' and '{by_level[subject.key]}'"
                    )
                by_level[subject.key] = bucket

                declared = set(subject.field_ids)
                if len(declared) != len(subject.fields):
                    raise CatalogError(f"Subject '{subject.key}' declares a field twice")
                undeclared = sorted(subject.formula.field_ids() - declared)
                if undeclared:
                    raise CatalogError(
                        f"Formula for '{subject.key}' uses undeclared fields: {', '.join(undeclared)}"
                    )
                for item in subject.fields:
                    if item.min > item.max:
                        raise CatalogError(f"Field '{item.id}' of '{subject.key}' has min above max")

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "SubjectCatalog":
        entries: Dict[str, List[Subject]] = {}
        for record in records:
            try:
                bucket = str(record["catalog_key"])
                fields = tuple(
                    SubjectField(
                        id=str(item["id"]),
                        label=str(item.get("label", item["id"])),
                        min=float(item.get("min", 0)),
                        max=float(item.get("max", 100)),
                    )
                    for item in record["fields"]
                )
                subject = Subject(
                    key=str(record["key"]),
                    name=str(record.get("name", record["key"])),
                    fields=fields,
                    formula=formula_from_dict(record["formula"]),
                )
            except FormulaError as exc:
                raise CatalogError(f"Bad formula in record {record.get('key')!r}: {exc}") from exc
            except (KeyError, TypeError, ValueError) as exc:
                raise CatalogError(f"Malformed subject record: {exc}") from exc
            entries.setdefault(bucket, []).append(subject)
        return cls(entries)

    def to_records(self) -> List[Dict[str, Any]]:
        return [
            {
                "catalog_key": bucket,
                "key": subject.key,
                "name": subject.name,
                "fields": [
                    {"id": item.id, "label": item.label, "min": item.min, "max": item.max}
                    for item in subject.fields
                ],
                "formula": subject.formula.to_dict(),
            }
            for bucket, subjects in self._entries.items()
            for subject in subjects
        ]

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def levels(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(level_of(key) for key in self._entries))

    def subjects_for(self, level: Optional[str], branch: Optional[str] = None) -> Tuple[Subject, ...]:
        return self._entries.get(catalog_key(level, branch), ())

    @staticmethod
    def empty_message(level: Optional[str], branch: Optional[str]) -> str:
        return f"No subjects found for {level} ({branch})"

    def find(self, level: Optional[str], subject_key: str) -> Optional[Subject]:
        normalized = normalize_level(level)
        for bucket, subjects in self._entries.items():
            if level_of(bucket) != normalized:
                continue
            for subject in subjects:
                if subject.key == subject_key:
                    return subject
        return None

    def __len__(self) -> int:
        return sum(len(subjects) for subjects in self._entries.values())

    def __iter__(self):
        for bucket, subjects in self._entries.items():
            for subject in subjects:
                yield bucket, subject
