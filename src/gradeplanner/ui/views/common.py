from typing import Callable, Dict, Optional, Sequence
import flet as ft

from gradeplanner.core.catalog import Subject
from gradeplanner.state.calculator_state import ScoreFormState


def subject_dropdown(
    subjects: Sequence[Subject],
    value: Optional[str],
    on_change: Callable[[ft.ControlEvent], None],
) -> ft.Dropdown:
    return ft.Dropdown(
        width=420,
        label="Select Course",
        value=value,
        options=[ft.dropdown.Option(subject.key, subject.name) for subject in subjects],
        on_change=on_change,
    )


def build_score_fields(
    subject: Subject,
    form: ScoreFormState,
    page: ft.Page,
    skip: tuple = (),
) -> Dict[str, ft.TextField]:
    """One text field per subject field; rejected keystrokes snap back to the stored text."""
    field_map: Dict[str, ft.TextField] = {}

    def make_handler(field_id: str) -> Callable[[ft.ControlEvent], None]:
        def handler(e: ft.ControlEvent) -> None:
            if not form.set_input(subject, field_id, e.control.value or ""):
                e.control.value = form.inputs.get(field_id, "")
                page.update()

        return handler

    for item in subject.fields:
        if item.id in skip:
            continue
        field_map[item.id] = ft.TextField(
            label=f"{item.label} ({item.min:g}-{item.max:g})",
            width=280,
            value=form.inputs.get(item.id, ""),
            on_change=make_handler(item.id),
        )
    return field_map
