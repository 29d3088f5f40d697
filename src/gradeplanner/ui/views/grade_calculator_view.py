from typing import Callable
import flet as ft

from gradeplanner.core.evaluator import FormulaEvaluator, SubjectNotFound
from gradeplanner.core.report import grade_share_text
from gradeplanner.state.app_state import AppState
from gradeplanner.ui.views.common import build_score_fields, subject_dropdown


def build_grade_calculator_view(page: ft.Page, app_state: AppState, on_back: Callable[[], None]) -> ft.View:
    evaluator = FormulaEvaluator(app_state.catalog)
    form = app_state.grade_calculator

    status = ft.Text(color=ft.Colors.RED_400)
    score_text = ft.Text(size=28, weight=ft.FontWeight.BOLD)
    grade_text = ft.Text()
    formula_text = ft.Text(italic=True, color=ft.Colors.GREY_600)
    assessment_fields = ft.Column(spacing=10)
    result_card = ft.Card(visible=False, content=ft.Container(padding=16, content=ft.Column([score_text, grade_text])))

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def render_result() -> None:
        result = form.result
        result_card.visible = result is not None
        if result is not None:
            score_text.value = f"{result.score:g}%"
            grade_text.value = f"Grade {result.letter} | {result.points} points"

    def build_assessment_fields() -> None:
        assessment_fields.controls.clear()
        formula_text.value = ""
        subject = evaluator.subject(app_state.level, form.subject_key) if form.subject_key else None
        if subject is None:
            return
        formula_text.value = f"T = {subject.formula}"
        assessment_fields.controls.extend(build_score_fields(subject, form, page).values())

    def on_subject_change(e: ft.ControlEvent) -> None:
        form.select_subject(e.control.value)
        set_status("")
        build_assessment_fields()
        render_result()
        page.update()

    def on_calculate(_) -> None:
        outcome = form.calculate(evaluator, app_state.level)
        if outcome is None:
            set_status("Select a subject first.")
        elif isinstance(outcome, SubjectNotFound):
            set_status(outcome.message)
        else:
            set_status("")
        render_result()
        page.update()

    def on_reset(_) -> None:
        form.reset()
        set_status("")
        build_assessment_fields()
        render_result()
        page.update()

    def on_share(_) -> None:
        if form.result is None:
            return
        page.set_clipboard(grade_share_text(form.result))
        set_status("Copied to clipboard.", is_error=False)
        page.update()

    subjects = app_state.subjects()
    subject = subject_dropdown(subjects, form.subject_key, on_subject_change)
    empty_state = ft.Text(app_state.catalog.empty_message(app_state.level, app_state.branch), visible=not subjects)

    build_assessment_fields()
    render_result()

    return ft.View(
        route="/grade-calculator",
        controls=[
            ft.AppBar(title=ft.Text("GradePlanner - Grade Calculator")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Row(controls=[ft.Button("Back", on_click=lambda _: on_back())]),
                        ft.Text("Grade Calculator", size=22, weight=ft.FontWeight.BOLD),
                        subject,
                        empty_state,
                        formula_text,
                        assessment_fields,
                        ft.Row(
                            controls=[
                                ft.Button("Calculate", on_click=on_calculate),
                                ft.OutlinedButton("Reset", on_click=on_reset),
                                ft.TextButton("Share", on_click=on_share),
                            ]
                        ),
                        status,
                        result_card,
                    ],
                ),
            ),
        ],
    )
