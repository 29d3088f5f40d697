from typing import Callable
import flet as ft

from gradeplanner.core.catalog import END_TERM_FIELD
from gradeplanner.core.evaluator import SubjectNotFound
from gradeplanner.core.predictor import PredictionResult, Predictor
from gradeplanner.core.report import prediction_share_text, prediction_summary, prediction_table
from gradeplanner.state.app_state import AppState
from gradeplanner.ui.views.common import build_score_fields, subject_dropdown

# the end-term is solved for; bonuses are left out so predictions assume none
HIDDEN_FIELDS = (END_TERM_FIELD, "Bonus")


def _result_card(grade: str, result: PredictionResult) -> ft.Card:
    if result.guaranteed:
        headline, color = "Secured", ft.Colors.GREEN_400
    elif result.possible:
        headline, color = f"{result.required:g} marks", ft.Colors.BLUE_400
    else:
        headline, color = "Not Possible", ft.Colors.RED_400
    return ft.Card(
        content=ft.Container(
            padding=12,
            content=ft.Column(
                controls=[
                    ft.Row(
                        controls=[
                            ft.Text(f"Grade {grade}", weight=ft.FontWeight.BOLD, width=100),
                            ft.Text(headline, color=color, weight=ft.FontWeight.BOLD),
                        ]
                    ),
                    ft.Text(prediction_summary(grade, result)),
                ]
            ),
        )
    )


def build_marks_predictor_view(page: ft.Page, app_state: AppState, on_back: Callable[[], None]) -> ft.View:
    predictor = Predictor(app_state.catalog)
    form = app_state.predictor

    status = ft.Text(color=ft.Colors.RED_400)
    assessment_fields = ft.Column(spacing=10)
    results_list = ft.Column(spacing=8)

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def render_results() -> None:
        results_list.controls.clear()
        if not form.results:
            return
        for grade, result in form.results.items():
            results_list.controls.append(_result_card(grade, result))

    def build_assessment_fields() -> None:
        assessment_fields.controls.clear()
        subject = app_state.catalog.find(app_state.level, form.subject_key) if form.subject_key else None
        if subject is None:
            return
        assessment_fields.controls.extend(build_score_fields(subject, form, page, skip=HIDDEN_FIELDS).values())

    def on_subject_change(e: ft.ControlEvent) -> None:
        form.select_subject(e.control.value)
        set_status("")
        build_assessment_fields()
        render_results()
        page.update()

    def on_calculate(_) -> None:
        outcome = form.calculate(predictor, app_state.level)
        if outcome is None:
            set_status("Select a subject first.")
        elif isinstance(outcome, SubjectNotFound):
            set_status(outcome.message)
        else:
            set_status("")
        render_results()
        page.update()

    def on_reset(_) -> None:
        form.reset()
        set_status("")
        build_assessment_fields()
        render_results()
        page.update()

    def on_share(_) -> None:
        if not form.results:
            return
        lines = [prediction_share_text(grade, result) for grade, result in form.results.items()]
        page.set_clipboard(prediction_table(form.results) + "\n\n" + "\n".join(lines))
        set_status("Copied to clipboard.", is_error=False)
        page.update()

    subjects = app_state.subjects()
    subject = subject_dropdown(subjects, form.subject_key, on_subject_change)
    empty_state = ft.Text(app_state.catalog.empty_message(app_state.level, app_state.branch), visible=not subjects)

    build_assessment_fields()
    render_results()

    return ft.View(
        route="/marks-predictor",
        controls=[
            ft.AppBar(title=ft.Text("GradePlanner - Marks Predictor")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Row(controls=[ft.Button("Back", on_click=lambda _: on_back())]),
                        ft.Text("Marks Predictor", size=22, weight=ft.FontWeight.BOLD),
                        subject,
                        empty_state,
                        ft.Text("Enter your internal scores", weight=ft.FontWeight.BOLD),
                        assessment_fields,
                        ft.Row(
                            controls=[
                                ft.Button("Predict", on_click=on_calculate),
                                ft.OutlinedButton("Reset", on_click=on_reset),
                                ft.TextButton("Share", on_click=on_share),
                            ]
                        ),
                        status,
                        ft.Divider(),
                        ft.Text("Required End Term Score", size=20, weight=ft.FontWeight.BOLD),
                        results_list,
                    ],
                ),
            ),
        ],
    )
