from typing import Callable
import flet as ft

from gradeplanner.core.catalog import LEVELS
from gradeplanner.state.app_state import AppState

BRANCHES = (("data-science", "Data Science"), ("electronic-systems", "Electronic Systems"))


def build_home_view(
    page: ft.Page,
    app_state: AppState,
    on_grade_calculator: Callable[[], None],
    on_marks_predictor: Callable[[], None],
    on_cgpa: Callable[[], None],
) -> ft.View:
    subject_count = ft.Text()

    def refresh_count() -> None:
        subjects = app_state.subjects()
        if subjects:
            subject_count.value = f"{len(subjects)} subjects available"
        else:
            subject_count.value = app_state.catalog.empty_message(app_state.level, app_state.branch)

    def on_selection_change(_) -> None:
        app_state.select(level.value or app_state.level, branch.value or app_state.branch)
        refresh_count()
        page.update()

    level = ft.Dropdown(
        width=220,
        label="Level",
        value=app_state.level,
        options=[ft.dropdown.Option(item, item.title()) for item in LEVELS],
        on_change=on_selection_change,
    )
    branch = ft.Dropdown(
        width=260,
        label="Branch",
        value=app_state.branch,
        options=[ft.dropdown.Option(value, label) for value, label in BRANCHES],
        on_change=on_selection_change,
    )

    refresh_count()

    return ft.View(
        route="/",
        controls=[
            ft.AppBar(title=ft.Text("GradePlanner")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    controls=[
                        ft.Text("IITM BS Grade Tools", size=22, weight=ft.FontWeight.BOLD),
                        ft.Row(controls=[level, branch]),
                        subject_count,
                        ft.Row(
                            controls=[
                                ft.ElevatedButton("Grade Calculator", on_click=lambda _: on_grade_calculator()),
                                ft.ElevatedButton("Marks Predictor", on_click=lambda _: on_marks_predictor()),
                                ft.ElevatedButton("CGPA Calculator", on_click=lambda _: on_cgpa()),
                            ]
                        ),
                    ]
                ),
            ),
        ],
    )
