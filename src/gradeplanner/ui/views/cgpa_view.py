from typing import Callable
import flet as ft

from gradeplanner.core.gpa import GRADE_OPTIONS
from gradeplanner.core.report import cgpa_report
from gradeplanner.state.app_state import AppState


def _build_bar(count: int, total: int) -> ft.Container:
    width = max(4, int(220 * (count / total))) if total else 4
    return ft.Container(width=width, height=12, bgcolor=ft.Colors.BLUE_400, border_radius=6)


def build_cgpa_view(page: ft.Page, app_state: AppState, on_back: Callable[[], None]) -> ft.View:
    state = app_state.cgpa

    status = ft.Text(color=ft.Colors.RED_400)
    sgpa_text = ft.Text()
    cgpa_text = ft.Text(size=28, weight=ft.FontWeight.BOLD)
    tier_text = ft.Text()
    totals_text = ft.Text()
    projection_text = ft.Text()
    course_list = ft.Column(spacing=8)
    distribution_list = ft.Column(spacing=6)

    current_cgpa = ft.TextField(label="Current CGPA", width=200, value=state.current_cgpa)
    credits_completed = ft.TextField(label="Credits Completed", width=200, value=state.credits_completed)
    subjects_completed = ft.TextField(label="Subjects Completed", width=200, value=state.subjects_completed)
    target_cgpa = ft.TextField(label="Target CGPA", width=200, value=state.target_cgpa)
    future_credits = ft.TextField(label="Future Credits", width=200, value=state.future_credits)

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def render_summary() -> None:
        summary = state.summary
        sgpa_text.value = f"Semester GPA: {summary.semester_gpa:.2f}"
        cgpa_text.value = f"CGPA: {summary.cumulative_cgpa:.2f}"
        tier_text.value = summary.tier
        totals_text.value = f"Total credits: {summary.total_credits:g} | Total subjects: {summary.total_subjects}"

        distribution_list.controls.clear()
        for bucket, count in summary.distribution.items():
            distribution_list.controls.append(
                ft.Row(
                    controls=[
                        ft.Text(bucket, width=80),
                        _build_bar(count, len(state.courses)),
                        ft.Text(str(count)),
                    ]
                )
            )

        projection = state.projection
        if projection is None:
            projection_text.value = ""
        elif projection.required_gpa is None:
            projection_text.value = "Enter future credits to project your target."
        elif projection.possible:
            projection_text.value = f"Required GPA over future credits: {projection.required_gpa:.2f}"
        else:
            projection_text.value = f"Target needs a GPA of {projection.required_gpa:.2f}, which is out of range."

    def refresh() -> None:
        render_courses()
        render_summary()
        page.update()

    def make_course_handler(index: int, name: str) -> Callable[[ft.ControlEvent], None]:
        def handler(e: ft.ControlEvent) -> None:
            state.update_course(index, **{name: e.control.value or ""})
            render_summary()
            page.update()

        return handler

    def make_remove_handler(index: int) -> Callable[[ft.ControlEvent], None]:
        def handler(_) -> None:
            if not state.remove_course(index):
                set_status("At least one course is required.")
            else:
                set_status("")
            refresh()

        return handler

    def render_courses() -> None:
        course_list.controls.clear()
        for index, course in enumerate(state.courses):
            course_list.controls.append(
                ft.Row(
                    controls=[
                        ft.TextField(value=course.name, width=220, on_change=make_course_handler(index, "name")),
                        ft.TextField(
                            label="Credits",
                            value=str(course.credits),
                            width=100,
                            on_change=make_course_handler(index, "credits"),
                        ),
                        ft.Dropdown(
                            width=140,
                            label="Grade",
                            value=course.grade,
                            options=[ft.dropdown.Option(value, label) for value, label in GRADE_OPTIONS],
                            on_change=make_course_handler(index, "grade"),
                        ),
                        ft.TextButton("Remove", on_click=make_remove_handler(index)),
                    ]
                )
            )

    def on_prior_change(_) -> None:
        state.set_prior(current_cgpa.value or "", credits_completed.value or "", subjects_completed.value or "")
        render_summary()
        page.update()

    def on_target_change(_) -> None:
        state.set_target(target_cgpa.value or "", future_credits.value or "")
        render_summary()
        page.update()

    def on_add(_) -> None:
        state.add_course()
        set_status("")
        refresh()

    def on_reset(_) -> None:
        state.reset()
        for control in (current_cgpa, credits_completed, subjects_completed, target_cgpa, future_credits):
            control.value = ""
        set_status("")
        refresh()

    def on_export(_) -> None:
        page.set_clipboard(cgpa_report(state.summary, state.courses, state.projection))
        set_status("Report copied to clipboard.", is_error=False)
        page.update()

    for control in (current_cgpa, credits_completed, subjects_completed):
        control.on_change = on_prior_change
    for control in (target_cgpa, future_credits):
        control.on_change = on_target_change

    render_courses()
    render_summary()

    return ft.View(
        route="/cgpa",
        controls=[
            ft.AppBar(title=ft.Text("GradePlanner - CGPA Calculator")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Row(controls=[ft.Button("Back", on_click=lambda _: on_back())]),
                        ft.Text("CGPA Calculator", size=22, weight=ft.FontWeight.BOLD),
                        ft.Row(controls=[current_cgpa, credits_completed, subjects_completed]),
                        ft.Divider(),
                        ft.Text("This Semester", size=20, weight=ft.FontWeight.BOLD),
                        course_list,
                        ft.Row(
                            controls=[
                                ft.Button("Add Course", on_click=on_add),
                                ft.OutlinedButton("Reset", on_click=on_reset),
                                ft.TextButton("Copy Report", on_click=on_export),
                            ]
                        ),
                        status,
                        ft.Divider(),
                        cgpa_text,
                        tier_text,
                        sgpa_text,
                        totals_text,
                        ft.Text("Grade Distribution", size=20, weight=ft.FontWeight.BOLD),
                        distribution_list,
                        ft.Divider(),
                        ft.Text("Target Planner", size=20, weight=ft.FontWeight.BOLD),
                        ft.Row(controls=[target_cgpa, future_credits]),
                        projection_text,
                    ],
                ),
            ),
        ],
    )
