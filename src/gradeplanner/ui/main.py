import logging
import os

import flet as ft

from gradeplanner.config.logging import configure_logging
from gradeplanner.services.appwrite_service import catalog_provider
from gradeplanner.state.app_state import AppState
from gradeplanner.ui.views.cgpa_view import build_cgpa_view
from gradeplanner.ui.views.grade_calculator_view import build_grade_calculator_view
from gradeplanner.ui.views.home_view import build_home_view
from gradeplanner.ui.views.marks_predictor_view import build_marks_predictor_view

logger = logging.getLogger(__name__)


def main(page: ft.Page) -> None:
    page.title = "GradePlanner"
    app_state = AppState(catalog=catalog_provider())

    def go_home() -> None:
        page.go("/")

    def route_change(_) -> None:
        page.views.clear()
        page.views.append(
            build_home_view(
                page,
                app_state,
                on_grade_calculator=lambda: page.go("/grade-calculator"),
                on_marks_predictor=lambda: page.go("/marks-predictor"),
                on_cgpa=lambda: page.go("/cgpa"),
            )
        )
        if page.route == "/grade-calculator":
            page.views.append(build_grade_calculator_view(page, app_state, go_home))
        elif page.route == "/marks-predictor":
            page.views.append(build_marks_predictor_view(page, app_state, go_home))
        elif page.route == "/cgpa":
            page.views.append(build_cgpa_view(page, app_state, go_home))
        page.update()

    def view_pop(_) -> None:
        page.views.pop()
        page.go(page.views[-1].route)

    page.on_route_change = route_change
    page.on_view_pop = view_pop
    logger.info("starting with %d catalog keys", len(app_state.catalog.keys()))
    page.go(page.route)


def run() -> None:
    configure_logging()
    web_mode = os.getenv("GRADEPLANNER_WEB", "0") == "1"
    ft.app(
        target=main,
        view=ft.AppView.WEB_BROWSER if web_mode else ft.AppView.FLET_APP,
        port=int(os.getenv("PORT", "8550")),
    )


if __name__ == "__main__":
    run()
