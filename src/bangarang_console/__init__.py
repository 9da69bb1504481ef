"""bangarang operator console 패키지."""

from .app import run_app
from .presenters.main_presenter import ConsolePresenter
from .views.main_view import ConsoleView

__all__ = ["run_app", "ConsolePresenter", "ConsoleView"]
