"""로그인/로그아웃 Presenter 로직."""

from __future__ import annotations

from typing import Callable

from ..session import SessionStore
from ..views.main_view import ConsoleView


class SessionPresenter:
    def __init__(
        self,
        view: ConsoleView,
        session: SessionStore,
        error_handler: Callable[[str, Exception], None],
    ) -> None:
        self._view = view
        self._session = session
        self._handle_error = error_handler

    def handle_login(self) -> None:
        form = self._view.get_login_form()
        if not form.username or not form.password:
            self._view.show_warning("Login", "Enter a username and a password.")
            return
        self._view.set_login_busy(True)

        def failed(title: str, error: Exception) -> None:
            self._view.set_login_busy(False)
            self._handle_error(title, error)

        self._session.login(form.username, form.password, on_error=failed)

    def handle_logout(self) -> None:
        self._session.logout()
