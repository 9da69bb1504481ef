"""bangarang console 메인 Presenter."""

from __future__ import annotations

from typing import Optional

from ..async_tasks import AsyncExecutor, Executor, IntervalTimer, QtIntervalTimer
from ..config import get_settings
from ..errors import AuthenticationError
from ..integrations.api import ApiClient
from ..session import SessionStore
from ..utils import get_logger, timestamp
from ..views.main_view import ConsoleView
from .config_presenter import ConfigPresenter
from .dashboard_presenter import DashboardPresenter
from .escalation_presenter import EscalationPresenter
from .policy_presenter import PolicyPresenter
from .session_presenter import SessionPresenter
from .state import PresenterState

logger = get_logger("console")


class ConsolePresenter:
    def __init__(
        self,
        view: ConsoleView,
        session: SessionStore,
        client: ApiClient,
        *,
        executor: Optional[Executor] = None,
        timer: Optional[IntervalTimer] = None,
        interval_ms: Optional[int] = None,
    ) -> None:
        self._view = view
        self._session = session
        self._executor = executor or AsyncExecutor()
        self._state = PresenterState()
        self._auth_lost = False

        self._login = SessionPresenter(view, session, self._handle_error)
        self._dashboard = DashboardPresenter(
            view,
            self._state,
            client,
            self._executor,
            timer or QtIntervalTimer(view),
            self._handle_error,
            interval_ms=interval_ms or get_settings().poll_interval_ms,
        )
        self._policies = PolicyPresenter(view, client, self._executor, self._handle_error)
        self._escalations = EscalationPresenter(
            view,
            client,
            self._executor,
            self._handle_error,
            on_names_changed=self._policies.set_escalation_targets,
        )
        self._config = ConfigPresenter(view, client, self._executor, self._handle_error)

        self._connect_signals()
        session.on_reload(self.reload)
        self._restore_tabs()
        self.reload()

    # region Signal 연결
    def _connect_signals(self) -> None:
        self._view.login_requested.connect(self._login.handle_login)
        self._view.logout_requested.connect(self._login.handle_logout)

        self._view.polling_start_requested.connect(self._dashboard.handle_start)
        self._view.polling_stop_requested.connect(self._dashboard.handle_stop)
        self._view.resolve_requested.connect(self._dashboard.handle_resolve)

        self._view.escalation_type_selected.connect(self._escalations.handle_type_selected)
        self._view.escalation_step_add_requested.connect(self._escalations.handle_add_step)
        self._view.escalation_step_remove_requested.connect(self._escalations.handle_remove_step)
        self._view.escalation_submit_requested.connect(self._escalations.handle_submit)
        self._view.escalation_cancel_requested.connect(self._escalations.handle_cancel)
        self._view.escalation_delete_requested.connect(self._escalations.handle_delete)

        self._view.policy_chip_add_requested.connect(self._policies.handle_add_chip)
        self._view.policy_chip_remove_requested.connect(self._policies.handle_remove_chip)
        self._view.policy_submit_requested.connect(self._policies.handle_submit)
        self._view.policy_cancel_requested.connect(self._policies.handle_cancel)
        self._view.policy_delete_requested.connect(self._policies.handle_delete)

        self._view.snapshots_refresh_requested.connect(self._config.refresh)
        self._view.revert_requested.connect(self._config.handle_revert)

        self._view.tab_selected.connect(self._session.storage.select_tab)

    # endregion

    def reload(self) -> None:
        """Re-initialize every poller and fetcher after a session change."""
        logged_in = self._session.logged_in
        self._auth_lost = False
        self._view.show_logged_in(logged_in)
        self._view.set_login_busy(False)
        self._dashboard.reload(logged_in)
        if not logged_in:
            return
        self._escalations.refresh()
        self._policies.refresh()
        self._config.refresh()

    def _restore_tabs(self) -> None:
        storage = self._session.storage
        for screen in self._view.TAB_SCREENS:
            self._view.select_tab(screen, storage.selected_tab(screen))

    def _handle_error(self, title: str, error: Exception) -> None:
        message = str(error) or error.__class__.__name__
        logger.info("%s: %s", title, message)
        self._view.append_feed(f"[{timestamp()}] ERROR {title}: {message}")
        session_rejected = isinstance(error, AuthenticationError) and title != "Login"
        if session_rejected and self._auth_lost:
            # already on the login page; one dialog per lost session
            return
        self._view.show_error(title, message)
        if session_rejected:
            # the view forces a fresh login; the stored token is kept until then
            self._auth_lost = True
            self._dashboard.feed.stop()
            self._view.set_polling(False)
            self._view.show_logged_in(False)
