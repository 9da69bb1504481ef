"""Incident dashboard Presenter 로직."""

from __future__ import annotations

from typing import Callable, List

from ..async_tasks import Executor, IntervalTimer
from ..display import format_description, format_stats, status_color, status_label
from ..feed import IncidentFeed
from ..integrations.api import ApiClient
from ..models import IncidentEntry, IncidentRow, SystemStats
from ..stats import SystemStatsProbe
from ..utils import timestamp
from ..views.main_view import ConsoleView
from .state import PresenterState


class DashboardPresenter:
    def __init__(
        self,
        view: ConsoleView,
        state: PresenterState,
        client: ApiClient,
        executor: Executor,
        timer: IntervalTimer,
        error_handler: Callable[[str, Exception], None],
        *,
        interval_ms: int,
    ) -> None:
        self._view = view
        self._state = state
        self._feed = IncidentFeed(
            client,
            executor,
            timer,
            interval_ms=interval_ms,
            on_update=self._render_incidents,
            on_error=error_handler,
        )
        self._stats = SystemStatsProbe(client, executor, on_update=self._render_stats)

    @property
    def feed(self) -> IncidentFeed:
        return self._feed

    # region 이벤트 핸들러
    def handle_start(self) -> None:
        self._state.polling_requested = True
        self._feed.start()
        self._stats.refresh()
        self._view.set_polling(True)

    def handle_stop(self) -> None:
        self._state.polling_requested = False
        self._feed.stop()
        self._view.set_polling(False)

    def handle_resolve(self, key: str) -> None:
        if not key:
            return
        self._view.append_feed(f"[{timestamp()}] Resolving incident {key}")
        self._feed.resolve(key)

    # endregion

    def reload(self, logged_in: bool) -> None:
        self._feed.stop()
        self._feed.reset()
        if logged_in and self._state.polling_requested:
            self.handle_start()
        else:
            self._view.set_polling(False)

    def _render_incidents(self, entries: List[IncidentEntry]) -> None:
        rows = [
            IncidentRow(
                key=entry.key,
                label=status_label(entry.value.status) or str(entry.value.status),
                color=status_color(entry.value.status) or "",
                description=format_description(entry.value),
            )
            for entry in entries
        ]
        self._view.render_incidents(rows)

    def _render_stats(self, stats: SystemStats) -> None:
        self._view.set_stats_text(format_stats(stats))
