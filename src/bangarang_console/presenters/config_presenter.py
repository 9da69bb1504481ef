"""설정 버전 이력 Presenter 로직."""

from __future__ import annotations

from typing import Callable, List

from ..async_tasks import Executor
from ..display import format_snapshot
from ..history import VersionHistory
from ..integrations.api import ApiClient
from ..models import ConfigSnapshot
from ..utils import timestamp
from ..views.main_view import ConsoleView


class ConfigPresenter:
    def __init__(
        self,
        view: ConsoleView,
        client: ApiClient,
        executor: Executor,
        error_handler: Callable[[str, Exception], None],
    ) -> None:
        self._view = view
        self._history = VersionHistory(
            client,
            executor,
            on_update=self._render_snapshots,
            on_error=error_handler,
        )

    @property
    def history(self) -> VersionHistory:
        return self._history

    def refresh(self) -> None:
        self._history.fetch_snapshots()

    def handle_revert(self, snapshot_hash: str) -> None:
        if not snapshot_hash:
            return
        if self._history.request_revert(snapshot_hash, self._view.ask_yes_no):
            self._view.append_feed(f"[{timestamp()}] Reverting config to {snapshot_hash}")

    def _render_snapshots(self, snapshots: List[ConfigSnapshot]) -> None:
        self._view.render_snapshots([(snapshot.hash, format_snapshot(snapshot)) for snapshot in snapshots])
