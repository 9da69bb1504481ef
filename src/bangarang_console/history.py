"""Configuration version history with confirm-then-revert."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .async_tasks import Executor
from .errors import AuthenticationError
from .integrations.api import ApiClient
from .models import ConfigSnapshot
from .utils import get_logger

logger = get_logger("history")

ErrorHandler = Callable[[str, Exception], None]
Confirm = Callable[[str, str], bool]

REVERT_TITLE = "Revert Config"


def order_snapshots(snapshots: List[ConfigSnapshot]) -> List[ConfigSnapshot]:
    """Newest first: ascending sort, then reversed."""
    ordered = sorted(snapshots, key=lambda snapshot: snapshot.timestamp)
    ordered.reverse()
    return ordered


class VersionHistory:
    def __init__(
        self,
        client: ApiClient,
        executor: Executor,
        *,
        on_update: Optional[Callable[[List[ConfigSnapshot]], None]] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> None:
        self._client = client
        self._executor = executor
        self._on_update = on_update
        self._on_error = on_error
        self._snapshots: List[ConfigSnapshot] = []
        self._by_hash: Dict[str, ConfigSnapshot] = {}

    @property
    def snapshots(self) -> List[ConfigSnapshot]:
        return list(self._snapshots)

    @property
    def snapshots_by_hash(self) -> Dict[str, ConfigSnapshot]:
        return dict(self._by_hash)

    def fetch_snapshots(self) -> None:
        def done(result: Optional[List[ConfigSnapshot]], error: Optional[Exception]) -> None:
            if error:
                logger.warning("Fetching config versions failed: %s", error)
                if isinstance(error, AuthenticationError) and self._on_error:
                    self._on_error("Config Versions", error)
                return
            self._snapshots = order_snapshots(result or [])
            self._by_hash = {snapshot.hash: snapshot for snapshot in self._snapshots}
            if self._on_update:
                self._on_update(self.snapshots)

        self._executor.submit(self._client.list_snapshots, done)

    def request_revert(self, snapshot_hash: str, confirm: Confirm) -> bool:
        """Ask ``confirm`` first; only a yes leads to ``set_current``."""
        message = f"Are you sure you want to revert to config version: {snapshot_hash}"
        if not confirm(REVERT_TITLE, message):
            logger.info("Revert to %s cancelled", snapshot_hash)
            return False
        self.set_current(snapshot_hash)
        return True

    def set_current(self, snapshot_hash: str) -> None:
        def job() -> None:
            self._client.set_current_snapshot(snapshot_hash)

        def done(_: object, error: Optional[Exception]) -> None:
            if error:
                logger.warning("Revert to %s failed: %s", snapshot_hash, error)
                if self._on_error:
                    self._on_error(REVERT_TITLE, error)
                return
            logger.info("Current config version set to %s", snapshot_hash)
            self.fetch_snapshots()

        self._executor.submit(job, done)
