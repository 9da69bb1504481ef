"""Server health figures shown above the dashboard."""

from __future__ import annotations

from typing import Callable, Optional

from .async_tasks import Executor
from .integrations.api import ApiClient
from .models import SystemStats
from .utils import get_logger

logger = get_logger("stats")


class SystemStatsProbe:
    def __init__(
        self,
        client: ApiClient,
        executor: Executor,
        *,
        on_update: Optional[Callable[[SystemStats], None]] = None,
    ) -> None:
        self._client = client
        self._executor = executor
        self._on_update = on_update
        self._latest: Optional[SystemStats] = None

    @property
    def latest(self) -> Optional[SystemStats]:
        return self._latest

    def refresh(self) -> None:
        def done(result: Optional[SystemStats], error: Optional[Exception]) -> None:
            if error:
                logger.warning("System stats unavailable: %s", error)
                return
            self._latest = result
            if self._on_update and result is not None:
                self._on_update(result)

        self._executor.submit(self._client.system_stats, done)
