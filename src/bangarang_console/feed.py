"""Live incident feed polled from the bangarang server."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .async_tasks import Executor, IntervalTimer
from .config import DEFAULT_POLL_INTERVAL_MS
from .errors import AuthenticationError
from .integrations.api import ApiClient
from .models import Incident, IncidentEntry
from .utils import get_logger

logger = get_logger("feed")

ErrorHandler = Callable[[str, Exception], None]


def sort_incidents(incidents: Dict[str, Incident]) -> List[IncidentEntry]:
    """Order incidents by status (CRITICAL first), then most recent first."""
    entries = [IncidentEntry(key=key, value=value) for key, value in incidents.items()]
    entries.sort(key=lambda entry: (entry.value.status, entry.value.time), reverse=True)
    return entries


class IncidentFeed:
    """Keeps the active incident list in sync with the server.

    Ticks are scheduled at a fixed interval regardless of whether the previous
    fetch completed. Overlapping fetches are allowed and the response that
    completes last replaces the list.
    """

    def __init__(
        self,
        client: ApiClient,
        executor: Executor,
        timer: IntervalTimer,
        *,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        on_update: Optional[Callable[[List[IncidentEntry]], None]] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> None:
        self._client = client
        self._executor = executor
        self._timer = timer
        self._interval_ms = interval_ms
        self._on_update = on_update
        self._on_error = on_error
        self._incidents: List[IncidentEntry] = []
        self._polling = False

    @property
    def incidents(self) -> List[IncidentEntry]:
        return list(self._incidents)

    @property
    def polling(self) -> bool:
        return self._polling

    def start(self) -> None:
        self.fetch()
        if not self._polling:
            self._polling = True
            self._timer.start(self._interval_ms, self.fetch)
            logger.info("Polling incidents every %sms", self._interval_ms)

    def stop(self) -> None:
        if not self._polling:
            return
        self._timer.stop()
        self._polling = False
        logger.info("Incident polling stopped")

    def reset(self) -> None:
        """Drop the displayed list, e.g. after the session changed."""
        self._incidents = []
        if self._on_update:
            self._on_update(self.incidents)

    def fetch(self) -> None:
        self._executor.submit(self._client.list_incidents, self._fetched)

    def resolve(self, key: str) -> None:
        def job() -> None:
            self._client.resolve_incident(key)

        def done(_: object, error: Optional[Exception]) -> None:
            if error:
                logger.warning("Resolving incident %s failed: %s", key, error)
                self._report("Resolve Incident", error)
                return
            logger.info("Resolved incident %s", key)
            self.fetch()

        self._executor.submit(job, done)

    def _fetched(self, result: Optional[Dict[str, Incident]], error: Optional[Exception]) -> None:
        if error:
            # keep the previous list; the next tick retries
            logger.warning("Incident fetch failed: %s", error)
            if isinstance(error, AuthenticationError):
                self._report("Incidents", error)
            return
        self._incidents = sort_incidents(result or {})
        if self._on_update:
            self._on_update(self.incidents)

    def _report(self, title: str, error: Exception) -> None:
        if self._on_error:
            self._on_error(title, error)
