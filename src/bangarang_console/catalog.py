"""Listing and deletion of stored escalations and policies."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from .async_tasks import Executor
from .errors import AuthenticationError
from .integrations.api import ApiClient
from .utils import get_logger

logger = get_logger("catalog")

ErrorHandler = Callable[[str, Exception], None]


class ConfigCatalog:
    """Named configuration objects of one kind as currently stored server-side."""

    def __init__(
        self,
        kind: str,
        list_fn: Callable[[], Dict[str, Any]],
        delete_fn: Callable[[str], None],
        executor: Executor,
        *,
        on_update: Optional[Callable[[Dict[str, Any]], None]] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> None:
        self._kind = kind
        self._list = list_fn
        self._delete = delete_fn
        self._executor = executor
        self._on_update = on_update
        self._on_error = on_error
        self._entries: Dict[str, Any] = {}

    @classmethod
    def escalations(cls, client: ApiClient, executor: Executor, **kwargs: Any) -> "ConfigCatalog":
        return cls("escalation", client.list_escalations, client.delete_escalation, executor, **kwargs)

    @classmethod
    def policies(cls, client: ApiClient, executor: Executor, **kwargs: Any) -> "ConfigCatalog":
        return cls("policy", client.list_policies, client.delete_policy, executor, **kwargs)

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def entries(self) -> Dict[str, Any]:
        return dict(self._entries)

    def names(self) -> List[str]:
        return sorted(self._entries)

    def refresh(self) -> None:
        def done(result: Optional[Dict[str, Any]], error: Optional[Exception]) -> None:
            if error:
                logger.warning("Listing %s configs failed: %s", self._kind, error)
                if isinstance(error, AuthenticationError) and self._on_error:
                    self._on_error(f"{self._kind.title()} Listing", error)
                return
            self._entries = dict(result or {})
            if self._on_update:
                self._on_update(self.entries)

        self._executor.submit(self._list, done)

    def remove(self, name: str) -> None:
        def job() -> None:
            self._delete(name)

        def done(_: object, error: Optional[Exception]) -> None:
            if error:
                logger.warning("Deleting %s %s failed: %s", self._kind, name, error)
                if self._on_error:
                    self._on_error(f"Delete {self._kind.title()}", error)
                return
            logger.info("Deleted %s %s", self._kind, name)
            self.refresh()

        self._executor.submit(job, done)
