"""Session token lifecycle gating every API call."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional

from .async_tasks import Executor
from .storage import LOGGED_IN_KEY, TOKEN_KEY, ClientStorage
from .utils import get_logger

if TYPE_CHECKING:
    from .integrations.api import ApiClient

logger = get_logger("session")

ErrorHandler = Callable[[str, Exception], None]


class SessionStore:
    """Owns the auth token; the API client reads it on every request.

    A successful ``login`` or any ``logout`` fires the reload listeners so the
    pollers and fetchers composed by the view re-initialize.
    """

    def __init__(self, storage: ClientStorage, executor: Executor) -> None:
        self._storage = storage
        self._executor = executor
        self._client: Optional["ApiClient"] = None
        self._token: Optional[str] = None
        self._logged_in = False
        self._reload_listeners: List[Callable[[], None]] = []
        self.restore()

    def bind(self, client: "ApiClient") -> None:
        """Attach the client used for the auth endpoint."""
        self._client = client

    @property
    def logged_in(self) -> bool:
        return self._logged_in

    @property
    def storage(self) -> ClientStorage:
        return self._storage

    def current_token(self) -> Optional[str]:
        return self._token

    def restore(self) -> None:
        token = self._storage.get(TOKEN_KEY)
        if isinstance(token, str) and token:
            self._token = token
            self._logged_in = bool(self._storage.get(LOGGED_IN_KEY, True))
        else:
            self._token = None
            self._logged_in = False

    def on_reload(self, listener: Callable[[], None]) -> None:
        self._reload_listeners.append(listener)

    def login(
        self,
        username: str,
        password: str,
        *,
        on_error: Optional[ErrorHandler] = None,
    ) -> None:
        if self._client is None:
            raise RuntimeError("SessionStore.bind() must be called before login()")
        client = self._client

        def job() -> str:
            return client.authenticate(username, password)

        def done(token: Optional[str], error: Optional[Exception]) -> None:
            if error:
                logger.info("Login rejected for %s: %s", username, error)
                if on_error:
                    on_error("Login", error)
                return
            self._token = token
            self._logged_in = True
            self._storage.put(TOKEN_KEY, token)
            self._storage.put(LOGGED_IN_KEY, True)
            logger.info("Logged in as %s", username)
            self._reload()

        self._executor.submit(job, done)

    def logout(self) -> None:
        self._token = None
        self._logged_in = False
        self._storage.remove(TOKEN_KEY)
        self._storage.remove(LOGGED_IN_KEY)
        logger.info("Session cleared")
        self._reload()

    def _reload(self) -> None:
        for listener in list(self._reload_listeners):
            listener()
