import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import unquote

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from bangarang_console.async_tasks import InlineExecutor
from bangarang_console.integrations.api import ApiClient
from bangarang_console.session import SessionStore
from bangarang_console.storage import ClientStorage

BASE_URL = "http://bang.test/"
_NULL = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, raw: Optional[str] = None) -> None:
        self.status_code = status_code
        if raw is not None:
            self.content = raw.encode("utf-8")
        elif body is None:
            self.content = b""
        elif body is _NULL:
            self.content = b"null"
        else:
            self.content = json.dumps(body).encode("utf-8")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.content.decode("utf-8"))


@dataclass
class Call:
    method: str
    url: str
    path: str
    headers: Dict[str, str]
    json: Any = None
    params: Optional[Dict[str, str]] = None


@dataclass
class FakeServer:
    """In-memory stand-in for the bangarang HTTP API behind a requests.Session."""

    incidents: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    escalations: Optional[Dict[str, Any]] = None
    policies: Dict[str, Any] = field(default_factory=dict)
    snapshots: List[Dict[str, str]] = field(default_factory=list)
    current: Optional[str] = None
    users: Dict[str, str] = field(default_factory=lambda: {"admin": "secret"})
    token: str = "tok-123"
    stats: Dict[str, Any] = field(
        default_factory=lambda: {
            "memory": {"used": 512, "free": 512, "total": 1024},
            "load": {"one": 0.5, "five": 0.25, "fifteen": 0.125},
            "uptime": 3725.0,
        }
    )
    calls: List[Call] = field(default_factory=list)
    failures: Dict[Tuple[str, str], int] = field(default_factory=dict)
    overrides: Dict[Tuple[str, str], FakeResponse] = field(default_factory=dict)
    raise_on: Optional[Callable[[Call], Optional[Exception]]] = None

    def request(self, method, url, headers=None, json=None, params=None, timeout=None):
        path = unquote(url[len(BASE_URL):])
        call = Call(method, url, path, dict(headers or {}), json, params)
        self.calls.append(call)
        if self.raise_on is not None:
            error = self.raise_on(call)
            if error is not None:
                raise error
        if (method, path) in self.overrides:
            return self.overrides[(method, path)]
        if (method, path) in self.failures:
            return FakeResponse(self.failures[(method, path)], raw="failure")
        return self._route(method, path, json, params or {})

    def calls_to(self, method: str, prefix: str) -> List[Call]:
        return [call for call in self.calls if call.method == method and call.path.startswith(prefix)]

    def _route(self, method: str, path: str, body: Any, params: Dict[str, str]) -> FakeResponse:
        if path == "api/auth/user":
            if self.users.get(params.get("user", "")) == params.get("pass"):
                return FakeResponse(200, {"token": self.token})
            return FakeResponse(401, raw="bad credentials")
        if path == "api/stats/system":
            return FakeResponse(200, self.stats)
        if path == "api/incident/*":
            return FakeResponse(200, self.incidents)
        if path.startswith("api/incident/") and method == "DELETE":
            self.incidents.pop(path[len("api/incident/"):], None)
            return FakeResponse(200)
        if path == "api/escalation/config/*":
            return FakeResponse(200, _NULL if self.escalations is None else self.escalations)
        if path.startswith("api/escalation/config/"):
            name = path[len("api/escalation/config/"):]
            if self.escalations is None:
                self.escalations = {}
            if method == "POST":
                self.escalations[name] = body
            else:
                self.escalations.pop(name, None)
            return FakeResponse(200)
        if path == "api/policy/config/*":
            return FakeResponse(200, self.policies)
        if path.startswith("api/policy/config/"):
            name = path[len("api/policy/config/"):]
            if method == "POST":
                self.policies[name] = body
            else:
                self.policies.pop(name, None)
            return FakeResponse(200)
        if path == "api/config/version/*":
            return FakeResponse(200, self.snapshots)
        if path.startswith("api/config/version/") and method == "POST":
            self.current = path[len("api/config/version/"):]
            return FakeResponse(200)
        return FakeResponse(404, raw="not found")


class ManualTimer:
    def __init__(self) -> None:
        self.starts: List[int] = []
        self.stops = 0
        self.callback: Optional[Callable[[], None]] = None

    @property
    def active(self) -> bool:
        return self.callback is not None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.starts.append(interval_ms)
        self.callback = callback

    def stop(self) -> None:
        self.stops += 1
        self.callback = None

    def fire(self) -> None:
        assert self.callback is not None, "timer is not running"
        self.callback()


class DeferredExecutor:
    """Queues jobs so tests can interleave completions."""

    def __init__(self) -> None:
        self.pending: List[Tuple[Callable[[], Any], Callable[[Any, Optional[Exception]], None]]] = []

    def submit(self, fn, callback) -> None:
        self.pending.append((fn, callback))

    def run(self, index: int = 0) -> None:
        fn, callback = self.pending.pop(index)
        InlineExecutor().submit(fn, callback)

    def run_all(self) -> None:
        while self.pending:
            self.run()


class Errors:
    def __init__(self) -> None:
        self.reported: List[Tuple[str, Exception]] = []

    def __call__(self, title: str, error: Exception) -> None:
        self.reported.append((title, error))


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def storage(tmp_path) -> ClientStorage:
    return ClientStorage(tmp_path / "state.json")


@pytest.fixture
def executor() -> InlineExecutor:
    return InlineExecutor()


@pytest.fixture
def session(storage, executor) -> SessionStore:
    return SessionStore(storage, executor)


@pytest.fixture
def client(server, session) -> ApiClient:
    api = ApiClient(BASE_URL, session.current_token, session=server)
    session.bind(api)
    return api


@pytest.fixture
def timer() -> ManualTimer:
    return ManualTimer()


@pytest.fixture
def errors() -> Errors:
    return Errors()
