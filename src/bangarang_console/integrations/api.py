"""bangarang REST API 클라이언트."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

from ..errors import AuthenticationError, RequestError
from ..models import ConfigSnapshot, EscalationConfig, Incident, PolicyConfig, SystemStats
from ..utils import get_logger
from ..wire import IncidentBody, LoginResponse, SnapshotBody, SystemStatsBody

SESSION_HEADER_NAME = "BANG_SESSION"

logger = get_logger("api")

TokenProvider = Callable[[], Optional[str]]


def _segment(value: str) -> str:
    return quote(value, safe="")


class ApiClient:
    """Thin wrapper over the bangarang HTTP API.

    The session token is read from ``token_provider`` on every request and
    sent in the ``BANG_SESSION`` header; it is never placed in the URL.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    # region 인시던트
    def list_incidents(self) -> Dict[str, Incident]:
        data = self._get_json("api/incident/*", "Incident listing")
        if _is_empty(data):
            return {}
        if not isinstance(data, dict):
            raise RequestError("Incident listing returned an unexpected body")
        try:
            return {key: IncidentBody.model_validate(body).to_model() for key, body in data.items()}
        except ValidationError as exc:
            raise RequestError(f"Incident listing contained a malformed incident: {exc}") from exc

    def resolve_incident(self, key: str) -> None:
        self._send("DELETE", f"api/incident/{_segment(key)}", "Incident resolve")

    # endregion

    # region 에스컬레이션 / 정책 설정
    def list_escalations(self) -> Dict[str, List[Dict[str, Any]]]:
        data = self._get_json("api/escalation/config/*", "Escalation listing")
        if _is_empty(data):
            return {}
        if not isinstance(data, dict):
            raise RequestError("Escalation listing returned an unexpected body")
        return data

    def submit_escalation(self, escalation: EscalationConfig) -> None:
        self._send(
            "POST",
            f"api/escalation/config/{_segment(escalation.name)}",
            "Escalation submit",
            json=escalation.to_payload(),
        )

    def delete_escalation(self, name: str) -> None:
        self._send("DELETE", f"api/escalation/config/{_segment(name)}", "Escalation delete")

    def list_policies(self) -> Dict[str, Dict[str, Any]]:
        data = self._get_json("api/policy/config/*", "Policy listing")
        if _is_empty(data):
            return {}
        if not isinstance(data, dict):
            raise RequestError("Policy listing returned an unexpected body")
        return data

    def submit_policy(self, policy: PolicyConfig) -> None:
        self._send(
            "POST",
            f"api/policy/config/{_segment(policy.name)}",
            "Policy submit",
            json=policy.to_payload(),
        )

    def delete_policy(self, name: str) -> None:
        self._send("DELETE", f"api/policy/config/{_segment(name)}", "Policy delete")

    # endregion

    # region 설정 버전
    def list_snapshots(self) -> List[ConfigSnapshot]:
        data = self._get_json("api/config/version/*", "Config version listing")
        if _is_empty(data):
            return []
        if not isinstance(data, list):
            raise RequestError("Config version listing returned an unexpected body")
        try:
            return [SnapshotBody.model_validate(item).to_model() for item in data]
        except ValidationError as exc:
            raise RequestError(f"Config version listing contained a malformed entry: {exc}") from exc

    def set_current_snapshot(self, snapshot_hash: str) -> None:
        self._send("POST", f"api/config/version/{_segment(snapshot_hash)}", "Config revert")

    # endregion

    # region 인증 / 시스템
    def authenticate(self, username: str, password: str) -> str:
        response = self._request(
            "GET",
            "api/auth/user",
            "Login",
            params={"user": username, "pass": password},
        )
        try:
            return LoginResponse.model_validate(response.json()).token
        except (ValueError, ValidationError) as exc:
            # a malformed login body is treated like rejected credentials
            raise AuthenticationError("Login returned no session token") from exc

    def system_stats(self) -> SystemStats:
        data = self._get_json("api/stats/system", "System stats")
        try:
            return SystemStatsBody.model_validate(data or {}).to_model()
        except ValidationError as exc:
            raise RequestError(f"System stats returned a malformed body: {exc}") from exc

    # endregion

    # region 내부 함수
    def _headers(self) -> Dict[str, str]:
        token = self._token_provider()
        if token:
            return {SESSION_HEADER_NAME: token}
        return {}

    def _request(
        self,
        method: str,
        path: str,
        action: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        url = f"{self._base_url}/{path}"
        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers(),
                json=json,
                params=params,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise RequestError(f"{action} failed: {exc}") from exc

        if response.status_code in {401, 403}:
            raise AuthenticationError(f"{action} rejected: HTTP {response.status_code}")
        if not response.ok:
            raise RequestError(f"{action} failed: HTTP {response.status_code}", response.status_code)
        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    def _get_json(self, path: str, action: str) -> Any:
        response = self._request("GET", path, action)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RequestError(f"{action} returned invalid JSON") from exc

    def _send(self, method: str, path: str, action: str, *, json: Any = None) -> None:
        self._request(method, path, action, json=json)

    # endregion


def _is_empty(data: Any) -> bool:
    return data is None or data == "null" or data == "" or data == {} or data == []
