"""Persisted client state (session token, login flag, selected tabs)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional

from .utils import get_logger

logger = get_logger("storage")

TOKEN_KEY = "session:token"
LOGGED_IN_KEY = "session:logged_in"


class ClientStorage:
    """Small JSON-file key/value store shared by the session and the view."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._values: Dict[str, object] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Client state at %s is unreadable; starting fresh.", self._path)
            return
        if isinstance(raw, dict):
            self._values = raw

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(self._values, indent=2), encoding="utf-8")
        except OSError:
            logger.exception("Failed to persist client state to %s", self._path)

    def get(self, key: str, default: Optional[object] = None) -> Optional[object]:
        return self._values.get(key, default)

    def put(self, key: str, value: object) -> None:
        self._values[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._save()

    # region 탭 선택 유지
    def selected_tab(self, screen: str) -> int:
        value = self._values.get(f"{screen}:tab", 0)
        try:
            return int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 0

    def select_tab(self, screen: str, index: int) -> None:
        self.put(f"{screen}:tab", index)

    # endregion
