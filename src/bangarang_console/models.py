"""도메인 모델 정의."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple


class Status(IntEnum):
    OK = 0
    WARNING = 1
    CRITICAL = 2


@dataclass(frozen=True)
class Incident:
    service: str
    host: str
    metric: float
    time: int
    status: int
    sub_service: Optional[str] = None
    description: str = ""
    policy: str = ""
    escalation: str = ""
    id: Optional[int] = None


@dataclass(frozen=True)
class IncidentEntry:
    key: str
    value: Incident


@dataclass(frozen=True)
class Chip:
    key: str
    value: str


@dataclass(frozen=True)
class EscalationStep:
    """A committed escalation step; options are frozen as sorted pairs."""

    type: str
    options: Tuple[Tuple[str, Any], ...] = ()

    def option(self, name: str, default: Any = None) -> Any:
        return dict(self.options).get(name, default)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type}
        for name, value in self.options:
            payload[name] = list(value) if isinstance(value, tuple) else value
        return payload


@dataclass(frozen=True)
class EscalationConfig:
    name: str
    steps: Tuple[EscalationStep, ...] = ()

    def to_payload(self) -> List[Dict[str, Any]]:
        return [step.to_payload() for step in self.steps]


@dataclass(frozen=True)
class PolicyExclusion:
    occurrences: int
    fields: Dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"occurences": self.occurrences}
        payload.update(self.fields)
        return payload


@dataclass(frozen=True)
class PolicyCondition:
    occurrences: int
    escalation: str
    fields: Dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"occurences": self.occurrences, "escalation": self.escalation}
        payload.update(self.fields)
        return payload


@dataclass(frozen=True)
class PolicyConfig:
    name: str
    match: Optional[Dict[str, str]] = None
    not_match: Optional[PolicyExclusion] = None
    crit: Optional[PolicyCondition] = None
    warn: Optional[PolicyCondition] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": self.name}
        if self.match:
            payload["match"] = dict(self.match)
        if self.not_match:
            payload["not_match"] = self.not_match.to_payload()
        if self.crit:
            payload["crit"] = self.crit.to_payload()
        if self.warn:
            payload["warn"] = self.warn.to_payload()
        return payload


@dataclass(frozen=True)
class ConfigSnapshot:
    hash: str
    timestamp: datetime


@dataclass(frozen=True)
class SystemStats:
    memory_used: int = 0
    memory_free: int = 0
    memory_total: int = 0
    load_one: float = 0.0
    load_five: float = 0.0
    load_fifteen: float = 0.0
    uptime: float = 0.0


@dataclass
class LoginForm:
    username: str = ""
    password: str = ""


@dataclass
class EscalationForm:
    name: str = ""
    type: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PolicyForm:
    name: str = ""
    not_match_occurrences: int = 1
    crit_occurrences: int = 1
    crit_escalation: str = ""
    warn_occurrences: int = 1
    warn_escalation: str = ""


@dataclass(frozen=True)
class IncidentRow:
    key: str
    label: str
    color: str
    description: str
