"""Pydantic models validating bangarang API response bodies."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import ConfigSnapshot, Incident, SystemStats
from .utils import parse_server_timestamp

_TAGGED_FIELDS = ("host", "service", "sub_service")


class IncidentBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    service: str = ""
    sub_service: Optional[str] = None
    host: str = ""
    metric: float = 0.0
    time: int = 0
    status: int = 0
    description: str = ""
    policy: str = ""
    escalation: str = ""
    id: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _lift_tags(cls, data: Any) -> Any:
        # host/service may arrive inside the event's tag map
        if isinstance(data, dict) and isinstance(data.get("tags"), dict):
            merged = dict(data)
            for name in _TAGGED_FIELDS:
                if not merged.get(name) and data["tags"].get(name):
                    merged[name] = data["tags"][name]
            return merged
        return data

    def to_model(self) -> Incident:
        return Incident(
            service=self.service,
            sub_service=self.sub_service or None,
            host=self.host,
            metric=self.metric,
            time=self.time,
            status=self.status,
            description=self.description,
            policy=self.policy,
            escalation=self.escalation,
            id=self.id,
        )


class SnapshotBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hash: str
    time_stamp: str

    @field_validator("time_stamp")
    @classmethod
    def _parseable(cls, value: str) -> str:
        parse_server_timestamp(value)
        return value

    def to_model(self) -> ConfigSnapshot:
        return ConfigSnapshot(hash=self.hash, timestamp=parse_server_timestamp(self.time_stamp))


class LoginResponse(BaseModel):
    token: str = Field(..., min_length=1)


class SystemStatsBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    memory: Dict[str, int] = Field(default_factory=dict)
    load: Dict[str, float] = Field(default_factory=dict)
    uptime: float = 0.0

    def to_model(self) -> SystemStats:
        return SystemStats(
            memory_used=self.memory.get("used", 0),
            memory_free=self.memory.get("free", 0),
            memory_total=self.memory.get("total", 0),
            load_one=self.load.get("one", 0.0),
            load_five=self.load.get("five", 0.0),
            load_fifteen=self.load.get("fifteen", 0.0),
            uptime=self.uptime,
        )
