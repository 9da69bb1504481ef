"""Pure display derivations used by the dashboard and config screens."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

from .models import ConfigSnapshot, Incident, Status, SystemStats
from .utils import format_clock

STATUS_LABELS = {
    Status.OK: "OK",
    Status.WARNING: "WARNING",
    Status.CRITICAL: "CRITICAL",
}

STATUS_COLORS = {
    Status.OK: "green",
    Status.WARNING: "#FFFD82",
    Status.CRITICAL: "#FB5C5C",
}


def status_label(status: int) -> Optional[str]:
    try:
        return STATUS_LABELS[Status(status)]
    except ValueError:
        return None


def status_color(status: int) -> Optional[str]:
    try:
        return STATUS_COLORS[Status(status)]
    except ValueError:
        return None


def format_description(incident: Incident, tz: Optional[tzinfo] = None) -> str:
    """``db.replica on host-1 is 93.13 at 3:7:9PM October-19-2026``"""
    service = incident.service + (f".{incident.sub_service}" if incident.sub_service else " ")
    moment = datetime.fromtimestamp(incident.time, tz=tz)
    return f"{service} on {incident.host} is {incident.metric:.2f} at {format_clock(moment)}"


def format_snapshot(snapshot: ConfigSnapshot) -> str:
    return f"{snapshot.hash}  {format_clock(snapshot.timestamp)}"


def format_bytes(value: int) -> str:
    size = float(value)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}TB"


def format_stats(stats: SystemStats) -> str:
    minutes, seconds = divmod(int(stats.uptime), 60)
    hours, minutes = divmod(minutes, 60)
    return (
        f"mem {format_bytes(stats.memory_used)}/{format_bytes(stats.memory_total)} | "
        f"load {stats.load_one:.2f} {stats.load_five:.2f} {stats.load_fifteen:.2f} | "
        f"up {hours}h{minutes:02d}m{seconds:02d}s"
    )
