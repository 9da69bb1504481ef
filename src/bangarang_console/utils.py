"""Shared utility helpers for the bangarang console."""

from __future__ import annotations

import logging
import re
import sys
from datetime import datetime, timezone

_FRACTION = re.compile(r"\.(\d+)")


def get_logger(name: str) -> logging.Logger:
    """Return a ``bangarang.<name>`` logger writing ``[bangarang.<name>] message`` to stdout."""
    logger = logging.getLogger(f"bangarang.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(f"[bangarang.{name}] %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def configure_logging(level: str) -> None:
    """Apply a level to every ``bangarang.*`` logger."""
    logging.getLogger("bangarang").setLevel(getattr(logging, level.upper(), logging.INFO))


def timestamp() -> str:
    """Return the current UTC time formatted as HH:MM:SS."""
    return datetime.now(timezone.utc).strftime("%H:%M:%S")


def parse_server_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp as emitted by the server.

    Nanosecond fractions are truncated to microseconds and a trailing ``Z`` is
    read as UTC. Naive values are assumed to be UTC.
    """
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_clock(moment: datetime) -> str:
    """Format a datetime like ``3:7:9PM October-19-2026``."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return (
        f"{hour}:{moment.minute}:{moment.second}{suffix} "
        f"{moment.strftime('%B')}-{moment.day:02d}-{moment.year}"
    )
