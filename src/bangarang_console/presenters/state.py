"""Presenter에서 공유하는 상태."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PresenterState:
    polling_requested: bool = True
