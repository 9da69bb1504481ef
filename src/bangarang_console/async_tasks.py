"""Qt 비동기 작업/타이머 유틸리티."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

from PySide6.QtCore import QObject, QRunnable, QThreadPool, QTimer, Signal

Callback = Callable[[Any, Optional[Exception]], None]


class Executor(Protocol):
    def submit(self, fn: Callable[[], Any], callback: Callback) -> None:
        ...


class IntervalTimer(Protocol):
    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        ...

    def stop(self) -> None:
        ...


class WorkerSignals(QObject):
    finished = Signal(object, object)


class AsyncTask(QRunnable):
    def __init__(self, fn: Callable[[], Any]) -> None:
        super().__init__()
        self._fn = fn
        self.signals = WorkerSignals()

    def run(self) -> None:
        try:
            result = self._fn()
            self.signals.finished.emit(result, None)
        except Exception as exc:  # noqa: BLE001 - 콜백에서 처리
            self.signals.finished.emit(None, exc)


class AsyncExecutor:
    """QThreadPool을 감싼 비동기 실행 도우미.

    작업은 워커 스레드에서 실행되지만 콜백은 Qt 메인 스레드에서 호출된다.
    """

    def __init__(self, pool: QThreadPool | None = None) -> None:
        self._pool = pool or QThreadPool.globalInstance()

    def submit(self, fn: Callable[[], Any], callback: Callback) -> None:
        task = AsyncTask(fn)
        task.signals.finished.connect(callback)
        self._pool.start(task)


class InlineExecutor:
    """Runs the job and its callback immediately on the calling thread."""

    def submit(self, fn: Callable[[], Any], callback: Callback) -> None:
        try:
            result = fn()
        except Exception as exc:  # noqa: BLE001 - 콜백에서 처리
            callback(None, exc)
            return
        callback(result, None)


class QtIntervalTimer:
    """QTimer 기반 반복 스케줄러. 진행 중인 작업은 취소하지 않는다."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._timer = QTimer(parent)
        self._callback: Callable[[], None] | None = None
        self._timer.timeout.connect(self._fire)

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start(interval_ms)

    def stop(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        if self._callback:
            self._callback()
