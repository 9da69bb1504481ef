"""애플리케이션 실행 진입점 (View + Presenter 조합)."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from .async_tasks import AsyncExecutor
from .config import get_settings, set_server_url
from .integrations.api import ApiClient
from .presenters.main_presenter import ConsolePresenter
from .session import SessionStore
from .storage import ClientStorage
from .utils import configure_logging, get_logger
from .views.main_view import ConsoleView

logger = get_logger("app")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Operator console for a bangarang server.")
    parser.add_argument("--url", help="bangarang server URL (overrides BANGARANG_URL)")
    parser.add_argument("--log-level", help="log level for bangarang.* loggers")
    return parser.parse_args(argv)


def run_app(argv: Optional[Sequence[str]] = None) -> None:
    """bangarang console Qt 애플리케이션을 실행한다."""
    args = parse_args(argv)
    if args.url:
        set_server_url(args.url)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    app = QApplication(sys.argv[:1])
    executor = AsyncExecutor()
    session = SessionStore(ClientStorage(settings.state_path), executor)
    client = ApiClient(settings.server_url, session.current_token, timeout=settings.timeout)
    session.bind(client)
    logger.info("Connecting to %s", client.base_url)

    view = ConsoleView()
    ConsolePresenter(view, session, client, executor=executor, interval_ms=settings.poll_interval_ms)
    view.show()
    sys.exit(app.exec())
