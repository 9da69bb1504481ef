import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import Qt  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from bangarang_console.views.main_view import ConsoleView  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


def test_snapshot_list_has_no_current_marker(qapp):
    view = ConsoleView()

    view.render_snapshots([("h3", "h3 t3"), ("h2", "h2 t2"), ("h1", "h1 t1")])

    items = [view.snapshot_list.item(row) for row in range(view.snapshot_list.count())]
    assert [item.text() for item in items] == ["h3 t3", "h2 t2", "h1 t1"]
    assert [item.data(Qt.UserRole) for item in items] == ["h3", "h2", "h1"]


def test_placeholder_type_is_emitted_as_empty(qapp):
    view = ConsoleView()
    view.escalation_type_combo.setCurrentIndex(1)
    emitted = []
    view.escalation_type_selected.connect(emitted.append)

    view.escalation_type_combo.setCurrentIndex(0)

    assert emitted == [""]
