"""메인 콘솔 View - Qt 위젯 구성과 UI 신호를 담당한다."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Tuple

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QBrush, QColor, QFont
from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QStackedWidget,
    QTabWidget,
    QTextEdit,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from ..drafts import COMPARISON_OPS, ESCALATION_TYPES, OptionField
from ..models import EscalationForm, IncidentRow, LoginForm, PolicyForm

_CHIP_TITLES = {
    "match": "Match",
    "not_match": "Not Match",
    "crit": "Critical",
    "warn": "Warning",
}


class ConsoleView(QMainWindow):
    """UI를 렌더링하고 사용자 입력 이벤트를 Signal로 내보내는 View."""

    TAB_SCREENS = ("router", "conf", "nec")

    login_requested = Signal()
    logout_requested = Signal()

    polling_start_requested = Signal()
    polling_stop_requested = Signal()
    resolve_requested = Signal(str)

    escalation_type_selected = Signal(str)
    escalation_step_add_requested = Signal()
    escalation_step_remove_requested = Signal(int)
    escalation_submit_requested = Signal()
    escalation_cancel_requested = Signal()
    escalation_delete_requested = Signal(str)

    policy_chip_add_requested = Signal(str)
    policy_chip_remove_requested = Signal(str, int)
    policy_submit_requested = Signal()
    policy_cancel_requested = Signal()
    policy_delete_requested = Signal(str)

    snapshots_refresh_requested = Signal()
    revert_requested = Signal(str)

    tab_selected = Signal(str, int)

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Bangarang Console")
        self.resize(1280, 820)

        self._option_inputs: Dict[str, QLineEdit] = {}
        self._chip_inputs: Dict[str, Tuple[QWidget, QLineEdit]] = {}
        self._chip_lists: Dict[str, QListWidget] = {}

        self._pages = QStackedWidget()
        self._pages.addWidget(self._build_login_page())
        self._pages.addWidget(self._build_console_page())
        self.setCentralWidget(self._pages)
        self._apply_theme()

        self._wire_signals()

    # region UI 빌더
    def _build_login_page(self) -> QWidget:
        page = QWidget()
        outer = QVBoxLayout(page)
        outer.addStretch(1)

        box = QGroupBox("Sign in to bangarang")
        box.setMaximumWidth(420)
        form = QFormLayout(box)
        form.setSpacing(16)

        self.username_input = QLineEdit()
        form.addRow("Username", self.username_input)

        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.Password)
        form.addRow("Password", self.password_input)

        self.login_button = QPushButton("Login")
        form.addRow(self.login_button)

        row = QHBoxLayout()
        row.addStretch(1)
        row.addWidget(box)
        row.addStretch(1)
        outer.addLayout(row)
        outer.addStretch(2)
        return page

    def _build_console_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(18)

        header_row = QHBoxLayout()
        header = QLabel("Bangarang")
        header.setObjectName("headerLabel")
        header.setFont(QFont("Segoe UI", 28, QFont.Bold))
        header_row.addWidget(header)

        self.stats_label = QLabel("")
        self.stats_label.setObjectName("subheaderLabel")
        header_row.addWidget(self.stats_label, stretch=1)

        self.logout_button = QPushButton("Logout")
        header_row.addWidget(self.logout_button)
        layout.addLayout(header_row)

        self.main_tabs = QTabWidget()
        self.main_tabs.addTab(self._build_dashboard_tab(), "Incidents")
        self.main_tabs.addTab(self._build_config_tab(), "Configuration")
        layout.addWidget(self.main_tabs, stretch=3)

        feed_section = QGroupBox("System Feed")
        feed_layout = QVBoxLayout(feed_section)
        self.system_feed = QTextEdit()
        self.system_feed.setObjectName("systemFeed")
        self.system_feed.setReadOnly(True)
        self.system_feed.setMaximumHeight(140)
        feed_layout.addWidget(self.system_feed)
        layout.addWidget(feed_section, stretch=1)
        return page

    def _build_dashboard_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        layout.setSpacing(12)

        self.incident_list = QListWidget()
        self.incident_list.setObjectName("incidentList")
        layout.addWidget(self.incident_list)

        row = QHBoxLayout()
        self.start_button = QPushButton("Start Polling")
        self.stop_button = QPushButton("Stop Polling")
        self.resolve_button = QPushButton("Resolve Selected")
        row.addWidget(self.start_button)
        row.addWidget(self.stop_button)
        row.addStretch(1)
        row.addWidget(self.resolve_button)
        layout.addLayout(row)
        return tab

    def _build_config_tab(self) -> QWidget:
        self.config_tabs = QTabWidget()
        self.config_tabs.addTab(self._build_escalation_tab(), "Escalations")
        self.config_tabs.addTab(self._build_policy_tab(), "Policies")
        self.config_tabs.addTab(self._build_versions_tab(), "Versions")
        return self.config_tabs

    def _build_escalation_tab(self) -> QWidget:
        self.escalation_tabs = QTabWidget()

        existing = QWidget()
        existing_layout = QVBoxLayout(existing)
        self.escalation_tree = QTreeWidget()
        self.escalation_tree.setHeaderLabels(["Escalation", "Step"])
        existing_layout.addWidget(self.escalation_tree)
        self.escalation_delete_button = QPushButton("Remove Selected")
        existing_layout.addWidget(self.escalation_delete_button, alignment=Qt.AlignRight)
        self.escalation_tabs.addTab(existing, "Existing")

        new = QWidget()
        new_layout = QVBoxLayout(new)
        form = QFormLayout()
        self.escalation_name_input = QLineEdit()
        form.addRow("Name", self.escalation_name_input)
        self.escalation_type_combo = QComboBox()
        self.escalation_type_combo.addItem("Select a type", None)
        for name, title in ESCALATION_TYPES:
            self.escalation_type_combo.addItem(title, name)
        form.addRow("Type", self.escalation_type_combo)
        new_layout.addLayout(form)

        options_box = QGroupBox("Options")
        self._options_form = QFormLayout(options_box)
        new_layout.addWidget(options_box)

        self.add_step_button = QPushButton("Add Step")
        new_layout.addWidget(self.add_step_button, alignment=Qt.AlignLeft)

        self.step_list = QListWidget()
        new_layout.addWidget(self.step_list)

        row = QHBoxLayout()
        self.remove_step_button = QPushButton("Remove Step")
        self.escalation_cancel_button = QPushButton("Cancel")
        self.escalation_submit_button = QPushButton("Save Escalation")
        row.addWidget(self.remove_step_button)
        row.addStretch(1)
        row.addWidget(self.escalation_cancel_button)
        row.addWidget(self.escalation_submit_button)
        new_layout.addLayout(row)
        self.escalation_tabs.addTab(new, "New")
        return self.escalation_tabs

    def _build_policy_tab(self) -> QWidget:
        tabs = QTabWidget()

        existing = QWidget()
        existing_layout = QVBoxLayout(existing)
        self.policy_tree = QTreeWidget()
        self.policy_tree.setHeaderLabels(["Policy", "Section"])
        existing_layout.addWidget(self.policy_tree)
        self.policy_delete_button = QPushButton("Remove Selected")
        existing_layout.addWidget(self.policy_delete_button, alignment=Qt.AlignRight)
        tabs.addTab(existing, "Existing")

        new = QWidget()
        new_layout = QVBoxLayout(new)
        form = QFormLayout()
        self.policy_name_input = QLineEdit()
        form.addRow("Name", self.policy_name_input)
        new_layout.addLayout(form)

        for section in ("match", "not_match", "crit", "warn"):
            new_layout.addWidget(self._build_chip_section(section))

        row = QHBoxLayout()
        row.addStretch(1)
        self.policy_cancel_button = QPushButton("Cancel")
        self.policy_submit_button = QPushButton("Save Policy")
        row.addWidget(self.policy_cancel_button)
        row.addWidget(self.policy_submit_button)
        new_layout.addLayout(row)
        tabs.addTab(new, "New")
        return tabs

    def _build_chip_section(self, section: str) -> QGroupBox:
        box = QGroupBox(_CHIP_TITLES[section])
        layout = QVBoxLayout(box)

        row = QHBoxLayout()
        if section in ("crit", "warn"):
            key_input: QWidget = QComboBox()
            key_input.addItems(list(COMPARISON_OPS))
        else:
            key_input = QLineEdit()
            key_input.setPlaceholderText("field")
        value_input = QLineEdit()
        value_input.setPlaceholderText("value")
        add_button = QPushButton("Add")
        add_button.clicked.connect(lambda: self.policy_chip_add_requested.emit(section))
        row.addWidget(key_input)
        row.addWidget(value_input)
        row.addWidget(add_button)
        layout.addLayout(row)

        if section != "match":
            settings = QHBoxLayout()
            occurrences = QSpinBox()
            occurrences.setMinimum(1)
            occurrences.setMaximum(10000)
            settings.addWidget(QLabel("Occurrences"))
            settings.addWidget(occurrences)
            setattr(self, f"{section}_occurrences_input", occurrences)
            if section in ("crit", "warn"):
                target = QComboBox()
                target.addItem("", "")
                settings.addWidget(QLabel("Escalation"))
                settings.addWidget(target, stretch=1)
                setattr(self, f"{section}_escalation_combo", target)
            layout.addLayout(settings)

        chips = QListWidget()
        chips.setMaximumHeight(72)
        chips.itemDoubleClicked.connect(
            lambda item: self.policy_chip_remove_requested.emit(section, chips.row(item))
        )
        layout.addWidget(chips)

        self._chip_inputs[section] = (key_input, value_input)
        self._chip_lists[section] = chips
        return box

    def _build_versions_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        self.snapshot_list = QListWidget()
        layout.addWidget(self.snapshot_list)

        row = QHBoxLayout()
        self.snapshot_refresh_button = QPushButton("Refresh")
        self.revert_button = QPushButton("Revert To Selected")
        row.addWidget(self.snapshot_refresh_button)
        row.addStretch(1)
        row.addWidget(self.revert_button)
        layout.addLayout(row)
        return tab

    # endregion

    # region Signal 연결
    def _wire_signals(self) -> None:
        self.login_button.clicked.connect(self.login_requested.emit)
        self.password_input.returnPressed.connect(self.login_requested.emit)
        self.logout_button.clicked.connect(self.logout_requested.emit)

        self.start_button.clicked.connect(self.polling_start_requested.emit)
        self.stop_button.clicked.connect(self.polling_stop_requested.emit)
        self.resolve_button.clicked.connect(
            lambda: self.resolve_requested.emit(self._selected_data(self.incident_list))
        )

        self.escalation_type_combo.currentIndexChanged.connect(self._on_type_changed)
        self.add_step_button.clicked.connect(self.escalation_step_add_requested.emit)
        self.remove_step_button.clicked.connect(
            lambda: self.escalation_step_remove_requested.emit(self.step_list.currentRow())
        )
        self.escalation_submit_button.clicked.connect(self.escalation_submit_requested.emit)
        self.escalation_cancel_button.clicked.connect(self.escalation_cancel_requested.emit)
        self.escalation_delete_button.clicked.connect(
            lambda: self.escalation_delete_requested.emit(self._selected_root(self.escalation_tree))
        )

        self.policy_submit_button.clicked.connect(self.policy_submit_requested.emit)
        self.policy_cancel_button.clicked.connect(self.policy_cancel_requested.emit)
        self.policy_delete_button.clicked.connect(
            lambda: self.policy_delete_requested.emit(self._selected_root(self.policy_tree))
        )

        self.snapshot_refresh_button.clicked.connect(self.snapshots_refresh_requested.emit)
        self.revert_button.clicked.connect(
            lambda: self.revert_requested.emit(self._selected_data(self.snapshot_list))
        )

        self.main_tabs.currentChanged.connect(lambda index: self.tab_selected.emit("router", index))
        self.config_tabs.currentChanged.connect(lambda index: self.tab_selected.emit("conf", index))
        self.escalation_tabs.currentChanged.connect(lambda index: self.tab_selected.emit("nec", index))

    def _on_type_changed(self, index: int) -> None:
        step_type = self.escalation_type_combo.itemData(index)
        self.escalation_type_selected.emit(step_type or "")

    # endregion

    # region 데이터 접근자
    def get_login_form(self) -> LoginForm:
        return LoginForm(
            username=self.username_input.text().strip(),
            password=self.password_input.text(),
        )

    def get_escalation_form(self) -> EscalationForm:
        return EscalationForm(
            name=self.escalation_name_input.text().strip(),
            type=self.escalation_type_combo.currentData(),
            options={name: widget.text() for name, widget in self._option_inputs.items()},
        )

    def get_chip_input(self, section: str) -> Tuple[str, str]:
        key_input, value_input = self._chip_inputs[section]
        if isinstance(key_input, QComboBox):
            key = key_input.currentText()
        else:
            key = key_input.text()  # type: ignore[attr-defined]
        return key.strip(), value_input.text().strip()

    def get_policy_form(self) -> PolicyForm:
        return PolicyForm(
            name=self.policy_name_input.text().strip(),
            not_match_occurrences=self.not_match_occurrences_input.value(),
            crit_occurrences=self.crit_occurrences_input.value(),
            crit_escalation=self.crit_escalation_combo.currentText(),
            warn_occurrences=self.warn_occurrences_input.value(),
            warn_escalation=self.warn_escalation_combo.currentText(),
        )

    # endregion

    # region View 업데이트 API
    def show_logged_in(self, logged_in: bool) -> None:
        self._pages.setCurrentIndex(1 if logged_in else 0)
        if not logged_in:
            self.password_input.clear()

    def set_login_busy(self, busy: bool) -> None:
        self._set_button_busy(self.login_button, busy, "Signing in...")

    def set_polling(self, polling: bool) -> None:
        self.start_button.setEnabled(not polling)
        self.stop_button.setEnabled(polling)

    def set_stats_text(self, text: str) -> None:
        self.stats_label.setText(text)

    def render_incidents(self, rows: Sequence[IncidentRow]) -> None:
        selected = self._selected_data(self.incident_list)
        self.incident_list.clear()
        for row in rows:
            item = QListWidgetItem(f"{row.label:<9} {row.description}")
            item.setData(Qt.UserRole, row.key)
            if row.color:
                item.setForeground(QBrush(QColor(row.color)))
            self.incident_list.addItem(item)
            if row.key == selected:
                self.incident_list.setCurrentItem(item)

    def render_escalation_options(self, schema: Sequence[OptionField], values: Mapping[str, Any]) -> None:
        while self._options_form.rowCount():
            self._options_form.removeRow(0)
        self._option_inputs = {}
        for option in schema:
            widget = QLineEdit(str(values.get(option.name, option.default)))
            if option.name == "password":
                widget.setEchoMode(QLineEdit.Password)
            self._options_form.addRow(option.title, widget)
            self._option_inputs[option.name] = widget

    def render_escalation_steps(self, lines: List[str]) -> None:
        self.step_list.clear()
        self.step_list.addItems(lines)

    def clear_escalation_form(self) -> None:
        self.escalation_name_input.clear()
        self.escalation_type_combo.setCurrentIndex(0)

    def render_escalations(self, escalations: Mapping[str, List[str]]) -> None:
        self._render_tree(self.escalation_tree, escalations)

    def set_escalation_targets(self, names: List[str]) -> None:
        for combo in (self.crit_escalation_combo, self.warn_escalation_combo):
            current = combo.currentText()
            combo.clear()
            combo.addItem("", "")
            for name in names:
                combo.addItem(name, name)
            combo.setCurrentText(current if current in names else "")

    def render_chips(self, section: str, lines: List[str]) -> None:
        chips = self._chip_lists[section]
        chips.clear()
        chips.addItems(lines)

    def clear_chip_input(self, section: str) -> None:
        key_input, value_input = self._chip_inputs[section]
        if isinstance(key_input, QLineEdit):
            key_input.clear()
        value_input.clear()

    def clear_policy_form(self) -> None:
        self.policy_name_input.clear()
        for section in self._chip_inputs:
            self.clear_chip_input(section)
        for section in ("not_match", "crit", "warn"):
            getattr(self, f"{section}_occurrences_input").setValue(1)
        self.crit_escalation_combo.setCurrentIndex(0)
        self.warn_escalation_combo.setCurrentIndex(0)

    def render_policies(self, policies: Mapping[str, Any]) -> None:
        children = {
            name: [f"{section}: {value}" for section, value in (body or {}).items() if value and section != "name"]
            for name, body in policies.items()
        }
        self._render_tree(self.policy_tree, children)

    def render_snapshots(self, snapshots: Sequence[Tuple[str, str]]) -> None:
        self.snapshot_list.clear()
        for snapshot_hash, text in snapshots:
            item = QListWidgetItem(text)
            item.setData(Qt.UserRole, snapshot_hash)
            self.snapshot_list.addItem(item)

    def select_tab(self, screen: str, index: int) -> None:
        tabs = {"router": self.main_tabs, "conf": self.config_tabs, "nec": self.escalation_tabs}[screen]
        if 0 <= index < tabs.count():
            tabs.setCurrentIndex(index)

    def append_feed(self, message: str) -> None:
        current = self.system_feed.toPlainText()
        next_text = message if not current else f"{current}\n{message}"
        self.system_feed.setText(next_text)
        self.system_feed.verticalScrollBar().setValue(
            self.system_feed.verticalScrollBar().maximum()
        )

    def show_warning(self, title: str, message: str) -> None:
        QMessageBox.warning(self, title, message)

    def show_error(self, title: str, message: str) -> None:
        QMessageBox.critical(self, title, message)

    def ask_yes_no(self, title: str, message: str) -> bool:
        reply = QMessageBox.question(self, title, message)
        return reply == QMessageBox.Yes

    # endregion

    # region 내부 유틸리티
    @staticmethod
    def _selected_data(widget: QListWidget) -> str:
        item = widget.currentItem()
        return item.data(Qt.UserRole) if item else ""

    @staticmethod
    def _selected_root(tree: QTreeWidget) -> str:
        item = tree.currentItem()
        while item is not None and item.parent() is not None:
            item = item.parent()
        return item.text(0) if item else ""

    @staticmethod
    def _render_tree(tree: QTreeWidget, entries: Mapping[str, List[str]]) -> None:
        tree.clear()
        for name, lines in entries.items():
            root = QTreeWidgetItem([name, ""])
            for line in lines:
                root.addChild(QTreeWidgetItem(["", line]))
            tree.addTopLevelItem(root)
        tree.expandAll()

    def _set_button_busy(self, button: QPushButton, busy: bool, text: str = "") -> None:
        if busy:
            if button.property("_orig_text") is None:
                button.setProperty("_orig_text", button.text())
            if text:
                button.setText(text)
            button.setEnabled(False)
        else:
            original = button.property("_orig_text")
            if original:
                button.setText(original)
            button.setProperty("_orig_text", None)
            button.setEnabled(True)

    def _apply_theme(self) -> None:
        self.setStyleSheet(
            """
            QMainWindow { background-color: #19171D; }
            QLabel { color: #F8F6FB; }
            QLabel#headerLabel { color: #FFFFFF; }
            QLabel#subheaderLabel { color: #B7A0CC; font-size: 14px; }
            QGroupBox { border: 1px solid #3C2A4D; border-radius: 8px; margin-top: 12px; padding: 12px; color: #F8F6FB; }
            QGroupBox::title { subcontrol-origin: margin; left: 16px; padding: 0 8px 0 8px; }
            QListWidget, QTreeWidget, QTextEdit#systemFeed {
                background: #1F1F24; border: 1px solid #4D365C; border-radius: 6px; color: #EDEDED; padding: 8px;
            }
            QPushButton { background-color: #4A154B; color: #FFFFFF; padding: 8px 14px; border-radius: 6px; font-weight: bold; }
            QPushButton:hover { background-color: #611F69; }
            QPushButton:disabled { background-color: #2D1330; color: #6E5F78; }
            QLineEdit, QComboBox, QSpinBox {
                background: #1F1F24; color: #FFFFFF; border: 1px solid #4D365C; border-radius: 6px; padding: 6px;
            }
            QTabWidget::pane { border: 1px solid #3C2A4D; border-radius: 8px; }
            QTabBar::tab { background: #1F1F24; color: #D8CAE8; padding: 10px 18px; border-top-left-radius: 6px; border-top-right-radius: 6px; }
            QTabBar::tab:selected { background: #4A154B; color: #FFFFFF; }
            """
        )

    # endregion
