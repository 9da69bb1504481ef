"""에스컬레이션 설정 Presenter 로직."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from ..async_tasks import Executor
from ..catalog import ConfigCatalog
from ..drafts import ConfigDraftBuilder, EscalationDraft
from ..errors import DraftValidationError
from ..integrations.api import ApiClient
from ..models import EscalationConfig, EscalationStep
from ..utils import timestamp
from ..views.main_view import ConsoleView


class EscalationPresenter:
    def __init__(
        self,
        view: ConsoleView,
        client: ApiClient,
        executor: Executor,
        error_handler: Callable[[str, Exception], None],
        *,
        on_names_changed: Callable[[List[str]], None],
    ) -> None:
        self._view = view
        self._on_names_changed = on_names_changed
        self._catalog = ConfigCatalog.escalations(
            client,
            executor,
            on_update=self._render_catalog,
            on_error=error_handler,
        )
        self._builder = ConfigDraftBuilder.for_escalation(
            client,
            executor,
            on_submitted=self._submitted,
            on_error=error_handler,
        )

    @property
    def draft(self) -> EscalationDraft:
        return self._builder.draft  # type: ignore[return-value]

    def refresh(self) -> None:
        self._catalog.refresh()

    # region 이벤트 핸들러
    def handle_delete(self, name: str) -> None:
        if not name:
            return
        if not self._view.ask_yes_no("Remove Escalation", f"Remove escalation {name}?"):
            return
        self._catalog.remove(name)

    def handle_type_selected(self, step_type: str) -> None:
        if not step_type:
            self.draft.clear_type()
            self._view.render_escalation_options((), {})
            return
        try:
            self.draft.select_type(step_type)
        except DraftValidationError as exc:
            self._view.show_warning("Escalation", str(exc))
            return
        self._view.render_escalation_options(self.draft.schema(), self.draft.options)

    def handle_add_step(self) -> None:
        form = self._view.get_escalation_form()
        if not form.type:
            self.draft.clear_type()
        try:
            if form.type and form.type != self.draft.type:
                self.draft.select_type(form.type)
            for name, value in form.options.items():
                self.draft.set_option(name, value)
            self.draft.add_step()
        except DraftValidationError as exc:
            self._view.show_warning("Escalation", str(exc))
            return
        self._render_steps()

    def handle_remove_step(self, index: int) -> None:
        try:
            self.draft.remove_step(index)
        except DraftValidationError as exc:
            self._view.show_warning("Escalation", str(exc))
            return
        self._render_steps()

    def handle_submit(self) -> None:
        self.draft.name = self._view.get_escalation_form().name
        try:
            self._builder.submit()
        except DraftValidationError as exc:
            self._view.show_warning("Escalation", str(exc))

    def handle_cancel(self) -> None:
        self._builder.cancel()
        self._view.clear_escalation_form()
        self._render_steps()

    # endregion

    def _submitted(self, built: object) -> None:
        if isinstance(built, EscalationConfig):
            self._view.append_feed(
                f"[{timestamp()}] Escalation {built.name} saved with {len(built.steps)} step(s)"
            )
        self._view.clear_escalation_form()
        self._render_steps()
        self._catalog.refresh()

    def _render_steps(self) -> None:
        self._view.render_escalation_steps([describe_step(step) for step in self.draft.steps])

    def _render_catalog(self, entries: Dict[str, Any]) -> None:
        names = sorted(entries)
        self._view.render_escalations(
            {name: [describe_payload(step) for step in entries[name] or []] for name in names}
        )
        self._on_names_changed(names)


def describe_step(step: EscalationStep) -> str:
    return describe_payload(step.to_payload())


def describe_payload(payload: Any) -> str:
    if not isinstance(payload, dict):
        return str(payload)
    details = ", ".join(
        f"{key}={', '.join(value) if isinstance(value, list) else value}"
        for key, value in payload.items()
        if key != "type" and key != "password"
    )
    step_type = payload.get("type", "?")
    return f"{step_type} ({details})" if details else str(step_type)
