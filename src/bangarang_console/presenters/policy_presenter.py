"""정책 설정 Presenter 로직."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from ..async_tasks import Executor
from ..catalog import ConfigCatalog
from ..drafts import ConfigDraftBuilder, PolicyDraft
from ..errors import DraftValidationError
from ..integrations.api import ApiClient
from ..models import PolicyConfig
from ..utils import timestamp
from ..views.main_view import ConsoleView


class PolicyPresenter:
    def __init__(
        self,
        view: ConsoleView,
        client: ApiClient,
        executor: Executor,
        error_handler: Callable[[str, Exception], None],
    ) -> None:
        self._view = view
        self._catalog = ConfigCatalog.policies(
            client,
            executor,
            on_update=self._render_catalog,
            on_error=error_handler,
        )
        self._builder = ConfigDraftBuilder.for_policy(
            client,
            executor,
            on_submitted=self._submitted,
            on_error=error_handler,
        )

    @property
    def draft(self) -> PolicyDraft:
        return self._builder.draft  # type: ignore[return-value]

    def refresh(self) -> None:
        self._catalog.refresh()

    def set_escalation_targets(self, names: List[str]) -> None:
        self._view.set_escalation_targets(names)

    # region 이벤트 핸들러
    def handle_add_chip(self, section: str) -> None:
        key, value = self._view.get_chip_input(section)
        try:
            self.draft.add_chip(section, key, value)
        except DraftValidationError as exc:
            self._view.show_warning("Policy", str(exc))
            return
        self._view.clear_chip_input(section)
        self._render_chips(section)

    def handle_remove_chip(self, section: str, index: int) -> None:
        try:
            self.draft.remove_chip(section, index)
        except DraftValidationError as exc:
            self._view.show_warning("Policy", str(exc))
            return
        self._render_chips(section)

    def handle_submit(self) -> None:
        self._sync_form()
        try:
            self._builder.submit()
        except DraftValidationError as exc:
            self._view.show_warning("Policy", str(exc))

    def handle_cancel(self) -> None:
        self._builder.cancel()
        self._reset_view()

    def handle_delete(self, name: str) -> None:
        if not name:
            return
        if not self._view.ask_yes_no("Remove Policy", f"Remove policy {name}?"):
            return
        self._catalog.remove(name)

    # endregion

    def _sync_form(self) -> None:
        form = self._view.get_policy_form()
        self.draft.name = form.name
        self.draft.not_match_occurrences = form.not_match_occurrences
        self.draft.crit_occurrences = form.crit_occurrences
        self.draft.crit_escalation = form.crit_escalation
        self.draft.warn_occurrences = form.warn_occurrences
        self.draft.warn_escalation = form.warn_escalation

    def _submitted(self, built: object) -> None:
        if isinstance(built, PolicyConfig):
            self._view.append_feed(f"[{timestamp()}] Policy {built.name} saved")
        self._reset_view()
        self._catalog.refresh()

    def _reset_view(self) -> None:
        self._view.clear_policy_form()
        for section in PolicyDraft.SECTIONS:
            self._render_chips(section)

    def _render_chips(self, section: str) -> None:
        self._view.render_chips(section, [f"{chip.key}: {chip.value}" for chip in self.draft.chips(section)])

    def _render_catalog(self, entries: Dict[str, Any]) -> None:
        self._view.render_policies({name: entries[name] for name in sorted(entries)})
