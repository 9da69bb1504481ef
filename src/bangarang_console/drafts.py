"""Draft builder for escalation and policy configuration objects.

Operator edits accumulate in a draft (``EscalationDraft`` or ``PolicyDraft``)
and are sent to the server in one request by :class:`ConfigDraftBuilder`.
Validation happens synchronously before any request is issued; the server is
left to reject malformed option values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .async_tasks import Executor
from .errors import DraftValidationError
from .integrations.api import ApiClient
from .models import Chip, EscalationConfig, EscalationStep, PolicyCondition, PolicyConfig, PolicyExclusion
from .utils import get_logger

logger = get_logger("drafts")

ErrorHandler = Callable[[str, Exception], None]

COMPARISON_OPS = ("greater", "less", "exactly")


class Transform(Enum):
    IDENTITY = "identity"
    SPLIT_COMMA = "split_comma"
    NUMBER = "number"


def apply_transform(transform: Transform, value: Any) -> Any:
    if transform is Transform.SPLIT_COMMA:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return tuple(value)
    if transform is Transform.NUMBER:
        if isinstance(value, (int, float)):
            return value
        text = str(value).strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            # passed through untouched; the server decides
            return value
    return value


@dataclass(frozen=True)
class OptionField:
    name: str
    title: str
    default: Any = ""
    transform: Transform = Transform.IDENTITY


ESCALATION_TYPES: Tuple[Tuple[str, str], ...] = (
    ("pager_duty", "Pagerduty"),
    ("email", "Email"),
    ("console", "Console"),
    ("grafana_graphite_annotation", "Grafana Graphite Annotation"),
)

OPTION_SCHEMAS: Dict[str, Tuple[OptionField, ...]] = {
    "pager_duty": (
        OptionField("key", "Api Key"),
        OptionField("subdomain", "Subdomain"),
    ),
    "email": (
        OptionField("recipients", "To", transform=Transform.SPLIT_COMMA),
        OptionField("sender", "From"),
        OptionField("user", "User"),
        OptionField("password", "Password"),
        OptionField("host", "Host", "smtp.gmail.com"),
        OptionField("port", "Port", 465, Transform.NUMBER),
    ),
    "console": (),
    "grafana_graphite_annotation": (
        OptionField("host", "Host"),
        OptionField("port", "Port", 2003, Transform.NUMBER),
    ),
}


@dataclass
class EscalationDraft:
    name: str = ""
    type: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    steps: List[EscalationStep] = field(default_factory=list)

    def schema(self) -> Tuple[OptionField, ...]:
        if self.type is None:
            return ()
        return OPTION_SCHEMAS[self.type]

    def select_type(self, step_type: str) -> None:
        if step_type not in OPTION_SCHEMAS:
            raise DraftValidationError(f"Unknown escalation type: {step_type}")
        self.type = step_type
        self.options = {option.name: option.default for option in OPTION_SCHEMAS[step_type]}

    def clear_type(self) -> None:
        self.type = None
        self.options = {}

    def set_option(self, name: str, value: Any) -> None:
        if name not in {option.name for option in self.schema()}:
            raise DraftValidationError(f"{self.type or 'No type'} has no option named {name}")
        self.options[name] = value

    def add_step(self) -> EscalationStep:
        if self.type is None:
            raise DraftValidationError("Select an escalation type before adding a step.")
        options = tuple(
            (option.name, apply_transform(option.transform, self.options.get(option.name, option.default)))
            for option in self.schema()
        )
        step = EscalationStep(type=self.type, options=options)
        self.steps.append(step)
        return step

    def remove_step(self, index: int) -> None:
        if not 0 <= index < len(self.steps):
            raise DraftValidationError(f"No escalation step at position {index}")
        del self.steps[index]

    def build(self) -> EscalationConfig:
        name = self.name.strip()
        if not name:
            raise DraftValidationError("Escalation name is required.")
        return EscalationConfig(name=name, steps=tuple(self.steps))

    def reset(self) -> None:
        self.name = ""
        self.type = None
        self.options = {}
        self.steps = []


@dataclass
class PolicyDraft:
    name: str = ""
    match_chips: List[Chip] = field(default_factory=list)
    not_match_chips: List[Chip] = field(default_factory=list)
    not_match_occurrences: int = 1
    crit_chips: List[Chip] = field(default_factory=list)
    crit_occurrences: int = 1
    crit_escalation: str = ""
    warn_chips: List[Chip] = field(default_factory=list)
    warn_occurrences: int = 1
    warn_escalation: str = ""

    SECTIONS = ("match", "not_match", "crit", "warn")

    def add_match(self, key: str, value: str) -> Chip:
        return self.add_chip("match", key, value)

    def add_not_match(self, key: str, value: str) -> Chip:
        return self.add_chip("not_match", key, value)

    def add_crit(self, key: str, value: str) -> Chip:
        return self.add_chip("crit", key, value)

    def add_warn(self, key: str, value: str) -> Chip:
        return self.add_chip("warn", key, value)

    def chips(self, section: str) -> List[Chip]:
        if section not in self.SECTIONS:
            raise DraftValidationError(f"Unknown policy section: {section}")
        return getattr(self, f"{section}_chips")

    def remove_chip(self, section: str, index: int) -> None:
        chips = self.chips(section)
        if not 0 <= index < len(chips):
            raise DraftValidationError(f"No {section} chip at position {index}")
        del chips[index]

    def build(self) -> PolicyConfig:
        name = self.name.strip()
        if not name:
            raise DraftValidationError("Policy name is required.")
        return PolicyConfig(
            name=name,
            match=_chip_map(self.match_chips) or None,
            not_match=(
                PolicyExclusion(self.not_match_occurrences, _chip_map(self.not_match_chips))
                if self.not_match_chips
                else None
            ),
            crit=_condition(self.crit_chips, self.crit_occurrences, self.crit_escalation),
            warn=_condition(self.warn_chips, self.warn_occurrences, self.warn_escalation),
        )

    def reset(self) -> None:
        self.name = ""
        self.match_chips = []
        self.not_match_chips = []
        self.not_match_occurrences = 1
        self.crit_chips = []
        self.crit_occurrences = 1
        self.crit_escalation = ""
        self.warn_chips = []
        self.warn_occurrences = 1
        self.warn_escalation = ""

    def add_chip(self, section: str, key: str, value: str) -> Chip:
        key, value = (key or "").strip(), (value or "").strip()
        if not key or not value:
            raise DraftValidationError("Both a key and a value are required.")
        chip = Chip(key=key, value=value)
        self.chips(section).append(chip)
        return chip


def _chip_map(chips: List[Chip]) -> Dict[str, str]:
    return {chip.key: chip.value for chip in chips}


def _condition(chips: List[Chip], occurrences: int, escalation: str) -> Optional[PolicyCondition]:
    # crit/warn are only emitted with both chips and an escalation target
    escalation = (escalation or "").strip()
    if not chips or not escalation:
        return None
    return PolicyCondition(occurrences=occurrences, escalation=escalation, fields=_chip_map(chips))


Draft = Union[EscalationDraft, PolicyDraft]
Built = Union[EscalationConfig, PolicyConfig]


class ConfigDraftBuilder:
    """Single submit entry point over an escalation or policy draft."""

    def __init__(
        self,
        client: ApiClient,
        executor: Executor,
        draft: Draft,
        *,
        on_submitted: Optional[Callable[[Built], None]] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> None:
        self._client = client
        self._executor = executor
        self._draft = draft
        self._on_submitted = on_submitted
        self._on_error = on_error

    @classmethod
    def for_escalation(cls, client: ApiClient, executor: Executor, **kwargs: Any) -> "ConfigDraftBuilder":
        return cls(client, executor, EscalationDraft(), **kwargs)

    @classmethod
    def for_policy(cls, client: ApiClient, executor: Executor, **kwargs: Any) -> "ConfigDraftBuilder":
        return cls(client, executor, PolicyDraft(), **kwargs)

    @property
    def draft(self) -> Draft:
        return self._draft

    def build(self) -> Built:
        return self._draft.build()

    def build_policy(self) -> PolicyConfig:
        if not isinstance(self._draft, PolicyDraft):
            raise TypeError("build_policy() requires a policy draft")
        return self._draft.build()

    def submit(self) -> None:
        """Validate, then POST the built object; raises DraftValidationError."""
        built = self.build()
        if isinstance(built, EscalationConfig):
            title, send = "Submit Escalation", self._client.submit_escalation
        else:
            title, send = "Submit Policy", self._client.submit_policy

        def job() -> None:
            send(built)  # type: ignore[arg-type]

        def done(_: object, error: Optional[Exception]) -> None:
            if error:
                logger.warning("%s %s failed: %s", title, built.name, error)
                if self._on_error:
                    self._on_error(title, error)
                return
            logger.info("%s %s succeeded", title, built.name)
            self._draft.reset()
            if self._on_submitted:
                self._on_submitted(built)

        self._executor.submit(job, done)

    def cancel(self) -> None:
        self._draft.reset()
