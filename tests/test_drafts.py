import pytest

from bangarang_console.drafts import (
    OPTION_SCHEMAS,
    ConfigDraftBuilder,
    EscalationDraft,
    PolicyDraft,
    Transform,
    apply_transform,
)
from bangarang_console.errors import DraftValidationError
from bangarang_console.models import EscalationConfig


# ── escalation drafts ──────────────────────────────────────────────────────


def test_select_type_loads_defaults():
    draft = EscalationDraft()

    draft.select_type("email")

    assert draft.options["host"] == "smtp.gmail.com"
    assert draft.options["port"] == 465
    assert draft.options["recipients"] == ""

    draft.select_type("grafana_graphite_annotation")
    assert draft.options == {"host": "", "port": 2003}


def test_every_type_has_a_schema():
    assert set(OPTION_SCHEMAS) == {"pager_duty", "email", "console", "grafana_graphite_annotation"}
    assert OPTION_SCHEMAS["console"] == ()
    assert [option.title for option in OPTION_SCHEMAS["pager_duty"]] == ["Api Key", "Subdomain"]


def test_email_recipients_split_on_commit():
    draft = EscalationDraft()
    draft.select_type("email")
    draft.set_option("recipients", "a@x.com,b@x.com")

    step = draft.add_step()

    assert step.to_payload()["recipients"] == ["a@x.com", "b@x.com"]
    assert step.option("recipients") == ("a@x.com", "b@x.com")


def test_numeric_port_is_parsed_and_bad_values_pass_through():
    assert apply_transform(Transform.NUMBER, "2004") == 2004
    assert apply_transform(Transform.NUMBER, "not-a-port") == "not-a-port"
    assert apply_transform(Transform.IDENTITY, " raw ") == " raw "


def test_committed_steps_do_not_change_with_later_edits():
    draft = EscalationDraft()
    draft.select_type("pager_duty")
    draft.set_option("key", "first")
    first = draft.add_step()
    draft.set_option("key", "second")
    draft.add_step()

    assert first.option("key") == "first"
    assert [step.option("key") for step in draft.steps] == ["first", "second"]


def test_add_step_without_type_is_rejected():
    with pytest.raises(DraftValidationError):
        EscalationDraft().add_step()


def test_unknown_option_is_rejected():
    draft = EscalationDraft()
    draft.select_type("console")

    with pytest.raises(DraftValidationError):
        draft.set_option("host", "x")


def test_remove_step():
    draft = EscalationDraft()
    draft.select_type("console")
    draft.add_step()
    draft.select_type("pager_duty")
    draft.add_step()

    draft.remove_step(0)

    assert [step.type for step in draft.steps] == ["pager_duty"]
    with pytest.raises(DraftValidationError):
        draft.remove_step(5)


def test_escalation_submit_posts_and_resets(server, client, executor):
    submitted = []
    builder = ConfigDraftBuilder.for_escalation(client, executor, on_submitted=submitted.append)
    draft = builder.draft
    draft.name = "page-ops"
    draft.select_type("console")
    draft.add_step()
    draft.select_type("grafana_graphite_annotation")
    draft.set_option("host", "graphite")
    draft.add_step()

    builder.submit()

    assert server.escalations["page-ops"] == [
        {"type": "console"},
        {"type": "grafana_graphite_annotation", "host": "graphite", "port": 2003},
    ]
    assert isinstance(submitted[0], EscalationConfig)
    assert draft.name == "" and draft.steps == [] and draft.type is None


def test_escalation_submit_without_name_sends_nothing(server, client, executor):
    builder = ConfigDraftBuilder.for_escalation(client, executor)
    builder.draft.select_type("console")
    builder.draft.add_step()

    with pytest.raises(DraftValidationError):
        builder.submit()

    assert server.calls == []
    assert len(builder.draft.steps) == 1


def test_rejected_submit_keeps_draft(server, client, executor, errors):
    server.failures[("POST", "api/escalation/config/ops")] = 500
    builder = ConfigDraftBuilder.for_escalation(client, executor, on_error=errors)
    builder.draft.name = "ops"
    builder.draft.select_type("console")
    builder.draft.add_step()

    builder.submit()

    assert errors.reported[0][0] == "Submit Escalation"
    assert builder.draft.name == "ops"
    assert len(builder.draft.steps) == 1


# ── policy drafts ──────────────────────────────────────────────────────────


def test_policy_round_trip(client, executor):
    builder = ConfigDraftBuilder.for_policy(client, executor)
    draft = builder.draft
    draft.name = "p1"
    draft.add_match("service", "db")
    draft.add_crit("greater", "90")
    draft.crit_occurrences = 3
    draft.crit_escalation = "page"

    policy = builder.build_policy()

    assert policy.to_payload() == {
        "name": "p1",
        "match": {"service": "db"},
        "crit": {"occurences": 3, "escalation": "page", "greater": "90"},
    }


def test_build_policy_without_name_issues_no_request(server, client, executor):
    builder = ConfigDraftBuilder.for_policy(client, executor)
    builder.draft.add_match("service", "db")

    with pytest.raises(DraftValidationError):
        builder.build_policy()
    with pytest.raises(DraftValidationError):
        builder.submit()

    assert server.calls == []


def test_crit_without_escalation_is_omitted():
    draft = PolicyDraft(name="p1")
    draft.add_crit("greater", "90")
    draft.add_warn("less", "5")
    draft.warn_escalation = "email-ops"

    policy = draft.build()

    assert policy.crit is None
    assert "crit" not in policy.to_payload()
    assert policy.to_payload()["warn"] == {"occurences": 1, "escalation": "email-ops", "less": "5"}


def test_not_match_carries_occurrences():
    draft = PolicyDraft(name="p1")
    draft.add_not_match("host", "staging-.*")
    draft.not_match_occurrences = 2

    assert draft.build().to_payload()["not_match"] == {"occurences": 2, "host": "staging-.*"}


def test_empty_policy_is_valid_but_inert():
    assert PolicyDraft(name="quiet").build().to_payload() == {"name": "quiet"}


def test_incomplete_chip_is_rejected():
    draft = PolicyDraft()

    with pytest.raises(DraftValidationError):
        draft.add_crit("greater", "")
    with pytest.raises(DraftValidationError):
        draft.add_chip("sideways", "a", "b")

    assert draft.crit_chips == []


def test_remove_chip():
    draft = PolicyDraft()
    draft.add_match("service", "db")
    draft.add_match("host", "db-1")

    draft.remove_chip("match", 0)

    assert [chip.key for chip in draft.match_chips] == ["host"]


def test_policy_submit_posts_and_resets(server, client, executor):
    builder = ConfigDraftBuilder.for_policy(client, executor)
    builder.draft.name = "p1"
    builder.draft.add_match("service", "db")

    builder.submit()

    assert server.policies["p1"] == {"name": "p1", "match": {"service": "db"}}
    assert builder.draft.name == ""
    assert builder.draft.match_chips == []


def test_cancel_resets_without_request(server, client, executor):
    builder = ConfigDraftBuilder.for_policy(client, executor)
    builder.draft.name = "p1"
    builder.draft.add_warn("greater", "1")
    builder.draft.warn_occurrences = 4

    builder.cancel()

    assert builder.draft == PolicyDraft()
    assert server.calls == []


def test_build_policy_requires_policy_draft(client, executor):
    with pytest.raises(TypeError):
        ConfigDraftBuilder.for_escalation(client, executor).build_policy()
