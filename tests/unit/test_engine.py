"""Tests for the transition engine."""

import pytest

from guidedflow import engine
from guidedflow.compiler import compile_spec
from guidedflow.contracts import StepCompletion, WorkflowInstance
from guidedflow.errors import InvalidStateError, StepValidationError
from guidedflow.spec import StepSpec, WorkflowSpec
from guidedflow.validation import RequiredFieldsValidator


def _linear():
    return compile_spec(
        WorkflowSpec(
            id="linear_v1",
            label="Linear",
            version=1,
            steps=(
                StepSpec(id="one", kind="form", collects=("a",), next="two"),
                StepSpec(id="two", kind="agent_generate", next="three"),
                StepSpec(id="three", kind="assistant_copy_only"),
            ),
        )
    )


def _branching():
    return compile_spec(
        WorkflowSpec(
            id="branching_v1",
            label="Branching",
            version=1,
            steps=(
                StepSpec(id="draft", kind="agent_generate", collects=("draft",), next="review"),
                StepSpec(
                    id="review",
                    kind="confirm",
                    next="done",
                    next_on_edit="draft",
                ),
                StepSpec(id="done", kind="assistant_copy_only"),
            ),
        )
    )


def test_start_lands_on_entry_step() -> None:
    definition = _linear()
    instance = engine.start(definition)
    assert instance.status == "in_progress"
    assert instance.current_step_id == "one"
    assert instance.definition_id == "linear_v1"
    assert instance.collected_data == {}
    assert instance.outcome is None


def test_start_accepts_explicit_instance_id() -> None:
    instance = engine.start(_linear(), instance_id="fixed-id")
    assert instance.id == "fixed-id"


def test_start_ids_are_unique() -> None:
    definition = _linear()
    assert engine.start(definition).id != engine.start(definition).id


def test_idle_instance_enters_entry_step() -> None:
    definition = _linear()
    idle = WorkflowInstance(definition_id=definition.id)
    assert engine.current_step(definition, idle) is None

    entered = engine.advance(definition, idle)
    assert entered.status == "in_progress"
    assert entered.current_step_id == "one"
    assert idle.status == "idle"


def test_linear_walk_completes_on_third_advance() -> None:
    definition = _linear()
    instance = engine.start(definition)

    statuses = []
    for _ in range(3):
        instance = engine.advance(definition, instance, StepCompletion())
        statuses.append(instance.status)
        if instance.status != "completed":
            assert instance.outcome is None

    assert statuses == ["in_progress", "in_progress", "completed"]
    assert instance.current_step_id == "three"
    assert instance.outcome == {}


def test_advance_does_not_mutate_input() -> None:
    definition = _linear()
    before = engine.start(definition)
    after = engine.advance(definition, before, StepCompletion(fields={"a": 1}))
    assert before.current_step_id == "one"
    assert before.collected_data == {}
    assert after.collected_data == {"a": 1}
    assert after.id == before.id


def test_fields_accumulate_and_overwrite() -> None:
    definition = _branching()
    instance = engine.start(definition)
    instance = engine.advance(
        definition,
        instance,
        StepCompletion(fields={"draft": {"title": "first", "tags": ["x"]}, "note": "keep"}),
    )
    instance = engine.advance(
        definition,
        instance,
        StepCompletion(fields={"draft": {"title": "second"}}, decision="edit"),
    )
    # Whole-value replacement, untouched keys survive.
    assert instance.collected_data == {"draft": {"title": "second"}, "note": "keep"}


def test_confirm_decision_follows_confirm_branch() -> None:
    definition = _branching()
    instance = engine.advance(definition, engine.start(definition))
    assert instance.current_step_id == "review"

    confirmed = engine.advance(definition, instance, StepCompletion(decision="confirm"))
    assert confirmed.current_step_id == "done"
    assert confirmed.status == "in_progress"


def test_edit_decision_loops_back() -> None:
    definition = _branching()
    instance = engine.advance(definition, engine.start(definition))

    edited = engine.advance(definition, instance, StepCompletion(decision="edit"))
    assert edited.current_step_id == "draft"
    # No decision on a confirm step is treated as edit.
    undecided = engine.advance(definition, instance, StepCompletion())
    assert undecided.current_step_id == "draft"


def test_confirm_without_target_completes() -> None:
    definition = compile_spec(
        WorkflowSpec(
            id="confirm_end_v1",
            label="Confirm end",
            version=1,
            steps=(StepSpec(id="check", kind="confirm", next_on_edit="check"),),
        )
    )
    instance = engine.start(definition)
    done = engine.advance(
        definition, instance, StepCompletion(fields={"ok": True}, decision="confirm")
    )
    assert done.status == "completed"
    assert done.current_step_id == "check"
    assert done.outcome == {"ok": True}


def test_decision_on_plain_step_is_ignored() -> None:
    definition = _linear()
    instance = engine.start(definition)
    moved = engine.advance(definition, instance, StepCompletion(decision="edit"))
    assert moved.current_step_id == "two"


def test_completed_instance_rejects_advance() -> None:
    definition = _linear()
    instance = engine.start(definition)
    for _ in range(3):
        instance = engine.advance(definition, instance, StepCompletion(fields={"a": 1}))
    assert instance.status == "completed"
    outcome = instance.outcome

    with pytest.raises(InvalidStateError):
        engine.advance(definition, instance, StepCompletion(fields={"a": 2}))
    assert instance.outcome == outcome == {"a": 1}


def test_outcome_is_a_copy_of_collected_data() -> None:
    definition = _linear()
    instance = engine.start(definition)
    for _ in range(3):
        instance = engine.advance(definition, instance, StepCompletion(fields={"a": 1}))
    assert instance.outcome == instance.collected_data
    assert instance.outcome is not instance.collected_data


def test_definition_mismatch_is_rejected() -> None:
    instance = engine.start(_linear())
    with pytest.raises(InvalidStateError, match="bound to linear_v1"):
        engine.advance(_branching(), instance)


def test_stale_completion_is_rejected() -> None:
    definition = _linear()
    instance = engine.start(definition)
    with pytest.raises(InvalidStateError, match="stale"):
        engine.advance(definition, instance, StepCompletion(step_id="two"))

    moved = engine.advance(definition, instance, StepCompletion(step_id="one"))
    assert moved.current_step_id == "two"


def test_next_step_override() -> None:
    definition = _linear()
    instance = engine.start(definition)
    jumped = engine.advance(definition, instance, StepCompletion(next_step_override="three"))
    assert jumped.current_step_id == "three"

    with pytest.raises(InvalidStateError, match="Override target"):
        engine.advance(definition, instance, StepCompletion(next_step_override="nope"))


def test_validator_rejection_leaves_instance_in_place() -> None:
    definition = compile_spec(
        WorkflowSpec(
            id="form_v1",
            label="Form",
            version=1,
            steps=(
                StepSpec(
                    id="ask",
                    kind="form",
                    collects=("name",),
                    ui={"fields": [{"id": "name", "label": "Name"}]},
                    next="done",
                ),
                StepSpec(id="done", kind="assistant_copy_only"),
            ),
        )
    )
    instance = engine.start(definition)
    validator = RequiredFieldsValidator()

    with pytest.raises(StepValidationError) as exc_info:
        engine.advance(
            definition, instance, StepCompletion(fields={"name": "  "}), validator=validator
        )
    assert exc_info.value.step_id == "ask"
    assert exc_info.value.issues == ["name is required"]
    assert instance.current_step_id == "ask"
    assert instance.collected_data == {}

    moved = engine.advance(
        definition, instance, StepCompletion(fields={"name": "Maya"}), validator=validator
    )
    assert moved.current_step_id == "done"


def test_cancel() -> None:
    definition = _linear()
    instance = engine.start(definition)
    cancelled = engine.cancel(instance)
    assert cancelled.status == "cancelled"
    assert cancelled.current_step_id == "one"
    assert engine.cancel(cancelled) is cancelled

    with pytest.raises(InvalidStateError):
        engine.advance(definition, cancelled)


def test_cancel_idle_instance() -> None:
    idle = WorkflowInstance(definition_id="linear_v1")
    assert engine.cancel(idle).status == "cancelled"


def test_cancel_completed_instance_is_rejected() -> None:
    definition = _linear()
    instance = engine.start(definition)
    for _ in range(3):
        instance = engine.advance(definition, instance)
    with pytest.raises(InvalidStateError, match="already completed"):
        engine.cancel(instance)


def test_reset_clears_data_and_returns_to_entry() -> None:
    definition = _linear()
    instance = engine.start(definition)
    instance = engine.advance(definition, instance, StepCompletion(fields={"a": 1}))
    instance = engine.advance(definition, instance)

    reset = engine.reset(definition, instance)
    assert reset.id == instance.id
    assert reset.status == "in_progress"
    assert reset.current_step_id == "one"
    assert reset.collected_data == {}

    with pytest.raises(InvalidStateError):
        engine.reset(definition, engine.cancel(reset))


def test_transitions_are_deterministic() -> None:
    definition = _branching()
    instance = engine.start(definition)
    completion = StepCompletion(fields={"draft": "v1"})

    assert engine.advance(definition, instance, completion) == engine.advance(
        definition, instance, completion
    )
    advanced = engine.advance(definition, instance, completion)
    assert advanced.updated_at == instance.updated_at
    assert engine.cancel(advanced) == engine.cancel(advanced)
    assert engine.reset(definition, advanced) == engine.reset(definition, advanced)

    idle = WorkflowInstance(definition_id="branching_v1")
    assert engine.advance(definition, idle) == engine.advance(definition, idle)
