"""Tests for the optional step validators."""

from guidedflow import engine
from guidedflow.contracts import StepCompletion
from guidedflow.registry import get_definition
from guidedflow.validation import (
    CompositeValidator,
    OutcomeSchemaValidator,
    RequiredFieldsValidator,
)


def _onboarding_at(step_id: str):
    definition = get_definition("first_time_onboarding_v2")
    instance = engine.start(definition).model_copy(update={"current_step_id": step_id})
    return definition, definition.get_step(step_id), instance


def test_required_fields_validator() -> None:
    definition, step, instance = _onboarding_at("identity_basic")
    validator = RequiredFieldsValidator()

    issues = validator.validate(step, StepCompletion(fields={"name": ""}), instance)
    assert issues == ["name is required", "age is required"]

    ok = validator.validate(
        step, StepCompletion(fields={"name": "Maya", "age": 34}), instance
    )
    assert ok == []


def test_required_fields_validator_optional_and_uncarded_steps() -> None:
    definition, step, instance = _onboarding_at("identity_basic")
    validator = RequiredFieldsValidator(optional=["age"])
    assert validator.validate(step, StepCompletion(fields={"name": "Maya"}), instance) == []

    _, intro, _ = _onboarding_at("identity_intro")
    assert RequiredFieldsValidator().validate(intro, StepCompletion(), instance) == []


def test_outcome_schema_validator_checks_types() -> None:
    definition, step, instance = _onboarding_at("identity_basic")
    validator = OutcomeSchemaValidator(definition)

    assert validator.validate(
        step, StepCompletion(fields={"name": "Maya", "age": 34}), instance
    ) == []

    issues = validator.validate(step, StepCompletion(fields={"age": "old"}), instance)
    assert len(issues) == 1
    assert issues[0].startswith("age: ")


def test_outcome_schema_validator_nested_objects() -> None:
    definition, step, instance = _onboarding_at("arc_draft")
    validator = OutcomeSchemaValidator(definition)

    good = {"arc": {"name": "Maker", "narrative": "Builds things by hand."}}
    assert validator.validate(step, StepCompletion(fields=good), instance) == []

    issues = validator.validate(
        step, StepCompletion(fields={"arc": {"name": "Maker"}}), instance
    )
    assert issues == ["arc.narrative: Field required"]


def test_outcome_schema_validator_optional_and_unknown_fields() -> None:
    definition, step, instance = _onboarding_at("profile_avatar")
    validator = OutcomeSchemaValidator(definition)

    assert validator.validate(step, StepCompletion(fields={"avatarUrl": None}), instance) == []
    # Keys outside the schema are not checked.
    assert validator.validate(step, StepCompletion(fields={"extra": 1}), instance) == []


def test_composite_validator_concatenates_issues() -> None:
    definition, step, instance = _onboarding_at("identity_basic")
    validator = CompositeValidator(
        RequiredFieldsValidator(), OutcomeSchemaValidator(definition)
    )
    issues = validator.validate(step, StepCompletion(fields={"age": "old"}), instance)
    assert issues[0] == "name is required"
    assert issues[1].startswith("age: ")
