"""Tests for running steps through a generation agent."""

from types import SimpleNamespace

import pytest
from pydantic import BaseModel
from pydantic_ai import Agent

from guidedflow import engine
from guidedflow.contracts import StepCompletion, WorkflowInstance
from guidedflow.errors import InvalidStateError
from guidedflow.generation import StepGenerator, extract_fields
from guidedflow.registry import get_definition


class DummyAgent:
    """Agent stand-in that records prompts and returns a canned output."""

    def __init__(self, output):
        self.output = output
        self.prompts = []

    async def run(self, prompt):
        self.prompts.append(prompt)
        return SimpleNamespace(output=self.output)


class ArcDraft(BaseModel):
    name: str
    narrative: str


def _onboarding_at(step_id: str):
    definition = get_definition("first_time_onboarding_v2")
    instance = engine.start(definition).model_copy(update={"current_step_id": step_id})
    return definition, instance


def test_extract_fields_from_json_text() -> None:
    definition = get_definition("first_time_onboarding_v2")
    step = definition.get_step("goal_draft")
    text = '```json\n{"goal": {"title": "Ship", "why": "Because", "timeHorizon": "90d"}}\n```'
    assert extract_fields(step, text) == {
        "goal": {"title": "Ship", "why": "Because", "timeHorizon": "90d"}
    }


def test_extract_fields_wraps_single_field_object() -> None:
    definition = get_definition("first_time_onboarding_v2")
    step = definition.get_step("arc_draft")
    output = ArcDraft(name="Maker", narrative="Builds by hand.")
    assert extract_fields(step, output) == {
        "arc": {"name": "Maker", "narrative": "Builds by hand."}
    }


def test_extract_fields_without_json() -> None:
    definition = get_definition("first_time_onboarding_v2")
    step = definition.get_step("arc_draft")
    assert extract_fields(step, "Here are some ideas.") == {}
    # Steps collecting nothing never extract.
    assert extract_fields(definition.get_step("arc_intro"), {"arc": 1}) == {}


@pytest.mark.asyncio
async def test_static_step_skips_agent() -> None:
    definition = get_definition("first_time_onboarding_v2")
    instance = engine.start(definition)
    agent = DummyAgent("unused")

    result = await StepGenerator(agent).generate(definition, instance)

    assert agent.prompts == []
    assert result.step_id == "welcome_orientation"
    assert result.text.startswith("👋 Welcome.")
    assert result.fields == {}


@pytest.mark.asyncio
async def test_generate_step_feeds_completion_back() -> None:
    definition, instance = _onboarding_at("arc_draft")
    instance = instance.model_copy(update={"collected_data": {"desireSummary": "make things"}})
    agent = DummyAgent({"name": "Maker", "narrative": "Builds by hand."})

    result = await StepGenerator(agent).generate(definition, instance)

    assert len(agent.prompts) == 1
    assert "make things" in agent.prompts[0]
    assert result.fields == {"arc": {"name": "Maker", "narrative": "Builds by hand."}}

    advanced = engine.advance(definition, instance, result.to_completion())
    assert advanced.current_step_id == "arc_confirm"
    assert advanced.collected_data["arc"]["name"] == "Maker"

    confirmed = engine.advance(
        definition, advanced, StepCompletion(decision="confirm", step_id="arc_confirm")
    )
    assert confirmed.current_step_id == "goal_draft"


@pytest.mark.asyncio
async def test_conversational_step_returns_text_only() -> None:
    definition, instance = _onboarding_at("identity_intro")
    agent = DummyAgent("Tell me a little about yourself.")

    result = await StepGenerator(agent).generate(definition, instance)

    assert result.text == "Tell me a little about yourself."
    assert result.fields == {}
    completion = result.to_completion()
    assert completion.step_id == "identity_intro"
    assert completion.fields == {}
    assert completion.decision is None


@pytest.mark.asyncio
async def test_generate_with_pydantic_ai_test_model() -> None:
    definition = get_definition("arc_creation_v1")
    instance = engine.advance(
        definition,
        engine.start(definition),
        StepCompletion(fields={"prompt": "ship the thing"}),
    )
    from pydantic_ai.models.test import TestModel

    agent = Agent(TestModel(custom_output_text="A maker who ships."))

    result = await StepGenerator(agent).generate(definition, instance)

    assert result.step_id == "agent_generate_arc"
    assert result.text == "A maker who ships."


@pytest.mark.asyncio
async def test_generate_rejects_finished_instances() -> None:
    definition = get_definition("arc_creation_v1")
    idle = WorkflowInstance(definition_id=definition.id)
    with pytest.raises(InvalidStateError):
        await StepGenerator(DummyAgent("x")).generate(definition, idle)

    cancelled = engine.cancel(engine.start(definition))
    with pytest.raises(InvalidStateError):
        await StepGenerator(DummyAgent("x")).generate(definition, cancelled)
