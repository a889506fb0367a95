"""Runtime contracts for the guided-workflow engine."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, JsonValue
from pydantic.alias_generators import to_camel

from .spec import RenderMode, StepUi

StepType = Literal["collect_fields", "agent_generate", "confirm"]
InstanceStatus = Literal["idle", "in_progress", "completed", "cancelled"]
Decision = Literal["confirm", "edit"]

TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "cancelled"})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowStep(BaseModel):
    """One compiled node of the step graph."""

    id: str
    type: StepType
    label: str = ""
    fields_collected: tuple[str, ...] = Field(default_factory=tuple)
    prompt_template: Optional[str] = None
    validation_hint: Optional[str] = None
    render_mode: RenderMode = "llm"
    static_copy: Optional[str] = None
    ui: Optional[StepUi] = None
    hide_freeform_chat_input: bool = False
    next_step_id: Optional[str] = None
    next_step_on_confirm_id: Optional[str] = None
    next_step_on_edit_id: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    def successor_ids(self) -> tuple[str, ...]:
        """Every step id this step can transition to."""
        targets = (
            self.next_step_id,
            self.next_step_on_confirm_id,
            self.next_step_on_edit_id,
        )
        return tuple(t for t in targets if t)


class WorkflowDefinition(BaseModel):
    """Immutable, compiled step graph executed by the engine."""

    id: str
    label: str
    version: int
    chat_mode: Optional[str] = None
    outcome_schema: Optional[dict[str, Any]] = None
    steps: tuple[WorkflowStep, ...]

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    @property
    def entry_step(self) -> WorkflowStep:
        return self.steps[0]

    @property
    def step_ids(self) -> tuple[str, ...]:
        return tuple(step.id for step in self.steps)

    def get_step(self, step_id: str) -> Optional[WorkflowStep]:
        """Return the step with ``step_id`` or ``None``."""
        for step in self.steps:
            if step.id == step_id:
                return step
        return None


class WorkflowInstance(BaseModel):
    """One run of a workflow definition.

    Serialized with camelCase keys so the JSON document can be shared with
    hosts that read camelCase documents.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    definition_id: str
    status: InstanceStatus = "idle"
    current_step_id: Optional[str] = None
    collected_data: dict[str, JsonValue] = Field(default_factory=dict)
    outcome: Optional[dict[str, JsonValue]] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_json(self) -> str:
        """Serialize instance to JSON."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str | bytes) -> "WorkflowInstance":
        """Deserialize instance from JSON."""
        return cls.model_validate_json(data)


class StepCompletion(BaseModel):
    """Result of the current step handed to :func:`guidedflow.engine.advance`."""

    fields: dict[str, JsonValue] = Field(default_factory=dict)
    decision: Optional[Decision] = None
    step_id: Optional[str] = None
    next_step_override: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    @classmethod
    def from_payload(
        cls, payload: Optional[Mapping[str, Any]] = None
    ) -> "StepCompletion":
        """Build a completion from a flat host payload.

        ``decision`` is lifted out of the mapping; every other key is a
        collected field.
        """
        data = dict(payload or {})
        decision = data.pop("decision", None)
        return cls(fields=data, decision=decision)


__all__ = [
    "StepType",
    "InstanceStatus",
    "Decision",
    "TERMINAL_STATUSES",
    "WorkflowStep",
    "WorkflowDefinition",
    "WorkflowInstance",
    "StepCompletion",
]
