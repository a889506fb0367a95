"""Authoring models for guided workflows.

A ``WorkflowSpec`` is the human-editable description of a flow. The runtime
never executes it directly; :func:`guidedflow.compiler.compile_spec` turns it
into a :class:`~guidedflow.contracts.WorkflowDefinition`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

StepKind = Literal["assistant_copy_only", "form", "agent_generate", "confirm"]
RenderMode = Literal["llm", "static"]
CopyLength = Literal["one_sentence", "two_sentences", "short_paragraph"]
FormFieldType = Literal["text", "number", "textarea"]

_AUTHORING_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)


class FormFieldSpec(BaseModel):
    """One input rendered on a form card."""

    id: str
    label: str = ""
    type: FormFieldType = "text"
    placeholder: Optional[str] = None

    model_config = _AUTHORING_CONFIG


class StepUi(BaseModel):
    """Card metadata for a step. Only affects rendering, never the graph."""

    title: Optional[str] = None
    description: Optional[str] = None
    fields: Optional[tuple[FormFieldSpec, ...]] = None
    primary_action_label: Optional[str] = None

    model_config = _AUTHORING_CONFIG

    def is_empty(self) -> bool:
        return (
            self.title is None
            and self.description is None
            and self.fields is None
            and self.primary_action_label is None
        )


class StepSpec(BaseModel):
    """Declarative description of one conversational or form step."""

    id: str = Field(..., min_length=1)
    kind: StepKind
    label: str = ""
    prompt: str = ""
    render_mode: RenderMode = "llm"
    static_copy: Optional[str] = None
    copy_length: Optional[CopyLength] = None
    collects: tuple[str, ...] = Field(default_factory=tuple)
    validation_hint: Optional[str] = None
    next: Optional[str] = None
    # Branch targets for ``confirm`` steps. ``next`` doubles as the confirm
    # target when ``next_on_confirm`` is not given.
    next_on_confirm: Optional[str] = None
    next_on_edit: Optional[str] = None
    ui: Optional[StepUi] = None
    hide_freeform_chat_input: bool = False

    model_config = _AUTHORING_CONFIG


class WorkflowSpec(BaseModel):
    """Ordered collection of steps plus a loose outcome schema."""

    id: str = Field(..., min_length=1)
    label: str
    version: int = Field(..., ge=1)
    chat_mode: Optional[str] = None
    outcome_schema: Optional[dict[str, Any]] = None
    steps: tuple[StepSpec, ...] = Field(default_factory=tuple)

    model_config = _AUTHORING_CONFIG


def load_spec(path: str | Path) -> WorkflowSpec:
    """Read a ``WorkflowSpec`` from a YAML (or JSON) file."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return WorkflowSpec.model_validate(data)


__all__ = [
    "StepKind",
    "RenderMode",
    "CopyLength",
    "FormFieldSpec",
    "StepUi",
    "StepSpec",
    "WorkflowSpec",
    "load_spec",
]
