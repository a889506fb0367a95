"""Pydantic models describing registry snapshots."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..contracts import WorkflowDefinition, utcnow


class WorkflowSummary(BaseModel):
    """Listing entry for one registered workflow."""

    id: str
    label: str
    version: int
    chat_mode: Optional[str] = None
    step_count: int
    entry_step_id: str

    @classmethod
    def from_definition(cls, definition: WorkflowDefinition) -> "WorkflowSummary":
        return cls(
            id=definition.id,
            label=definition.label,
            version=definition.version,
            chat_mode=definition.chat_mode,
            step_count=len(definition.steps),
            entry_step_id=definition.entry_step.id,
        )


class RegistrySnapshot(BaseModel):
    """Root snapshot document for the registry."""

    workflows: List[WorkflowSummary] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=utcnow)
    schema_version: str = "1"
