"""Bridge between workflow steps and a pydantic-ai agent.

The engine never calls a model itself. Hosts use :class:`StepGenerator` to
turn the current step into text (and, for drafting steps, proposed field
values) and then hand the result back to the engine as a
:class:`~guidedflow.contracts.StepCompletion`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, JsonValue
from pydantic_ai import Agent

from .contracts import (
    Decision,
    StepCompletion,
    WorkflowDefinition,
    WorkflowInstance,
    WorkflowStep,
)
from .engine import current_step
from .errors import InvalidStateError
from .prompts import build_step_prompt

logger = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    """Text shown to the user plus any fields parsed from the reply."""

    step_id: str
    text: str = ""
    fields: Dict[str, JsonValue] = Field(default_factory=dict)

    def to_completion(self, decision: Optional[Decision] = None) -> StepCompletion:
        return StepCompletion(fields=self.fields, decision=decision, step_id=self.step_id)


def _parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    candidate = text.strip()
    if candidate.startswith("```"):
        candidate = candidate.strip("`")
        if candidate.startswith("json"):
            candidate = candidate[4:]
    start, end = candidate.find("{"), candidate.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        payload = json.loads(candidate[start : end + 1])
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def extract_fields(step: WorkflowStep, output: Any) -> Dict[str, Any]:
    """Map a model reply onto the fields ``step`` collects.

    Keys named in ``fields_collected`` are taken from the JSON object. A step
    collecting a single field whose name is absent from the object receives
    the whole object as that field's value.
    """
    if not step.fields_collected:
        return {}
    if isinstance(output, BaseModel):
        payload = output.model_dump(mode="json")
    elif isinstance(output, dict):
        payload = output
    else:
        payload = _parse_json_object(str(output))
    if payload is None:
        logger.debug(f"No JSON object in reply for step {step.id}")
        return {}

    picked = {key: payload[key] for key in step.fields_collected if key in payload}
    if not picked and len(step.fields_collected) == 1:
        return {step.fields_collected[0]: payload}
    return picked


class StepGenerator:
    """Runs the current step of an instance through a pydantic-ai ``Agent``."""

    def __init__(self, agent: Agent) -> None:
        self.agent = agent

    async def generate(
        self, definition: WorkflowDefinition, instance: WorkflowInstance
    ) -> GenerationResult:
        step = current_step(definition, instance)
        if step is None or instance.is_terminal:
            raise InvalidStateError(
                f"Instance {instance.id} has no active step to generate for"
            )

        if step.render_mode == "static":
            return GenerationResult(step_id=step.id, text=step.static_copy or "")

        prompt = build_step_prompt(definition, step, instance.collected_data)
        logger.debug(f"Generating step {step.id} for instance {instance.id}")
        result = await self.agent.run(prompt)

        output = result.output if hasattr(result, "output") else result
        if isinstance(output, BaseModel):
            text = output.model_dump_json()
        elif isinstance(output, dict):
            text = json.dumps(output, ensure_ascii=False)
        else:
            text = str(output)

        fields = extract_fields(step, output) if step.type == "agent_generate" else {}
        logger.info(
            f"Step {step.id} of {instance.id} generated {len(text)} chars, "
            f"fields={list(fields)}"
        )
        return GenerationResult(step_id=step.id, text=text, fields=fields)


__all__ = ["GenerationResult", "StepGenerator", "extract_fields"]
