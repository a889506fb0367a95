"""Prompt assembly for the generation collaborator."""

from __future__ import annotations

import json
import re
from typing import Any, Mapping, Optional

from .contracts import WorkflowDefinition, WorkflowStep

PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def render_template(template: str, data: Mapping[str, Any]) -> str:
    """Replace ``{{field}}`` placeholders with collected values.

    Unknown placeholders are left as-is so the model can still see the gap.
    """

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in data or data[key] is None:
            return match.group(0)
        return _format_value(data[key])

    return PLACEHOLDER.sub(_substitute, template)


def build_step_prompt(
    definition: WorkflowDefinition,
    step: WorkflowStep,
    collected: Mapping[str, Any],
) -> Optional[str]:
    """Return the full instruction for ``step``, or ``None`` for static steps."""
    if step.render_mode == "static":
        return None

    parts = [f"Workflow: {definition.label} (step {step.id})."]
    if definition.chat_mode:
        parts[0] += f" Chat mode: {definition.chat_mode}."
    if step.prompt_template:
        parts.append(render_template(step.prompt_template, collected))
    if step.validation_hint:
        parts.append(f"Guidance: {step.validation_hint}")
    if step.fields_collected:
        parts.append(f"This step collects: {', '.join(step.fields_collected)}.")
    if collected:
        parts.append(
            "Known so far: " + json.dumps(dict(collected), ensure_ascii=False)
        )
    return "\n\n".join(parts)


__all__ = ["render_template", "build_step_prompt"]
