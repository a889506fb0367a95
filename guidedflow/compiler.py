"""Compile authoring ``WorkflowSpec``s into runtime ``WorkflowDefinition``s."""

from __future__ import annotations

import logging
from collections import Counter, deque
from typing import Dict, List, Optional

from .contracts import StepType, WorkflowDefinition, WorkflowStep
from .errors import WorkflowSpecError
from .spec import CopyLength, StepKind, StepSpec, WorkflowSpec

logger = logging.getLogger(__name__)

STEP_TYPE_BY_KIND: Dict[StepKind, StepType] = {
    "assistant_copy_only": "collect_fields",
    "form": "collect_fields",
    "agent_generate": "agent_generate",
    "confirm": "confirm",
}

COPY_LENGTH_INSTRUCTIONS: Dict[CopyLength, str] = {
    "one_sentence": "Keep your visible reply to a single short sentence.",
    "two_sentences": "Keep your visible reply to one or two short sentences.",
    "short_paragraph": "Keep your visible reply to one short paragraph (2–3 sentences).",
}


def build_prompt_template(step: StepSpec) -> Optional[str]:
    """Join the step prompt and its copy-length instruction."""
    suffix = COPY_LENGTH_INSTRUCTIONS[step.copy_length] if step.copy_length else ""
    # Only the outer whitespace of the prompt is trimmed.
    parts = [part for part in (step.prompt.strip(), suffix) if part]
    return " ".join(parts) or None


def _compile_step(step: StepSpec) -> WorkflowStep:
    step_type = STEP_TYPE_BY_KIND[step.kind]
    on_confirm = on_edit = None
    if step_type == "confirm":
        on_confirm = step.next_on_confirm or step.next
        on_edit = step.next_on_edit

    return WorkflowStep(
        id=step.id,
        type=step_type,
        label=step.label,
        fields_collected=step.collects,
        prompt_template=build_prompt_template(step),
        validation_hint=step.validation_hint,
        render_mode=step.render_mode,
        static_copy=step.static_copy,
        ui=None if step.ui is None or step.ui.is_empty() else step.ui,
        hide_freeform_chat_input=step.hide_freeform_chat_input,
        next_step_id=step.next,
        next_step_on_confirm_id=on_confirm,
        next_step_on_edit_id=on_edit,
    )


def check_spec(spec: WorkflowSpec) -> List[str]:
    """Return every structural problem in ``spec`` (empty when valid)."""
    problems: List[str] = []
    if not spec.steps:
        problems.append("workflow must have at least one step")
        return problems

    counts = Counter(step.id for step in spec.steps)
    for step_id, count in counts.items():
        if count > 1:
            problems.append(f"duplicate step id {step_id!r} ({count} times)")

    known = set(counts)
    for step in spec.steps:
        targets = {
            "next": step.next,
            "nextOnConfirm": step.next_on_confirm,
            "nextOnEdit": step.next_on_edit,
        }
        for attr, target in targets.items():
            if target is not None and target not in known:
                problems.append(
                    f"step {step.id!r} references unknown {attr} {target!r}"
                )
        if step.kind != "confirm" and (step.next_on_confirm or step.next_on_edit):
            problems.append(
                f"step {step.id!r} of kind {step.kind!r} cannot declare confirm/edit branches"
            )
        if step.render_mode == "static" and not step.static_copy:
            problems.append(f"static step {step.id!r} has no staticCopy")
    return problems


def _unreachable_steps(definition: WorkflowDefinition) -> List[str]:
    seen = {definition.entry_step.id}
    queue = deque([definition.entry_step])
    while queue:
        step = queue.popleft()
        for target in step.successor_ids():
            if target not in seen:
                seen.add(target)
                queue.append(definition.get_step(target))
    return [step_id for step_id in definition.step_ids if step_id not in seen]


def compile_spec(spec: WorkflowSpec) -> WorkflowDefinition:
    """Compile ``spec`` into an immutable ``WorkflowDefinition``.

    Raises:
        WorkflowSpecError: If the spec has duplicate ids, dangling transition
            targets, static steps without copy, or no steps at all.
    """
    problems = check_spec(spec)
    if problems:
        raise WorkflowSpecError(spec.id, problems)

    definition = WorkflowDefinition(
        id=spec.id,
        label=spec.label,
        version=spec.version,
        chat_mode=spec.chat_mode,
        outcome_schema=spec.outcome_schema,
        steps=tuple(_compile_step(step) for step in spec.steps),
    )

    unreachable = _unreachable_steps(definition)
    if unreachable:
        logger.warning(
            f"Workflow {spec.id} v{spec.version} has steps unreachable from "
            f"{definition.entry_step.id}: {unreachable}"
        )
    logger.debug(
        f"Compiled workflow {spec.id} v{spec.version} with {len(definition.steps)} steps"
    )
    return definition


__all__ = [
    "STEP_TYPE_BY_KIND",
    "COPY_LENGTH_INSTRUCTIONS",
    "build_prompt_template",
    "check_spec",
    "compile_spec",
]
