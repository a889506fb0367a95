"""Transition engine for workflow instances.

Every function here is synchronous and pure with respect to its inputs:
instances are immutable, so each transition returns a new
``WorkflowInstance`` and the caller's copy is never touched. Transitions
leave ``updated_at`` alone, so equal inputs give equal results. The host
stamps and persists each new state and serializes concurrent callers (see
:mod:`guidedflow.runtime`).
"""

from __future__ import annotations

import logging
from typing import Optional

from .contracts import (
    StepCompletion,
    WorkflowDefinition,
    WorkflowInstance,
    WorkflowStep,
)
from .errors import InvalidStateError, StepValidationError
from .validation import StepValidator

logger = logging.getLogger(__name__)


def current_step(
    definition: WorkflowDefinition, instance: WorkflowInstance
) -> Optional[WorkflowStep]:
    """Return the step the instance points at, or ``None`` while idle."""
    if instance.current_step_id is None:
        return None
    return definition.get_step(instance.current_step_id)


def _ensure_bound(definition: WorkflowDefinition, instance: WorkflowInstance) -> None:
    if instance.definition_id != definition.id:
        raise InvalidStateError(
            f"Instance {instance.id} is bound to {instance.definition_id}, "
            f"not {definition.id}"
        )


def _resolve_successor(
    step: WorkflowStep, completion: StepCompletion
) -> Optional[str]:
    if step.type == "confirm":
        if completion.decision == "confirm":
            return step.next_step_on_confirm_id
        return step.next_step_on_edit_id
    if completion.decision is not None:
        logger.debug(f"Ignoring decision {completion.decision} on {step.type} step {step.id}")
    return step.next_step_id


def start(
    definition: WorkflowDefinition, instance_id: Optional[str] = None
) -> WorkflowInstance:
    """Create an instance of ``definition`` positioned on its entry step."""
    fields = {"definition_id": definition.id}
    if instance_id is not None:
        fields["id"] = instance_id
    instance = WorkflowInstance(**fields)
    logger.info(f"Starting workflow {definition.id} v{definition.version} as {instance.id}")
    return advance(definition, instance)


def advance(
    definition: WorkflowDefinition,
    instance: WorkflowInstance,
    completion: Optional[StepCompletion] = None,
    validator: Optional[StepValidator] = None,
) -> WorkflowInstance:
    """Complete the current step and move the instance along the graph.

    Args:
        definition: Definition the instance is bound to.
        instance: Current state; never modified.
        completion: Fields collected by the step plus, for confirm steps, the
            user's ``decision``. ``None`` is an empty completion.
        validator: Optional check run before any field is merged.

    Returns:
        The next state: pointing at the successor step, or ``completed`` with
        ``outcome`` set when the step was terminal.

    Raises:
        InvalidStateError: The instance is completed or cancelled, belongs to
            another definition, or the completion targets a different step.
        StepValidationError: ``validator`` rejected the completion.
    """
    completion = completion or StepCompletion()
    if instance.is_terminal:
        raise InvalidStateError(
            f"Instance {instance.id} is {instance.status} and accepts no transitions"
        )
    _ensure_bound(definition, instance)

    if instance.status == "idle":
        collected = {**instance.collected_data, **completion.fields}
        entry = definition.entry_step
        logger.debug(f"Instance {instance.id} entering {entry.id}")
        return instance.model_copy(
            update={
                "status": "in_progress",
                "current_step_id": entry.id,
                "collected_data": collected,
            }
        )

    step = current_step(definition, instance)
    if step is None:
        raise InvalidStateError(
            f"Instance {instance.id} points at unknown step {instance.current_step_id!r}"
        )
    if completion.step_id is not None and completion.step_id != step.id:
        raise InvalidStateError(
            f"Completion for {completion.step_id} is stale; "
            f"instance {instance.id} is at {step.id}"
        )

    if validator is not None:
        issues = validator.validate(step, completion, instance)
        if issues:
            logger.info(f"Step {step.id} of {instance.id} rejected: {issues}")
            raise StepValidationError(step.id, issues)

    # Whole-value replacement: nested objects are never merged.
    collected = {**instance.collected_data, **completion.fields}

    if completion.next_step_override is not None:
        if definition.get_step(completion.next_step_override) is None:
            raise InvalidStateError(
                f"Override target {completion.next_step_override!r} is not a step "
                f"of {definition.id}"
            )
        successor = completion.next_step_override
    else:
        successor = _resolve_successor(step, completion)

    if successor is not None:
        logger.info(f"Instance {instance.id} advanced {step.id} -> {successor}")
        return instance.model_copy(
            update={
                "current_step_id": successor,
                "collected_data": collected,
            }
        )

    logger.info(f"Instance {instance.id} completed {definition.id} at {step.id}")
    return instance.model_copy(
        update={
            "status": "completed",
            "collected_data": collected,
            "outcome": dict(collected),
        }
    )


def cancel(instance: WorkflowInstance) -> WorkflowInstance:
    """Abandon the instance. Completed instances cannot be cancelled."""
    if instance.status == "completed":
        raise InvalidStateError(f"Instance {instance.id} is already completed")
    if instance.status == "cancelled":
        return instance
    logger.info(f"Instance {instance.id} cancelled at {instance.current_step_id}")
    return instance.model_copy(update={"status": "cancelled"})


def reset(definition: WorkflowDefinition, instance: WorkflowInstance) -> WorkflowInstance:
    """Drop all collected data and return the instance to the entry step."""
    if instance.is_terminal:
        raise InvalidStateError(
            f"Instance {instance.id} is {instance.status} and cannot be reset"
        )
    _ensure_bound(definition, instance)
    logger.info(f"Instance {instance.id} reset to {definition.entry_step.id}")
    return instance.model_copy(
        update={
            "status": "in_progress",
            "current_step_id": definition.entry_step.id,
            "collected_data": {},
            "outcome": None,
        }
    )


__all__ = ["current_step", "start", "advance", "cancel", "reset"]
