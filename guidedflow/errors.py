"""Exception types raised by the guided-workflow engine."""

from __future__ import annotations

from typing import Iterable, Optional


class GuidedFlowError(Exception):
    """Base class for engine errors."""


class WorkflowSpecError(GuidedFlowError, ValueError):
    """Raised when a workflow spec cannot be compiled.

    Every problem found is collected in ``problems`` so authors can fix a spec
    in one pass instead of one error at a time.
    """

    def __init__(self, workflow_id: Optional[str], problems: Iterable[str]):
        self.workflow_id = workflow_id
        self.problems = list(problems)
        label = workflow_id or "<unknown>"
        detail = "; ".join(self.problems)
        super().__init__(f"Invalid workflow spec {label}: {detail}")


class InvalidStateError(GuidedFlowError):
    """Raised when a transition is requested that the instance cannot take."""


class NotFoundError(GuidedFlowError, KeyError):
    """Raised when a workflow definition or instance id is unknown."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class StepValidationError(GuidedFlowError):
    """Raised when a step validator rejects the supplied fields.

    The instance is left untouched, still pointing at ``step_id``.
    """

    def __init__(self, step_id: str, issues: Iterable[str]):
        self.step_id = step_id
        self.issues = list(issues)
        super().__init__(
            f"Step {step_id} rejected completion: {'; '.join(self.issues)}"
        )


__all__ = [
    "GuidedFlowError",
    "WorkflowSpecError",
    "InvalidStateError",
    "NotFoundError",
    "StepValidationError",
]
