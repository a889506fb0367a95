"""guidedflow: Declarative guided workflows for chat-based coaching flows."""

from .compiler import compile_spec
from .contracts import StepCompletion, WorkflowDefinition, WorkflowInstance, WorkflowStep
from .engine import advance, cancel, current_step, reset, start
from .errors import (
    GuidedFlowError,
    InvalidStateError,
    NotFoundError,
    StepValidationError,
    WorkflowSpecError,
)
from .persistence import repository_for_url
from .registry import REGISTRY, get_definition
from .runtime import WorkflowRuntime
from .spec import StepSpec, WorkflowSpec

__version__ = "0.1.0"
__all__ = [
    "StepSpec",
    "WorkflowSpec",
    "WorkflowStep",
    "WorkflowDefinition",
    "WorkflowInstance",
    "StepCompletion",
    "compile_spec",
    "start",
    "advance",
    "cancel",
    "reset",
    "current_step",
    "repository_for_url",
    "get_definition",
    "REGISTRY",
    "WorkflowRuntime",
    "GuidedFlowError",
    "WorkflowSpecError",
    "InvalidStateError",
    "NotFoundError",
    "StepValidationError",
]
