"""Optional validators run by the engine before collected fields are merged.

Validation is opt-in. Without a validator the engine accepts any
JSON-compatible fields; ``validationHint`` text is only ever shown to the
generation collaborator.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol, Type

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from .contracts import StepCompletion, WorkflowDefinition, WorkflowInstance, WorkflowStep


SCHEMA_TYPES: Dict[str, Any] = {
    "string": str,
    "number": float,
    "integer": int,
    "boolean": bool,
    "string[]": List[str],
    "number[]": List[float],
}


class StepValidator(Protocol):
    """Protocol for validators plugged into :func:`guidedflow.engine.advance`."""

    def validate(
        self,
        step: WorkflowStep,
        completion: StepCompletion,
        instance: WorkflowInstance,
    ) -> List[str]:
        """Return human-readable issues; an empty list accepts the completion."""


class RequiredFieldsValidator:
    """Reject form submissions that leave a card field blank.

    Only steps with ``ui.fields`` are checked. Field ids listed in
    ``optional`` may be omitted or empty.
    """

    def __init__(self, optional: Iterable[str] = ()) -> None:
        self.optional = frozenset(optional)

    def validate(
        self,
        step: WorkflowStep,
        completion: StepCompletion,
        instance: WorkflowInstance,
    ) -> List[str]:
        if step.ui is None or not step.ui.fields:
            return []
        issues = []
        for field in step.ui.fields:
            if field.id in self.optional:
                continue
            value = completion.fields.get(field.id)
            if value is None or (isinstance(value, str) and not value.strip()):
                issues.append(f"{field.id} is required")
        return issues


def _annotation_for(name: str, spec: Any) -> tuple[Any, bool]:
    """Map a loose schema entry to ``(annotation, optional)``."""
    if isinstance(spec, dict):
        return _model_for(name, spec), False
    if isinstance(spec, str):
        optional = spec.endswith("?")
        base = spec.rstrip("?").strip()
        return SCHEMA_TYPES.get(base, Any), optional
    return Any, True


def _model_for(name: str, fields: Dict[str, Any]) -> Type[BaseModel]:
    definitions: Dict[str, Any] = {}
    for field_name, spec in fields.items():
        annotation, optional = _annotation_for(f"{name}_{field_name}", spec)
        if optional:
            definitions[field_name] = (Optional[annotation], None)
        else:
            definitions[field_name] = (annotation, ...)
    return create_model(name, __config__=ConfigDict(extra="allow"), **definitions)


class OutcomeSchemaValidator:
    """Check supplied fields against the definition's loose outcome schema.

    The schema is the ``{"kind": ..., "fields": {...}}`` mapping shipped with
    each workflow. Type names are ``string``, ``number``, ``integer``,
    ``boolean``, ``string[]`` and ``number[]``; a trailing ``?`` marks an
    optional (nullable) field, nested mappings describe objects, and any
    other type name accepts every value. Only fields present in both the
    completion and the schema are checked.
    """

    def __init__(self, definition: WorkflowDefinition) -> None:
        schema = definition.outcome_schema or {}
        self.fields: Dict[str, Any] = dict(schema.get("fields") or {})
        self._model = self._build_model(definition.id)

    def _build_model(self, workflow_id: str) -> Type[BaseModel]:
        definitions: Dict[str, Any] = {}
        for field_name, spec in self.fields.items():
            annotation, optional = _annotation_for(
                f"{workflow_id}_{field_name}", spec
            )
            if optional:
                annotation = Optional[annotation]
            # Top-level fields arrive one step at a time, so none is required.
            definitions[field_name] = (annotation, None)
        return create_model(
            f"{workflow_id}_outcome",
            __config__=ConfigDict(extra="ignore"),
            **definitions,
        )

    def validate(
        self,
        step: WorkflowStep,
        completion: StepCompletion,
        instance: WorkflowInstance,
    ) -> List[str]:
        supplied = {k: v for k, v in completion.fields.items() if k in self.fields}
        if not supplied:
            return []
        try:
            self._model.model_validate(supplied)
        except ValidationError as exc:
            return [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            ]
        return []


class CompositeValidator:
    """Run several validators and concatenate their issues."""

    def __init__(self, *validators: StepValidator) -> None:
        self.validators = validators

    def validate(
        self,
        step: WorkflowStep,
        completion: StepCompletion,
        instance: WorkflowInstance,
    ) -> List[str]:
        issues: List[str] = []
        for validator in self.validators:
            issues.extend(validator.validate(step, completion, instance))
        return issues


__all__ = [
    "StepValidator",
    "RequiredFieldsValidator",
    "OutcomeSchemaValidator",
    "CompositeValidator",
]
