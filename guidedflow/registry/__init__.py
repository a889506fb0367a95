"""Workflow registry: workflow id -> compiled definition."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from ..compiler import compile_spec
from ..config import GuidedFlowConfig, load_config
from ..contracts import WorkflowDefinition
from ..errors import NotFoundError, WorkflowSpecError
from ..spec import WorkflowSpec, load_spec
from ..workflows import BUILTIN_SPECS
from .models import RegistrySnapshot, WorkflowSummary

logger = logging.getLogger(__name__)


class WorkflowRegistry:
    """Read-only lookup of compiled workflow definitions.

    The mapping is fixed at construction. Publishing a revision returns a new
    registry instead of changing this one.
    """

    def __init__(self, definitions: Iterable[WorkflowDefinition] = ()) -> None:
        by_id: dict[str, WorkflowDefinition] = {}
        for definition in definitions:
            if definition.id in by_id:
                raise WorkflowSpecError(
                    definition.id, ["workflow id is registered more than once"]
                )
            by_id[definition.id] = definition
        self._definitions: Mapping[str, WorkflowDefinition] = MappingProxyType(by_id)

    def __contains__(self, workflow_id: object) -> bool:
        return workflow_id in self._definitions

    def __iter__(self) -> Iterator[WorkflowDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def ids(self) -> list[str]:
        return list(self._definitions)

    def find(self, workflow_id: str) -> Optional[WorkflowDefinition]:
        """Return the definition for ``workflow_id`` or ``None``."""
        return self._definitions.get(workflow_id)

    def get(self, workflow_id: str) -> WorkflowDefinition:
        """Return the definition for ``workflow_id``.

        Raises:
            NotFoundError: If no workflow with that id is registered.
        """
        definition = self._definitions.get(workflow_id)
        if definition is None:
            raise NotFoundError(f"Workflow {workflow_id!r} is not registered")
        return definition

    def for_chat_mode(self, chat_mode: str) -> WorkflowDefinition:
        """Return the workflow a host should launch for ``chat_mode``."""
        for definition in self._definitions.values():
            if definition.chat_mode == chat_mode:
                return definition
        raise NotFoundError(f"No workflow registered for chat mode {chat_mode!r}")

    def publish(self, definition: WorkflowDefinition) -> "WorkflowRegistry":
        """Return a new registry that includes ``definition``.

        A definition replacing an existing id must carry a higher version.
        """
        current = self._definitions.get(definition.id)
        if current is not None and definition.version <= current.version:
            raise WorkflowSpecError(
                definition.id,
                [
                    f"version {definition.version} does not supersede "
                    f"published version {current.version}"
                ],
            )
        merged = dict(self._definitions)
        merged[definition.id] = definition
        logger.info(f"Published workflow {definition.id} v{definition.version}")
        return WorkflowRegistry(merged.values())

    def snapshot(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            workflows=[WorkflowSummary.from_definition(d) for d in self]
        )


def build_registry(specs: Iterable[WorkflowSpec]) -> WorkflowRegistry:
    """Compile every spec and build a registry; any invalid spec rejects all."""
    return WorkflowRegistry(compile_spec(spec) for spec in specs)


def load_registry(config: Optional[GuidedFlowConfig] = None) -> WorkflowRegistry:
    """Build a registry from the shipped specs plus YAML specs in ``config``."""
    config = config or load_config()
    extra = [load_spec(path) for path in config.spec_paths]
    if extra:
        logger.info(f"Loaded {len(extra)} workflow specs from configuration")
    return build_registry([*BUILTIN_SPECS, *extra])


REGISTRY = build_registry(BUILTIN_SPECS)


def get_definition(workflow_id: str) -> WorkflowDefinition:
    """Look up a shipped workflow definition by id."""
    return REGISTRY.get(workflow_id)


__all__ = [
    "WorkflowRegistry",
    "WorkflowSummary",
    "RegistrySnapshot",
    "REGISTRY",
    "build_registry",
    "load_registry",
    "get_definition",
]
