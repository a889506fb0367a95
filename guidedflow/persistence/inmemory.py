"""In-memory implementation of the instance repository."""

from __future__ import annotations

from typing import Dict, Optional

from ..contracts import WorkflowInstance
from .repository import InstanceRepository


class InMemoryInstanceRepository(InstanceRepository):
    """Store workflow instances in local memory.

    Useful for tests or when no database is configured. Data is not
    persisted across process restarts.
    """

    def __init__(self) -> None:
        self._instances: Dict[str, WorkflowInstance] = {}

    # ------------------------------------------------------------------
    async def save_instance(self, instance: WorkflowInstance) -> None:
        self._instances[instance.id] = instance

    async def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        return self._instances.get(instance_id)

    async def list_instances(
        self, definition_id: Optional[str] = None
    ) -> list[WorkflowInstance]:
        return [
            instance
            for instance in self._instances.values()
            if definition_id is None or instance.definition_id == definition_id
        ]

    async def delete_instance(self, instance_id: str) -> bool:
        return self._instances.pop(instance_id, None) is not None
