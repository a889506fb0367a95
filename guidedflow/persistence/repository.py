"""Repository abstraction for workflow instance persistence."""

from __future__ import annotations

from typing import Optional, Protocol

from ..contracts import WorkflowInstance


class InstanceRepository(Protocol):
    """Protocol for workflow instance persistence backends."""

    async def save_instance(self, instance: WorkflowInstance) -> None:
        """Insert or replace the stored document for ``instance.id``."""

    async def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        """Retrieve the instance by id."""

    async def list_instances(
        self, definition_id: Optional[str] = None
    ) -> list[WorkflowInstance]:
        """Return stored instances, optionally for one definition only."""

    async def delete_instance(self, instance_id: str) -> bool:
        """Remove the instance; return ``True`` if it existed."""
