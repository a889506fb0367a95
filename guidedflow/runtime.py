"""Async host facade tying the registry, engine and repository together."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from . import engine
from .config import GuidedFlowConfig, load_config
from .contracts import StepCompletion, WorkflowDefinition, WorkflowInstance, utcnow
from .errors import NotFoundError
from .persistence import InMemoryInstanceRepository, InstanceRepository, repository_for_url
from .prompts import build_step_prompt
from .registry import REGISTRY, WorkflowRegistry, load_registry
from .validation import CompositeValidator, OutcomeSchemaValidator, StepValidator


class WorkflowRuntime:
    """Load, transition and save workflow instances.

    Each call on a given instance id holds that instance's lock for the whole
    load -> transition -> save sequence, so two ``advance`` calls for the same
    id never read the same state. The engine leaves timestamps alone;
    ``updated_at`` is stamped here when a new state is saved.
    """

    def __init__(
        self,
        registry: Optional[WorkflowRegistry] = None,
        repository: Optional[InstanceRepository] = None,
        validator: Optional[StepValidator] = None,
        validate_outcome_schema: bool = False,
    ) -> None:
        self.registry = registry if registry is not None else REGISTRY
        self.repository = (
            repository if repository is not None else InMemoryInstanceRepository()
        )
        self.validator = validator
        self.validate_outcome_schema = validate_outcome_schema
        # Only ids with a call in flight have an entry.
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    @classmethod
    def from_config(cls, config: Optional[GuidedFlowConfig] = None) -> "WorkflowRuntime":
        config = config or load_config()
        return cls(
            registry=load_registry(config),
            repository=repository_for_url(config.database_url),
            validate_outcome_schema=config.validate_outcome_schema,
        )

    @asynccontextmanager
    async def _instance_lock(self, instance_id: str) -> AsyncIterator[None]:
        lock = self._locks.get(instance_id)
        if lock is None:
            lock = self._locks[instance_id] = asyncio.Lock()
        self._lock_users[instance_id] = self._lock_users.get(instance_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[instance_id] -= 1
            if not self._lock_users[instance_id]:
                del self._lock_users[instance_id]
                del self._locks[instance_id]

    def _validator_for(self, definition: WorkflowDefinition) -> Optional[StepValidator]:
        if not self.validate_outcome_schema or not definition.outcome_schema:
            return self.validator
        schema_validator = OutcomeSchemaValidator(definition)
        if self.validator is None:
            return schema_validator
        return CompositeValidator(self.validator, schema_validator)

    async def _load(self, instance_id: str) -> tuple[WorkflowDefinition, WorkflowInstance]:
        instance = await self.get(instance_id)
        return self.registry.get(instance.definition_id), instance

    async def _save(self, instance: WorkflowInstance) -> WorkflowInstance:
        stamped = instance.model_copy(update={"updated_at": utcnow()})
        await self.repository.save_instance(stamped)
        return stamped

    # ------------------------------------------------------------------
    async def start(
        self, workflow_id: str, instance_id: Optional[str] = None
    ) -> WorkflowInstance:
        """Create and persist a new instance of ``workflow_id``."""
        definition = self.registry.get(workflow_id)
        instance = engine.start(definition, instance_id=instance_id)
        async with self._instance_lock(instance.id):
            return await self._save(instance)

    async def get(self, instance_id: str) -> WorkflowInstance:
        instance = await self.repository.get_instance(instance_id)
        if instance is None:
            raise NotFoundError(f"Instance {instance_id!r} not found")
        return instance

    async def advance(
        self, instance_id: str, completion: Optional[StepCompletion] = None
    ) -> WorkflowInstance:
        async with self._instance_lock(instance_id):
            definition, instance = await self._load(instance_id)
            updated = engine.advance(
                definition,
                instance,
                completion,
                validator=self._validator_for(definition),
            )
            return await self._save(updated)

    async def cancel(self, instance_id: str) -> WorkflowInstance:
        """Cancel the instance; works even if its workflow is no longer registered."""
        async with self._instance_lock(instance_id):
            instance = await self.get(instance_id)
            updated = engine.cancel(instance)
            if updated is instance:
                return instance
            return await self._save(updated)

    async def reset(self, instance_id: str) -> WorkflowInstance:
        async with self._instance_lock(instance_id):
            definition, instance = await self._load(instance_id)
            return await self._save(engine.reset(definition, instance))

    async def current_step_prompt(self, instance_id: str) -> Optional[str]:
        """Return the generation prompt for the instance's current step."""
        definition, instance = await self._load(instance_id)
        step = engine.current_step(definition, instance)
        if step is None or instance.is_terminal:
            return None
        return build_step_prompt(definition, step, instance.collected_data)


__all__ = ["WorkflowRuntime"]
