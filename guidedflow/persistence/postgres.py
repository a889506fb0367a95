"""PostgreSQL implementation of the instance repository."""

from __future__ import annotations

from typing import Optional

import asyncpg

from ..contracts import WorkflowInstance
from .repository import InstanceRepository


class PostgresInstanceRepository(InstanceRepository):
    """Persist workflow instances as JSONB documents in PostgreSQL."""

    def __init__(self, dsn: str):
        self._dsn = dsn
        self._initialized = False

    async def _connect(self) -> asyncpg.Connection:
        conn = await asyncpg.connect(self._dsn)
        if not self._initialized:
            await self._ensure_schema(conn)
            self._initialized = True
        return conn

    async def _ensure_schema(self, conn: asyncpg.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS workflow_instances (
                id TEXT PRIMARY KEY,
                definition_id TEXT NOT NULL,
                status TEXT NOT NULL,
                document JSONB NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL
            )
            """
        )

    # ------------------------------------------------------------------
    async def save_instance(self, instance: WorkflowInstance) -> None:
        conn = await self._connect()
        try:
            await conn.execute(
                """
                INSERT INTO workflow_instances (id, definition_id, status, document, updated_at)
                VALUES ($1, $2, $3, $4::jsonb, $5)
                ON CONFLICT (id) DO UPDATE SET
                    definition_id = EXCLUDED.definition_id,
                    status = EXCLUDED.status,
                    document = EXCLUDED.document,
                    updated_at = EXCLUDED.updated_at
                """,
                instance.id,
                instance.definition_id,
                instance.status,
                instance.to_json(),
                instance.updated_at,
            )
        finally:
            await conn.close()

    async def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        conn = await self._connect()
        try:
            row = await conn.fetchrow(
                "SELECT document::text AS document FROM workflow_instances WHERE id = $1",
                instance_id,
            )
        finally:
            await conn.close()
        if not row:
            return None
        return WorkflowInstance.from_json(row["document"])

    async def list_instances(
        self, definition_id: Optional[str] = None
    ) -> list[WorkflowInstance]:
        conn = await self._connect()
        try:
            if definition_id is None:
                rows = await conn.fetch(
                    "SELECT document::text AS document FROM workflow_instances ORDER BY updated_at"
                )
            else:
                rows = await conn.fetch(
                    "SELECT document::text AS document FROM workflow_instances WHERE definition_id = $1 ORDER BY updated_at",
                    definition_id,
                )
        finally:
            await conn.close()
        return [WorkflowInstance.from_json(r["document"]) for r in rows]

    async def delete_instance(self, instance_id: str) -> bool:
        conn = await self._connect()
        try:
            status = await conn.execute(
                "DELETE FROM workflow_instances WHERE id = $1", instance_id
            )
        finally:
            await conn.close()
        return status.endswith(" 1")
