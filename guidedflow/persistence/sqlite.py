"""SQLite implementation of the instance repository."""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path
from typing import Any, Optional

from ..contracts import WorkflowInstance
from .repository import InstanceRepository


class SQLiteInstanceRepository(InstanceRepository):
    """Persist workflow instances as JSON documents in SQLite."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS workflow_instances (
                id TEXT PRIMARY KEY,
                definition_id TEXT NOT NULL,
                status TEXT NOT NULL,
                document TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> int:
        cur = self._conn.cursor()
        cur.execute(query, params)
        self._conn.commit()
        return cur.rowcount

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchone()

    def _fetchall(self, query: str, *params: Any) -> list[sqlite3.Row]:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchall()

    # ------------------------------------------------------------------
    # Repository API
    async def save_instance(self, instance: WorkflowInstance) -> None:
        await asyncio.to_thread(
            self._execute,
            """
            INSERT INTO workflow_instances (id, definition_id, status, document, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                definition_id = excluded.definition_id,
                status = excluded.status,
                document = excluded.document,
                updated_at = excluded.updated_at
            """,
            instance.id,
            instance.definition_id,
            instance.status,
            instance.to_json(),
            instance.updated_at.isoformat(),
        )

    async def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        row = await asyncio.to_thread(
            self._fetchone,
            "SELECT document FROM workflow_instances WHERE id = ?",
            instance_id,
        )
        if not row:
            return None
        return WorkflowInstance.from_json(row["document"])

    async def list_instances(
        self, definition_id: Optional[str] = None
    ) -> list[WorkflowInstance]:
        if definition_id is None:
            rows = await asyncio.to_thread(
                self._fetchall,
                "SELECT document FROM workflow_instances ORDER BY updated_at",
            )
        else:
            rows = await asyncio.to_thread(
                self._fetchall,
                "SELECT document FROM workflow_instances WHERE definition_id = ? ORDER BY updated_at",
                definition_id,
            )
        return [WorkflowInstance.from_json(row["document"]) for row in rows]

    async def delete_instance(self, instance_id: str) -> bool:
        deleted = await asyncio.to_thread(
            self._execute,
            "DELETE FROM workflow_instances WHERE id = ?",
            instance_id,
        )
        return deleted > 0
