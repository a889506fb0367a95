"""Stores for workflow instance documents."""

from __future__ import annotations

from typing import Optional

from .inmemory import InMemoryInstanceRepository
from .postgres import PostgresInstanceRepository
from .repository import InstanceRepository
from .sqlite import SQLiteInstanceRepository

SQLITE_PREFIX = "sqlite://"
POSTGRES_PREFIXES = ("postgres://", "postgresql://")


def repository_for_url(database_url: Optional[str]) -> InstanceRepository:
    """Open the instance store named by ``database_url``.

    ``sqlite://<path>`` opens (or creates) a SQLite file and
    ``postgres[ql]://...`` a PostgreSQL database. An empty URL gives a fresh
    in-memory store, so instances live only as long as the returned object.
    Every call returns a new repository.
    """
    if not database_url:
        return InMemoryInstanceRepository()
    if database_url.startswith(SQLITE_PREFIX):
        return SQLiteInstanceRepository(database_url[len(SQLITE_PREFIX) :])
    if database_url.startswith(POSTGRES_PREFIXES):
        return PostgresInstanceRepository(database_url)
    raise ValueError(f"Unsupported database backend: {database_url}")


__all__ = [
    "InstanceRepository",
    "InMemoryInstanceRepository",
    "SQLiteInstanceRepository",
    "PostgresInstanceRepository",
    "repository_for_url",
]
