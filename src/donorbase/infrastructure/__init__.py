"""Adapters around the domain: SQLite persistence, the HTTP API and the
realtime snapshot hub."""

from donorbase.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)
from donorbase.infrastructure.realtime.snapshot_hub import SnapshotHub

__all__ = [
    "SnapshotHub",
    "close_database",
    "get_db_manager",
    "init_database",
]
