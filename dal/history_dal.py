"""Async Data Access Layer for the medicine_images table.

Provides HistoryDAL with async CRUD operations compatible with
`utils.database_init.AsyncDatabaseInitializer`. Every mutation is
announced on an optional `HistoryChangeFeed`.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from models.history_record import HistoryChange, HistoryRecord, HistoryStatus
from services.history.change_feed import HistoryChangeFeed
from utils.database_init import AsyncDatabaseInitializer


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class HistoryDAL:
    """Data access layer for scan history records.

    The constructor accepts an `AsyncDatabaseInitializer` (or any object
    exposing an async `connection()` context manager that yields an
    `aiosqlite.Connection`).
    """

    _COLUMNS = ("id", "created_at", "status", "analysis_result", "image_data", "file_name")
    _COLUMN_LIST = ", ".join(_COLUMNS)

    def __init__(self, db_initializer: AsyncDatabaseInitializer, change_feed: Optional[HistoryChangeFeed] = None) -> None:
        self._db = db_initializer
        self._feed = change_feed

    def _notify(self, event: str, record_id: str) -> None:
        if self._feed is not None:
            self._feed.publish(HistoryChange(event=event, record_id=record_id))

    async def create_record(self, image_data: str, file_name: Optional[str] = None) -> HistoryRecord:
        """Insert a pending history row for a new capture and return it."""
        record = HistoryRecord(
            id=uuid4().hex,
            created_at=_utc_now(),
            status=HistoryStatus.PENDING,
            image_data=image_data,
            file_name=file_name,
        )
        async with self._db.connection() as conn:
            await conn.execute(
                f"INSERT INTO medicine_images ({self._COLUMN_LIST}) VALUES (?, ?, ?, ?, ?, ?)",
                (record.id, record.created_at, record.status.value, None, record.image_data, record.file_name),
            )
            await conn.commit()
        self._notify("insert", record.id)
        return record

    async def get_record(self, record_id: str) -> Optional[HistoryRecord]:
        """Return the HistoryRecord for `record_id`, or None if not found."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM medicine_images WHERE id = ?",
                (record_id,),
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def list_records(
        self,
        status: Optional[HistoryStatus] = None,
        limit: int = 100,
        offset: int = 0,
        newest_first: bool = True,
    ) -> List[HistoryRecord]:
        """List history rows ordered by `created_at`.

        Args:
            status: Only return rows with this status.
            limit: Maximum number of rows to return.
            offset: Rows to skip.
            newest_first: Order descending by creation time.
        """
        where = "WHERE status = ?" if status is not None else ""
        order = "DESC" if newest_first else "ASC"
        params: List[Any] = [status.value] if status is not None else []
        params.extend([limit, offset])
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM medicine_images {where} "
                f"ORDER BY created_at {order} LIMIT ? OFFSET ?",
                tuple(params),
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def update_record(
        self,
        record_id: str,
        *,
        status: Optional[HistoryStatus] = None,
        analysis_result: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Update status and/or analysis of a row. Returns True if a row was changed."""
        updates = {
            "status": status.value if status is not None else None,
            "analysis_result": json.dumps(analysis_result, ensure_ascii=False) if analysis_result is not None else None,
        }
        fields = [f"{col} = ?" for col, val in updates.items() if val is not None]

        if not fields:
            return False

        params = [val for val in updates.values() if val is not None]
        params.append(record_id)
        sql = f"UPDATE medicine_images SET {', '.join(fields)} WHERE id = ?"

        async with self._db.connection() as conn:
            await conn.execute(sql, tuple(params))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
        updated = bool(changed and changed[0] > 0)
        if updated:
            self._notify("update", record_id)
        return updated

    async def delete_record(self, record_id: str) -> bool:
        """Delete a history row by id. Returns True if a row was deleted."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM medicine_images WHERE id = ?", (record_id,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
        deleted = bool(changed and changed[0] > 0)
        if deleted:
            self._notify("delete", record_id)
        return deleted

    @staticmethod
    def _row_to_record(row: Sequence[Any]) -> HistoryRecord:
        """Convert a DB row tuple into a HistoryRecord."""
        return HistoryRecord(
            id=row[0],
            created_at=row[1],
            status=HistoryStatus(row[2]),
            analysis_result=json.loads(row[3]) if row[3] else None,
            image_data=row[4],
            file_name=row[5],
        )
