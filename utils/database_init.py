import os
import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import aiosqlite

DB_FILE_NAME = "app.db"

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS medicine_images (
        id TEXT PRIMARY KEY,
        created_at TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending',
        analysis_result TEXT,
        image_data TEXT NOT NULL,
        file_name TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_medicine_images_created_at ON medicine_images(created_at)",
)


def resolve_database_dir(db_dir: Optional[Path | str] = None) -> Path:
    """Return the directory holding the history database, creating it if needed.

    `db_dir` wins over the DATABASE_DIR environment variable.

    Raises:
        RuntimeError: If neither is set, or the path is a file or cannot be created.
    """
    configured = str(db_dir) if db_dir is not None else os.getenv("DATABASE_DIR", "")
    if not configured.strip():
        raise RuntimeError(
            "DATABASE_DIR environment variable must be set to a writable "
            "directory where the scan history database will be stored."
        )

    path = Path(configured).expanduser()
    if path.exists() and not path.is_dir():
        raise RuntimeError(f"DATABASE_DIR={configured!r} points to a file, not a directory ({path}).")
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError(f"Failed to create or access database directory at {path}") from exc
    return path


class AsyncDatabaseInitializer:
    """
    Own the SQLite file holding scan history (<DATABASE_DIR>/app.db).

    The schema is created on the first `ensure_database()` call of an
    instance; later calls are no-ops. History from earlier runs is kept.
    """

    def __init__(self, db_dir: Optional[Path | str] = None) -> None:
        self.db_dir = resolve_database_dir(db_dir)
        self.db_path = self.db_dir / DB_FILE_NAME
        self._initialized = False

    async def ensure_database(self) -> None:
        """Create the history table and index if they are missing."""
        if self._initialized:
            return

        max_attempts = 3
        for attempt in range(1, max_attempts + 1):
            try:
                async with aiosqlite.connect(self.db_path) as db:
                    for statement in SCHEMA:
                        await db.execute(statement)
                    await db.commit()
                break
            except FileNotFoundError:
                # Transient on some filesystems right after the directory is created.
                if attempt >= max_attempts:
                    raise
                await asyncio.sleep(0.1 * attempt)

        self._initialized = True

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield an `aiosqlite.Connection`, creating the schema on first use."""
        await self.ensure_database()
        conn = await aiosqlite.connect(self.db_path)
        try:
            yield conn
        finally:
            await conn.close()
