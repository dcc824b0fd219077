from __future__ import annotations

import asyncio
import json
import sqlite3
import threading
import time
from pathlib import Path
from typing import Any

from merkle_rewards.core.store.memory import get_field
from merkle_rewards.core.store.refs import CollectionRef, DocumentRef


def _utc_epoch_ms() -> int:
    return int(time.time() * 1000)


def _json_dumps(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, default=str)


class SqliteDocumentStore:
    """Path-addressed JSON documents in a single sqlite table.

    Mirrors the collection/document layout the publisher writes, so a local
    export can be served without the hosted document database.
    """

    def __init__(self, db_path: Path, *, read_only: bool = False) -> None:
        self._db_path = Path(db_path)
        self._read_only = read_only
        self._lock = threading.Lock()
        if read_only:
            # Never creates the file; a missing export fails here.
            self._conn = sqlite3.connect(
                f"{self._db_path.resolve().as_uri()}?mode=ro",
                uri=True,
                check_same_thread=False,
                isolation_level=None,
            )
        else:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                str(self._db_path),
                check_same_thread=False,
                isolation_level=None,  # autocommit
            )
        self._conn.row_factory = sqlite3.Row
        if not read_only:
            with self._lock:
                self._init_schema()

    @property
    def path(self) -> Path:
        return self._db_path

    @property
    def read_only(self) -> bool:
        return self._read_only

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _init_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS documents (
              path TEXT PRIMARY KEY,
              parent TEXT NOT NULL,
              data_json TEXT NOT NULL,
              updated_at INTEGER NOT NULL
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_documents_parent ON documents(parent);"
        )

    def get_document(self, path: str) -> dict[str, Any] | None:
        with self._lock:
            cur = self._conn.cursor()
            cur.execute("SELECT data_json FROM documents WHERE path = ?", (path,))
            row = cur.fetchone()
        if row is None:
            return None
        return json.loads(row["data_json"])

    def list_documents(self, parent: str) -> list[dict[str, Any]]:
        with self._lock:
            cur = self._conn.cursor()
            cur.execute(
                "SELECT data_json FROM documents WHERE parent = ? ORDER BY path",
                (parent,),
            )
            rows = cur.fetchall()
        return [json.loads(r["data_json"]) for r in rows]

    def put_document(self, path: str, data: dict[str, Any]) -> None:
        parent = path.rsplit("/", 1)[0] if "/" in path else ""
        with self._lock:
            cur = self._conn.cursor()
            cur.execute(
                """
                INSERT INTO documents(path, parent, data_json, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(path) DO UPDATE SET
                  data_json = excluded.data_json,
                  updated_at = excluded.updated_at
                """,
                (path, parent, _json_dumps(data), _utc_epoch_ms()),
            )

    async def get(self, ref: DocumentRef) -> dict[str, Any] | None:
        return await asyncio.to_thread(self.get_document, ref.path)

    async def get_collection(self, coll: CollectionRef) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self.list_documents, coll.path)

    async def query(
        self, coll: CollectionRef, field: str, value: Any
    ) -> list[dict[str, Any]]:
        docs = await asyncio.to_thread(self.list_documents, coll.path)
        return [d for d in docs if get_field(d, field) == value]

    async def set(self, ref: DocumentRef, data: dict[str, Any]) -> None:
        await asyncio.to_thread(self.put_document, ref.path, data)
