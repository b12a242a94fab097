"""Persistence helpers for room analysis runs."""

from __future__ import annotations

import json
import sqlite3
import threading
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_DB_PATH = Path(__file__).resolve().parent / "analyses.db"
VALID_STATUSES = {"queued", "running", "succeeded", "failed"}


@dataclass(slots=True)
class AnalysisRecord:
    """Represents a persisted analysis run."""

    id: str
    status: str
    created_at: float
    updated_at: float
    room: dict[str, Any]
    progress: float
    progress_label: str
    result: dict[str, Any] | None
    error: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "room": self.room,
            "progress": self.progress,
            "progress_label": self.progress_label,
            "result": self.result,
            "error": self.error,
        }


class AnalysisStore:
    """Lightweight SQLite-backed store for analysis runs."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        self._path = Path(db_path) if db_path else DEFAULT_DB_PATH
        parent = self._path.parent
        if str(parent) not in {"", "."} and not parent.exists():
            parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            str(self._path), timeout=30, isolation_level=None, check_same_thread=False
        )
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS analyses (
                    id TEXT PRIMARY KEY,
                    status TEXT NOT NULL,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL,
                    room TEXT NOT NULL,
                    progress REAL NOT NULL DEFAULT 0,
                    progress_label TEXT NOT NULL DEFAULT '',
                    result TEXT,
                    error TEXT
                )
                """
            )

    def create_run(self, room: dict[str, Any]) -> AnalysisRecord:
        now = time.time()
        run_id = uuid.uuid4().hex
        record = AnalysisRecord(
            id=run_id,
            status="queued",
            created_at=now,
            updated_at=now,
            room=dict(room),
            progress=0.0,
            progress_label="queued",
            result=None,
            error=None,
        )
        payload = (run_id, record.status, now, now, json.dumps(record.room), 0.0, record.progress_label)
        with self._lock:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO analyses (id, status, created_at, updated_at, room, progress, progress_label)"
                    " VALUES (?, ?, ?, ?, ?, ?, ?)",
                    payload,
                )
        return record

    def mark_running(self, run_id: str) -> None:
        self._update_status(run_id, "running", result=None, error=None)

    def complete_run(self, run_id: str, result: dict[str, Any]) -> None:
        self._update_status(run_id, "succeeded", result=result, error=None)

    def mark_failed(self, run_id: str, error: str) -> None:
        self._update_status(run_id, "failed", result=None, error=error)

    def update_progress(self, run_id: str, fraction: float, label: str) -> None:
        """Record the latest progress report; older fractions never overwrite newer ones."""

        now = time.time()
        with self._lock:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE analyses SET progress = MAX(progress, ?), progress_label = ?, updated_at = ?"
                    " WHERE id = ?",
                    (float(fraction), label, now, run_id),
                )
                if cursor.rowcount == 0:
                    raise KeyError(f"Unknown run id: {run_id}")

    def _update_status(
        self,
        run_id: str,
        status: str,
        *,
        result: dict[str, Any] | None,
        error: str | None,
    ) -> None:
        now = time.time()
        result_json = json.dumps(result) if result is not None else None
        with self._lock:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE analyses SET status = ?, updated_at = ?, result = ?, error = ? WHERE id = ?",
                    (status, now, result_json, error, run_id),
                )
                if cursor.rowcount == 0:
                    raise KeyError(f"Unknown run id: {run_id}")

    def get_run(self, run_id: str) -> AnalysisRecord | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM analyses WHERE id = ?", (run_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    def list_runs(self, *, limit: int = 20, status: str | None = None) -> list[AnalysisRecord]:
        if status is not None and status not in VALID_STATUSES:
            raise ValueError(f"Unsupported status filter: {status}")

        params: list[Any] = []
        query = "SELECT * FROM analyses"
        if status is not None:
            query += " WHERE status = ?"
            params.append(status)
        query += " ORDER BY created_at DESC, rowid DESC LIMIT ?"
        params.append(max(limit, 1))

        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_record(row) for row in rows]

    def status_counts(self) -> dict[str, int]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT status, COUNT(*) as count FROM analyses GROUP BY status"
            ).fetchall()
        counts: dict[str, int] = {status: 0 for status in VALID_STATUSES}
        for row in rows:
            counts[row["status"]] = int(row["count"])
        return counts

    def delete_all(self) -> None:
        with self._lock:
            with self._connect() as conn:
                conn.execute("DELETE FROM analyses")

    def _row_to_record(self, row: sqlite3.Row) -> AnalysisRecord:
        room = json.loads(row["room"]) if row["room"] else {}
        result = json.loads(row["result"]) if row["result"] else None
        error = row["error"] if row["error"] else None
        return AnalysisRecord(
            id=row["id"],
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            room=room,
            progress=float(row["progress"]),
            progress_label=row["progress_label"],
            result=result,
            error=error,
        )


__all__ = ["AnalysisStore", "AnalysisRecord", "VALID_STATUSES"]
