"""
Audit trail for meetings.

Every mutation (meeting creation and update, votes and revotes, an
operator's password reset) writes one row to ``audit_logs`` on the
same connection, inside the same transaction, as the change it
describes.  A rejected request therefore never leaves a trace.  Rows
carry the meeting id so a meeting's whole history, owner edits and
ballots alike, can be read back with a single filter.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any, List, Optional

from boardtime_api.app.core.db import get_connection
from boardtime_api.app.schemas.audit import AuditEntry

# Columns list_logs can filter on.
_FILTERS = ("meeting_id", "actor", "action", "object_type", "object_id")


class AuditService:
    """Write and read the per‑meeting audit trail."""

    @classmethod
    def record(
        cls,
        conn: sqlite3.Connection,
        meeting_id: str,
        actor: Optional[str],
        action: str,
        object_type: str,
        object_id: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Insert an audit row using the caller's connection.

        Parameters
        ----------
        conn : sqlite3.Connection
            Open connection, normally inside ``db.transaction()``.
        meeting_id : str
            Meeting the change belongs to.
        actor : Optional[str]
            ``"owner"``, a participant nickname, or ``"operator"`` for
            maintenance scripts.
        action : str
            ``create``, ``update``, ``vote``, ``revote`` or
            ``reset_password``.
        object_type : str
            ``meeting`` or ``participant``.
        object_id : Optional[str]
            Id of the affected meeting or participant.
        details : Optional[dict]
            Extra data stored as JSON, e.g. the selected option ids.
        """
        conn.execute(
            """
            INSERT INTO audit_logs (meeting_id, actor, action, object_type, object_id, details)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                meeting_id,
                actor,
                action,
                object_type,
                object_id,
                json.dumps(details, ensure_ascii=False) if details else None,
            ),
        )

    @classmethod
    async def list_logs(cls, limit: int = 100, offset: int = 0, **filters: Optional[str]) -> List[AuditEntry]:
        """Return audit entries, newest first.

        Keyword filters (``meeting_id``, ``actor``, ``action``,
        ``object_type``, ``object_id``) are combined with AND; ``None``
        values are ignored.
        """
        unknown = set(filters).difference(_FILTERS)
        if unknown:
            raise TypeError(f"Unknown audit filter(s): {', '.join(sorted(unknown))}")
        active = {name: value for name, value in filters.items() if value is not None}
        where = " AND ".join(f"{name} = ?" for name in active) or "1 = 1"
        params: List[Any] = [*active.values(), limit, offset]

        conn = get_connection()
        try:
            rows = conn.execute(
                f"""
                SELECT id, meeting_id, actor, action, object_type, object_id, timestamp, details
                FROM audit_logs
                WHERE {where}
                ORDER BY id DESC
                LIMIT ? OFFSET ?
                """,
                params,
            ).fetchall()
        finally:
            conn.close()
        return [
            AuditEntry(**{**dict(row), "details": json.loads(row["details"]) if row["details"] else None})
            for row in rows
        ]
