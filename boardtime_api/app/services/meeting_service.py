"""
Business logic for meetings.

A meeting is created with a set of candidate dates and a deadline and
is owned through a password.  The owner may later change the title,
description, deadline or the whole option set; participants' votes on
options that disappear are removed with them.

Whether a meeting is open for voting is derived from the deadline on
every read (see ``core.clock.is_expired``) and is never stored.
"""

import logging
import sqlite3
import uuid
from datetime import datetime
from typing import List, Optional

from boardtime_api.app.core.clock import format_timestamp, is_expired
from boardtime_api.app.core.config import settings
from boardtime_api.app.core.db import get_connection, transaction
from boardtime_api.app.core.exceptions import EmptyDateOptions, InvalidPassword, ValidationError
from boardtime_api.app.core.security import hash_password, verify_password
from boardtime_api.app.schemas.meeting import (
    DateOptionRead,
    MeetingRead,
    MeetingSummary,
    ParticipantRead,
)
from boardtime_api.app.services import store
from boardtime_api.app.services.audit_service import AuditService

logger = logging.getLogger(__name__)


def normalise_dates(values: List[str | datetime]) -> List[str]:
    """Parse, deduplicate and sort candidate dates.

    Blank strings are skipped.  Two values naming the same instant
    (e.g. ``...T14:00:00Z`` and ``...T23:00:00+09:00``) count once.
    Raises ``EmptyDateOptions`` if nothing is left.
    """
    dates = {
        format_timestamp(value)
        for value in values
        if not (isinstance(value, str) and not value.strip())
    }
    if not dates:
        raise EmptyDateOptions()
    return sorted(dates)


class MeetingService:
    """Create, read, update and search meetings."""

    @classmethod
    async def create_meeting(
        cls,
        title: str,
        description: str,
        password: str,
        deadline: str | datetime,
        date_options: List[str | datetime],
    ) -> str:
        """Store a new meeting with its date options and return its id."""
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title must not be empty")
        if not password:
            raise ValidationError("Password must not be empty")
        dates = normalise_dates(date_options)
        deadline_value = format_timestamp(deadline)
        meeting_id = uuid.uuid4().hex
        password_hash = hash_password(password)

        with transaction() as conn:
            conn.execute(
                """
                INSERT INTO meetings (id, title, description, deadline, password_hash)
                VALUES (?, ?, ?, ?, ?)
                """,
                (meeting_id, title, description or "", deadline_value, password_hash),
            )
            conn.executemany(
                "INSERT INTO date_options (id, meeting_id, date) VALUES (?, ?, ?)",
                [(uuid.uuid4().hex, meeting_id, date) for date in dates],
            )
            AuditService.record(
                conn,
                meeting_id=meeting_id,
                actor="owner",
                action="create",
                object_type="meeting",
                object_id=meeting_id,
                details={"title": title, "deadline": deadline_value, "date_options": dates},
            )
        logger.info("Created meeting %s '%s' with %s date options", meeting_id, title, len(dates))
        return meeting_id

    @classmethod
    async def get_meeting(cls, meeting_id: str, now: Optional[datetime] = None) -> MeetingRead:
        """Return a meeting with its options, their voters and the participant list.

        Raises ``MeetingNotFound`` if the meeting does not exist.
        """
        conn = get_connection()
        try:
            row = store.require_meeting(conn, meeting_id)
            options = store.option_voters(conn, meeting_id)
            participants = store.list_participants(conn, meeting_id)
            return MeetingRead(
                id=row["id"],
                title=row["title"],
                description=row["description"],
                deadline=row["deadline"],
                is_expired=is_expired(row["deadline"], now),
                date_options=[
                    DateOptionRead(id=option_id, date=date, votes=[pid for pid, _ in voters])
                    for option_id, (date, voters) in options.items()
                ],
                participants=[
                    ParticipantRead(id=p["id"], nickname=p["nickname"]) for p in participants
                ],
            )
        finally:
            conn.close()

    @classmethod
    def _check_password(cls, conn: sqlite3.Connection, meeting_id: str, password: str) -> sqlite3.Row:
        row = store.require_meeting(conn, meeting_id)
        if not verify_password(password or "", row["password_hash"]):
            logger.warning("Rejected owner password for meeting %s", meeting_id)
            raise InvalidPassword()
        return row

    @classmethod
    async def authenticate(cls, meeting_id: str, password: str) -> None:
        """Check the owner password.

        Raises ``MeetingNotFound`` or ``InvalidPassword``; returns
        nothing on success.
        """
        conn = get_connection()
        try:
            cls._check_password(conn, meeting_id, password)
        finally:
            conn.close()

    @classmethod
    async def update_meeting(
        cls,
        meeting_id: str,
        password: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        deadline: Optional[str | datetime] = None,
        date_options: Optional[List[str | datetime]] = None,
        now: Optional[datetime] = None,
    ) -> MeetingRead:
        """Update a meeting after checking the owner password.

        Only arguments that are not ``None`` are applied.  A supplied
        ``date_options`` list replaces the option set: options whose
        instant is kept retain their id and votes, removed options take
        their votes with them, and participants left without any
        selected option are removed too.  All changes happen in one
        transaction.
        """
        with transaction() as conn:
            # Nothing about the payload is reported before the owner is known.
            cls._check_password(conn, meeting_id, password)

            fields: list[str] = []
            values: list = []
            details: dict = {}
            if title is not None:
                title = title.strip()
                if not title:
                    raise ValidationError("Title must not be empty")
                fields.append("title = ?")
                values.append(title)
                details["title"] = title
            if description is not None:
                fields.append("description = ?")
                values.append(description)
                details["description"] = description
            if deadline is not None:
                deadline_value = format_timestamp(deadline)
                fields.append("deadline = ?")
                values.append(deadline_value)
                details["deadline"] = deadline_value
            new_dates = normalise_dates(date_options) if date_options is not None else None

            if new_dates is not None:
                existing = {row["date"]: row["id"] for row in store.list_options(conn, meeting_id)}
                removed = [option_id for date, option_id in existing.items() if date not in new_dates]
                added = [date for date in new_dates if date not in existing]
                dropped_votes = 0
                if removed:
                    placeholders = ", ".join("?" for _ in removed)
                    dropped_votes = conn.execute(
                        f"SELECT COUNT(*) FROM votes WHERE date_option_id IN ({placeholders})",
                        tuple(removed),
                    ).fetchone()[0]
                    conn.execute(
                        f"DELETE FROM date_options WHERE id IN ({placeholders})",
                        tuple(removed),
                    )
                    # Votes cascade with their option; drop anyone left
                    # with an empty selection.
                    conn.execute(
                        """
                        DELETE FROM participants
                        WHERE meeting_id = ?
                          AND id NOT IN (SELECT participant_id FROM votes)
                        """,
                        (meeting_id,),
                    )
                conn.executemany(
                    "INSERT INTO date_options (id, meeting_id, date) VALUES (?, ?, ?)",
                    [(uuid.uuid4().hex, meeting_id, date) for date in added],
                )
                details.update(
                    {
                        "added_dates": added,
                        "removed_option_ids": removed,
                        "dropped_votes": dropped_votes,
                    }
                )

            fields.append("updated_at = CURRENT_TIMESTAMP")
            values.append(meeting_id)
            conn.execute(f"UPDATE meetings SET {', '.join(fields)} WHERE id = ?", tuple(values))
            AuditService.record(
                conn,
                meeting_id=meeting_id,
                actor="owner",
                action="update",
                object_type="meeting",
                object_id=meeting_id,
                details=details,
            )
        logger.info("Updated meeting %s (%s)", meeting_id, ", ".join(sorted(details)) or "no changes")
        return await cls.get_meeting(meeting_id, now=now)

    @classmethod
    async def search_by_title(cls, query: str, limit: Optional[int] = None) -> List[MeetingSummary]:
        """Find meetings whose title contains ``query``, ignoring case.

        An exact meeting id matches as well, since the home page search
        box accepts either.  Newest meetings come first.  A blank query
        returns nothing.
        """
        needle = (query or "").strip()
        if not needle:
            return []
        conn = get_connection()
        try:
            # SQLite's lower() only folds ASCII; use Python's casefold so
            # accented titles match too.
            conn.create_function(
                "casefold", 1, lambda s: s.casefold() if s is not None else None, deterministic=True
            )
            rows = conn.execute(
                """
                SELECT id, title FROM meetings
                WHERE instr(casefold(title), ?) > 0 OR id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT ?
                """,
                (needle.casefold(), needle, limit or settings.search_limit),
            ).fetchall()
            return [MeetingSummary(id=row["id"], title=row["title"]) for row in rows]
        finally:
            conn.close()
