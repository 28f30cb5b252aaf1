"""
Row‑level queries shared by the meeting, vote and tally services.

Every helper takes an open connection so that callers decide the
transaction scope: the vote ledger runs them inside one
``BEGIN IMMEDIATE`` block, read paths use a plain connection.
"""

import sqlite3
from typing import Optional

from ..core.exceptions import MeetingNotFound


def require_meeting(conn: sqlite3.Connection, meeting_id: str) -> sqlite3.Row:
    """Return the meeting row or raise ``MeetingNotFound``."""
    row = conn.execute(
        "SELECT id, title, description, deadline, password_hash FROM meetings WHERE id = ?",
        (meeting_id,),
    ).fetchone()
    if not row:
        raise MeetingNotFound(meeting_id)
    return row


def list_options(conn: sqlite3.Connection, meeting_id: str) -> list[sqlite3.Row]:
    """Date options of a meeting in chronological order."""
    return conn.execute(
        "SELECT id, date FROM date_options WHERE meeting_id = ? ORDER BY date, id",
        (meeting_id,),
    ).fetchall()


def list_participants(conn: sqlite3.Connection, meeting_id: str) -> list[sqlite3.Row]:
    """Participants of a meeting in the order they first voted."""
    return conn.execute(
        "SELECT id, nickname FROM participants WHERE meeting_id = ? ORDER BY rowid",
        (meeting_id,),
    ).fetchall()


def find_participant(
    conn: sqlite3.Connection, meeting_id: str, nickname: str
) -> Optional[sqlite3.Row]:
    return conn.execute(
        "SELECT id, nickname, password_hash FROM participants WHERE meeting_id = ? AND nickname = ?",
        (meeting_id, nickname),
    ).fetchone()


def selected_options(conn: sqlite3.Connection, participant_id: str) -> list[str]:
    """Option ids in a participant's selection, chronological."""
    rows = conn.execute(
        """
        SELECT o.id FROM votes v
        JOIN date_options o ON o.id = v.date_option_id
        WHERE v.participant_id = ?
        ORDER BY o.date, o.id
        """,
        (participant_id,),
    ).fetchall()
    return [row["id"] for row in rows]


def option_voters(
    conn: sqlite3.Connection, meeting_id: str
) -> dict[str, tuple[str, list[tuple[str, str]]]]:
    """Map every option of a meeting to ``(date, [(participant_id, nickname), ...])``.

    Options appear in chronological order, options nobody picked are
    included with an empty voter list, and voters are ordered by
    participant creation so the order survives revotes.
    """
    rows = conn.execute(
        """
        SELECT o.id AS option_id, o.date AS date,
               p.id AS participant_id, p.nickname AS nickname
        FROM date_options o
        LEFT JOIN votes v ON v.date_option_id = o.id
        LEFT JOIN participants p ON p.id = v.participant_id
        WHERE o.meeting_id = ?
        ORDER BY o.date, o.id, p.rowid
        """,
        (meeting_id,),
    ).fetchall()
    result: dict[str, tuple[str, list[tuple[str, str]]]] = {}
    for row in rows:
        _, voters = result.setdefault(row["option_id"], (row["date"], []))
        if row["participant_id"] is not None:
            voters.append((row["participant_id"], row["nickname"]))
    return result
