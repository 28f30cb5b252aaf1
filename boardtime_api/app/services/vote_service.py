"""
Vote ledger: records and replaces participants' selections.

A participant is identified by ``(meeting, nickname)``.  The first
submission creates the participant and remembers the password given
with it; any later submission under that nickname must present the
same password and replaces the previous selection as a whole.  The
check and the write run in one ``BEGIN IMMEDIATE`` transaction, so
concurrent submissions for the same nickname are applied one after
the other and the later one wins entirely.
"""

import logging
import uuid
from datetime import datetime
from typing import Iterable, Optional

from boardtime_api.app.core.clock import is_expired
from boardtime_api.app.core.db import get_connection, transaction
from boardtime_api.app.core.exceptions import (
    InvalidOption,
    MeetingExpired,
    ParticipantNotFound,
    PasswordMismatch,
    ValidationError,
)
from boardtime_api.app.core.security import hash_password, verify_password
from boardtime_api.app.schemas.vote import VoteRecord
from boardtime_api.app.services import store
from boardtime_api.app.services.audit_service import AuditService

logger = logging.getLogger(__name__)


class VoteService:
    """Service for submitting and reading votes."""

    @classmethod
    async def submit_vote(
        cls,
        meeting_id: str,
        nickname: str,
        password: str,
        option_ids: Iterable[str],
        now: Optional[datetime] = None,
    ) -> VoteRecord:
        """Create or replace a participant's vote.

        Checks, in order: the meeting exists (``MeetingNotFound``), its
        deadline has not passed (``MeetingExpired``), the selection is
        non‑empty and every id is an option of this meeting
        (``InvalidOption``), and, for an existing nickname, that the
        password matches (``PasswordMismatch``).  Nothing is written
        unless all checks pass.
        """
        nickname = (nickname or "").strip()
        if not nickname:
            raise ValidationError("Nickname must not be empty")
        if not password:
            raise ValidationError("Password must not be empty")
        selected = set(option_ids or ())
        if not selected:
            raise InvalidOption("Select at least one date option")

        with transaction() as conn:
            meeting = store.require_meeting(conn, meeting_id)
            if is_expired(meeting["deadline"], now):
                logger.warning("Rejected vote by '%s' on expired meeting %s", nickname, meeting_id)
                raise MeetingExpired()

            ordered = [row["id"] for row in store.list_options(conn, meeting_id)]
            unknown = selected.difference(ordered)
            if unknown:
                raise InvalidOption(
                    f"Unknown date option(s) for this meeting: {', '.join(sorted(unknown))}"
                )

            participant = store.find_participant(conn, meeting_id, nickname)
            if participant:
                if not verify_password(password, participant["password_hash"]):
                    logger.warning("Password mismatch for '%s' in meeting %s", nickname, meeting_id)
                    raise PasswordMismatch()
                participant_id = participant["id"]
                created = False
                conn.execute("DELETE FROM votes WHERE participant_id = ?", (participant_id,))
                conn.execute(
                    "UPDATE participants SET updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (participant_id,),
                )
            else:
                participant_id = uuid.uuid4().hex
                created = True
                conn.execute(
                    """
                    INSERT INTO participants (id, meeting_id, nickname, password_hash)
                    VALUES (?, ?, ?, ?)
                    """,
                    (participant_id, meeting_id, nickname, hash_password(password)),
                )

            selection = [option_id for option_id in ordered if option_id in selected]
            conn.executemany(
                "INSERT INTO votes (participant_id, date_option_id) VALUES (?, ?)",
                [(participant_id, option_id) for option_id in selection],
            )
            AuditService.record(
                conn,
                meeting_id=meeting_id,
                actor=nickname,
                action="vote" if created else "revote",
                object_type="participant",
                object_id=participant_id,
                details={"date_option_ids": selection},
            )

        logger.info(
            "%s vote by '%s' in meeting %s: %s option(s)",
            "Recorded" if created else "Replaced",
            nickname,
            meeting_id,
            len(selection),
        )
        return VoteRecord(
            participant_id=participant_id,
            nickname=nickname,
            date_option_ids=selection,
            created=created,
        )

    @classmethod
    async def get_vote(cls, meeting_id: str, nickname: str, password: str) -> VoteRecord:
        """Return a participant's current selection after checking their password.

        Lets the vote form pre‑select the boxes before a revote.
        """
        nickname = (nickname or "").strip()
        conn = get_connection()
        try:
            store.require_meeting(conn, meeting_id)
            participant = store.find_participant(conn, meeting_id, nickname)
            if not participant:
                raise ParticipantNotFound(nickname)
            if not verify_password(password or "", participant["password_hash"]):
                raise PasswordMismatch()
            return VoteRecord(
                participant_id=participant["id"],
                nickname=participant["nickname"],
                date_option_ids=store.selected_options(conn, participant["id"]),
            )
        finally:
            conn.close()
