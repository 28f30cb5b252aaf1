"""
Read‑only aggregates over the vote ledger.

Counts and voter lists are computed from the current selections on
every call; nothing is cached.  Every date option of the meeting
appears in the results, including options nobody picked.
"""

from datetime import datetime
from typing import Dict, List, Mapping, Optional, Tuple

from boardtime_api.app.core.clock import is_expired
from boardtime_api.app.core.db import get_connection
from boardtime_api.app.core.exceptions import InvalidOption
from boardtime_api.app.schemas.vote import RankedOption, ResultsRead, VoterRead
from boardtime_api.app.services import store


def rank_counts(counts: Mapping[str, int]) -> List[Tuple[str, int]]:
    """Order ``(option_id, count)`` pairs by count, highest first.

    The sort is stable: options with equal counts keep the order they
    have in ``counts`` (chronological for maps built by this module).
    """
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


class TallyService:
    """Vote counts, voter lists and ranked results for a meeting."""

    @classmethod
    async def counts_by_option(cls, meeting_id: str) -> Dict[str, int]:
        """Map each date option id to the number of participants who picked it."""
        conn = get_connection()
        try:
            store.require_meeting(conn, meeting_id)
            options = store.option_voters(conn, meeting_id)
            return {option_id: len(voters) for option_id, (_, voters) in options.items()}
        finally:
            conn.close()

    @classmethod
    async def voters_for_option(cls, meeting_id: str, option_id: str) -> List[VoterRead]:
        """List the participants who picked ``option_id``.

        Raises ``InvalidOption`` when the option is not part of the
        meeting.  Voters are in the order they first voted.
        """
        conn = get_connection()
        try:
            store.require_meeting(conn, meeting_id)
            options = store.option_voters(conn, meeting_id)
            if option_id not in options:
                raise InvalidOption(f"Date option {option_id} not found in meeting {meeting_id}")
            _, voters = options[option_id]
            return [VoterRead(participant_id=pid, nickname=name) for pid, name in voters]
        finally:
            conn.close()

    @classmethod
    async def results(cls, meeting_id: str, now: Optional[datetime] = None) -> ResultsRead:
        """Ranked results with the voters of every option."""
        conn = get_connection()
        try:
            meeting = store.require_meeting(conn, meeting_id)
            options = store.option_voters(conn, meeting_id)
            participants = store.list_participants(conn, meeting_id)
        finally:
            conn.close()

        ranking = rank_counts({option_id: len(voters) for option_id, (_, voters) in options.items()})
        return ResultsRead(
            meeting_id=meeting_id,
            is_expired=is_expired(meeting["deadline"], now),
            total_participants=len(participants),
            options=[
                RankedOption(
                    option_id=option_id,
                    date=options[option_id][0],
                    count=count,
                    voters=[
                        VoterRead(participant_id=pid, nickname=name)
                        for pid, name in options[option_id][1]
                    ],
                )
                for option_id, count in ranking
            ],
        )
