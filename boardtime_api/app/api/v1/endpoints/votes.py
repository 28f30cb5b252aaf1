"""
Vote endpoints for API v1.

These routes submit and replace votes and expose the per‑option
tallies used by the result view.  They rely on ``VoteService`` for
the ledger rules (deadline, option membership, nickname password) and
on ``TallyService`` for counts and voter lists.
"""

from typing import Dict, List

from fastapi import APIRouter, HTTPException, Path, Response, status

from boardtime_api.app.core.exceptions import InvalidOption
from boardtime_api.app.schemas.vote import (
    VoteCreate,
    VoteLookup,
    VoteRecord,
    VoterRead,
    VoteSubmitted,
)
from boardtime_api.app.services.tally_service import TallyService
from boardtime_api.app.services.vote_service import VoteService


router = APIRouter()


@router.post(
    "/meetings/{meeting_id}/votes",
    response_model=VoteSubmitted,
    status_code=status.HTTP_201_CREATED,
)
async def submit_vote(
    vote: VoteCreate,
    response: Response,
    meeting_id: str = Path(..., description="ID of the meeting"),
) -> VoteSubmitted:
    """투표하기 / 수정하기.

    The first submission for a nickname creates the vote (201).  A
    later submission with the same nickname and password replaces the
    previous selection entirely (200).  A different password for a
    known nickname is rejected with 403.
    """
    record = await VoteService.submit_vote(
        meeting_id, vote.nickname, vote.password, vote.date_option_ids
    )
    if record.created:
        message = "Vote submitted"
    else:
        response.status_code = status.HTTP_200_OK
        message = "Vote updated"
    return VoteSubmitted(message=message, participant_id=record.participant_id)


@router.post("/meetings/{meeting_id}/votes/mine", response_model=VoteRecord)
async def get_my_vote(
    lookup: VoteLookup,
    meeting_id: str = Path(..., description="ID of the meeting"),
) -> VoteRecord:
    """Return the caller's current selection (nickname and password in the body)."""
    return await VoteService.get_vote(meeting_id, lookup.nickname, lookup.password)


@router.get("/meetings/{meeting_id}/votes", response_model=Dict[str, int])
async def get_vote_counts(
    meeting_id: str = Path(..., description="ID of the meeting"),
) -> Dict[str, int]:
    """Vote count per date option id; options without votes report 0."""
    return await TallyService.counts_by_option(meeting_id)


@router.get("/meetings/{meeting_id}/votes/{option_id}", response_model=List[VoterRead])
async def get_option_voters(
    meeting_id: str = Path(..., description="ID of the meeting"),
    option_id: str = Path(..., description="ID of the date option"),
) -> List[VoterRead]:
    try:
        return await TallyService.voters_for_option(meeting_id, option_id)
    except InvalidOption as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
