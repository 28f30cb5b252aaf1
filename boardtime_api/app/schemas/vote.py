"""
Pydantic models for votes and tallies.

A vote is identified by ``(meeting, nickname)`` and protected by the
participant's own password.  Submitting again with the same nickname
and password replaces the whole selection.
"""

from pydantic import Field

from .meeting import APIModel


class VoteCreate(APIModel):
    """Schema for submitting (or resubmitting) a vote."""

    nickname: str = Field(..., min_length=1, examples=["alice"])
    password: str = Field(..., min_length=1, description="Credential for changing this vote later")
    # An empty list is rejected by the vote ledger rather than here so
    # that the error is reported like any other invalid selection.
    date_option_ids: list[str] = Field(..., alias="dateOptionIds")


class VoteLookup(APIModel):
    nickname: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class VoteRecord(APIModel):
    """A participant's current selection."""

    participant_id: str = Field(..., alias="participantId")
    nickname: str
    date_option_ids: list[str] = Field(default_factory=list, alias="dateOptionIds")
    # True when this submission created the participant, False on revote.
    created: bool = False


class VoteSubmitted(APIModel):
    message: str
    participant_id: str = Field(..., alias="participantId")


class VoterRead(APIModel):
    participant_id: str = Field(..., alias="participantId")
    nickname: str


class RankedOption(APIModel):
    option_id: str = Field(..., alias="optionId")
    date: str
    count: int
    voters: list[VoterRead] = Field(default_factory=list)


class ResultsRead(APIModel):
    """Results view: options ranked by vote count, most votes first."""

    meeting_id: str = Field(..., alias="meetingId")
    is_expired: bool = Field(..., alias="isExpired")
    total_participants: int = Field(..., alias="totalParticipants")
    options: list[RankedOption] = Field(default_factory=list)
