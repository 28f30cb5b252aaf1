"""
Pydantic models for meeting data.

The front‑end speaks camelCase and identifies records with ``_id``;
fields are therefore declared with snake_case names and wire aliases.
``populate_by_name`` lets services build the models with the Python
names while responses are rendered by alias.
"""

from typing import Optional

from pydantic import BaseModel, Field


class APIModel(BaseModel):
    model_config = {
        "populate_by_name": True,
    }


class MeetingCreate(APIModel):
    """Schema for creating a meeting."""

    title: str = Field(..., min_length=1, examples=["BoardTime Kickoff"])
    description: str = Field("", examples=["Monthly board game night"])
    password: str = Field(..., min_length=1, description="Owner password used to manage the meeting")
    deadline: str = Field(..., examples=["2025-10-20T18:00"])
    # Candidate dates as ISO‑8601 strings.  Blank entries are ignored
    # and duplicates (same instant) are stored once.
    date_options: list[str] = Field(
        ...,
        alias="dateOptions",
        examples=[["2025-10-25T14:00:00Z", "2025-10-26T14:00:00Z"]],
    )


class MeetingCreated(APIModel):
    meeting_id: str = Field(..., alias="meetingId")


class MeetingUpdate(APIModel):
    """Schema for updating a meeting.

    ``password`` authenticates the owner; every other field is optional
    and only provided fields are changed.  ``dateOptions``, when sent,
    is the complete new option set.
    """

    password: str = Field(..., min_length=1)
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    deadline: Optional[str] = None
    date_options: Optional[list[str]] = Field(None, alias="dateOptions")


class MeetingAuth(BaseModel):
    password: str = Field(..., min_length=1)


class DateOptionRead(APIModel):
    id: str = Field(..., alias="_id")
    date: str
    # Participant ids whose current selection includes this option.
    votes: list[str] = Field(default_factory=list)


class ParticipantRead(APIModel):
    id: str = Field(..., alias="_id")
    nickname: str


class MeetingRead(APIModel):
    """Schema for reading a meeting.  Never includes password hashes."""

    id: str = Field(..., alias="_id")
    title: str
    description: str
    deadline: str
    is_expired: bool = Field(..., alias="isExpired")
    date_options: list[DateOptionRead] = Field(default_factory=list, alias="dateOptions")
    participants: list[ParticipantRead] = Field(default_factory=list)


class MeetingSummary(APIModel):
    """Search hit."""

    id: str = Field(..., alias="_id")
    title: str
