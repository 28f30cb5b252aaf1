"""
Meeting endpoints for API v1.

These routes create, read, update and search meetings and check the
owner password before the management page unlocks.  Domain errors
raised by ``MeetingService`` propagate to the application's error
handler, which renders them as ``{"error": ...}`` with the matching
status code.
"""

from typing import List

from fastapi import APIRouter, Query, status

from boardtime_api.app.schemas.meeting import (
    MeetingAuth,
    MeetingCreate,
    MeetingCreated,
    MeetingRead,
    MeetingSummary,
    MeetingUpdate,
)
from boardtime_api.app.schemas.vote import ResultsRead
from boardtime_api.app.services.meeting_service import MeetingService
from boardtime_api.app.services.tally_service import TallyService


router = APIRouter()


@router.post("", response_model=MeetingCreated, status_code=status.HTTP_201_CREATED)
async def create_meeting(meeting: MeetingCreate) -> MeetingCreated:
    """Create a meeting and return its id for the share link."""
    meeting_id = await MeetingService.create_meeting(
        title=meeting.title,
        description=meeting.description,
        password=meeting.password,
        deadline=meeting.deadline,
        date_options=meeting.date_options,
    )
    return MeetingCreated(meeting_id=meeting_id)


# Declared before "/{meeting_id}" so that "search" is not taken for an id.
@router.get("/search", response_model=List[MeetingSummary])
async def search_meetings(
    title: str = Query("", description="Part of the meeting title, or a full meeting id"),
) -> List[MeetingSummary]:
    """모임 이름(부분 일치, 대소문자 무시) 또는 ID로 모임을 찾습니다.

    The caller branches on the number of hits: one hit goes straight to
    the password prompt, several are shown as a list.
    """
    return await MeetingService.search_by_title(title)


@router.get("/{meeting_id}", response_model=MeetingRead)
async def get_meeting(meeting_id: str) -> MeetingRead:
    return await MeetingService.get_meeting(meeting_id)


@router.put("/{meeting_id}", response_model=MeetingRead)
async def update_meeting(meeting_id: str, updates: MeetingUpdate) -> MeetingRead:
    """Update a meeting (owner password required).

    Partial updates are supported; fields left out stay unchanged.
    Sending ``dateOptions`` replaces the whole option set, and votes on
    removed options are deleted.
    """
    return await MeetingService.update_meeting(
        meeting_id,
        updates.password,
        title=updates.title,
        description=updates.description,
        deadline=updates.deadline,
        date_options=updates.date_options,
    )


@router.post("/{meeting_id}/auth")
async def authenticate(meeting_id: str, auth: MeetingAuth) -> dict:
    await MeetingService.authenticate(meeting_id, auth.password)
    return {"message": "Authenticated"}


@router.get("/{meeting_id}/results", response_model=ResultsRead)
async def get_results(meeting_id: str) -> ResultsRead:
    """Options ranked by vote count, most votes first, with their voters."""
    return await TallyService.results(meeting_id)
