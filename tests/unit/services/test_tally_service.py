"""Tally unit tests"""

import pytest

from boardtime_api.app.core.exceptions import InvalidOption, MeetingNotFound
from boardtime_api.app.services.meeting_service import MeetingService
from boardtime_api.app.services.tally_service import TallyService, rank_counts
from boardtime_api.app.services.vote_service import VoteService

from tests.conftest import FUTURE_DEADLINE, OPTION_DATES


@pytest.mark.asyncio
async def test_counts_include_options_without_votes(meeting_id, option_ids):
    counts = await TallyService.counts_by_option(meeting_id)

    assert counts == {option_id: 0 for option_id in option_ids}
    assert list(counts) == option_ids


@pytest.mark.asyncio
async def test_counts_follow_current_selections(meeting_id, option_ids):
    first, second, third = option_ids
    await VoteService.submit_vote(meeting_id, "alice", "a", [first, second])
    await VoteService.submit_vote(meeting_id, "bob", "b", [second])
    await VoteService.submit_vote(meeting_id, "alice", "a", [third])

    counts = await TallyService.counts_by_option(meeting_id)

    assert counts == {first: 0, second: 1, third: 1}


@pytest.mark.asyncio
async def test_counts_unknown_meeting():
    with pytest.raises(MeetingNotFound):
        await TallyService.counts_by_option("missing")


@pytest.mark.asyncio
async def test_voters_for_option_without_votes(meeting_id, option_ids):
    assert await TallyService.voters_for_option(meeting_id, option_ids[0]) == []


@pytest.mark.asyncio
async def test_voter_order_survives_revote(meeting_id, option_ids):
    target = option_ids[1]
    await VoteService.submit_vote(meeting_id, "alice", "a", [target])
    await VoteService.submit_vote(meeting_id, "bob", "b", [target])
    # Alice revotes after Bob but keeps her original place.
    await VoteService.submit_vote(meeting_id, "alice", "a", [target, option_ids[2]])

    voters = await TallyService.voters_for_option(meeting_id, target)

    assert [voter.nickname for voter in voters] == ["alice", "bob"]


@pytest.mark.asyncio
async def test_voters_for_foreign_option(meeting_id):
    other_id = await MeetingService.create_meeting(
        title="Other", description="", password="x",
        deadline=FUTURE_DEADLINE, date_options=OPTION_DATES,
    )
    foreign = (await MeetingService.get_meeting(other_id)).date_options[0].id

    with pytest.raises(InvalidOption):
        await TallyService.voters_for_option(meeting_id, foreign)
    with pytest.raises(InvalidOption):
        await TallyService.voters_for_option(meeting_id, "nonexistent")


def test_rank_counts_orders_by_count():
    assert rank_counts({"a": 1, "b": 3, "c": 2}) == [("b", 3), ("c", 2), ("a", 1)]


def test_rank_counts_keeps_input_order_for_ties():
    counts = {"mon": 2, "tue": 5, "wed": 2, "thu": 5, "fri": 0}

    assert rank_counts(counts) == [("tue", 5), ("thu", 5), ("mon", 2), ("wed", 2), ("fri", 0)]


def test_rank_counts_empty():
    assert rank_counts({}) == []


@pytest.mark.asyncio
async def test_results(meeting_id, option_ids, after_deadline):
    first, second, third = option_ids
    await VoteService.submit_vote(meeting_id, "alice", "a", [second, third])
    await VoteService.submit_vote(meeting_id, "bob", "b", [third])

    results = await TallyService.results(meeting_id, now=after_deadline)

    assert results.meeting_id == meeting_id
    assert results.is_expired is True
    assert results.total_participants == 2
    assert [(o.option_id, o.count) for o in results.options] == [(third, 2), (second, 1), (first, 0)]
    assert [v.nickname for v in results.options[0].voters] == ["alice", "bob"]
    assert results.options[0].date == OPTION_DATES[2]

    dumped = results.model_dump(by_alias=True)
    assert set(dumped) == {"meetingId", "isExpired", "totalParticipants", "options"}
    assert set(dumped["options"][0]) == {"optionId", "date", "count", "voters"}


@pytest.mark.asyncio
async def test_results_unknown_meeting():
    with pytest.raises(MeetingNotFound):
        await TallyService.results("missing")
