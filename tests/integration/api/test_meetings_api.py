"""Meeting API integration tests

Exercises /api/meetings through the ASGI app: status codes, response
shape (``_id`` and camelCase keys) and the ``{"error": ...}`` body of
failed requests.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import FUTURE_DEADLINE, OPTION_DATES


def _payload(**overrides) -> dict:
    payload = {
        "title": "Saturday Catan",
        "description": "Bring snacks",
        "password": "owner-pw",
        "deadline": FUTURE_DEADLINE,
        "dateOptions": OPTION_DATES,
    }
    payload.update(overrides)
    return payload


async def _create(client: AsyncClient, **overrides) -> str:
    response = await client.post("/api/meetings", json=_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["meetingId"]


# ===== Create =====


@pytest.mark.asyncio
async def test_create_meeting(async_client: AsyncClient):
    response = await async_client.post("/api/meetings", json=_payload())

    assert response.status_code == 201
    assert set(response.json()) == {"meetingId"}


@pytest.mark.asyncio
async def test_create_meeting_empty_options(async_client: AsyncClient):
    response = await async_client.post("/api/meetings", json=_payload(dateOptions=[]))

    assert response.status_code == 400
    assert response.json() == {"error": "At least one date option is required"}


@pytest.mark.asyncio
async def test_create_meeting_bad_timestamp(async_client: AsyncClient):
    response = await async_client.post("/api/meetings", json=_payload(dateOptions=["someday"]))

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_create_meeting_missing_fields(async_client: AsyncClient):
    response = await async_client.post("/api/meetings", json={"title": "No password"})

    assert response.status_code == 400
    body = response.json()
    assert set(body) == {"error"}
    assert "password" in body["error"]


# ===== Read =====


@pytest.mark.asyncio
async def test_get_meeting_shape(async_client: AsyncClient):
    meeting_id = await _create(async_client)

    response = await async_client.get(f"/api/meetings/{meeting_id}")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {
        "_id", "title", "description", "deadline", "isExpired", "dateOptions", "participants",
    }
    assert body["_id"] == meeting_id
    assert body["isExpired"] is False
    assert [option["date"] for option in body["dateOptions"]] == OPTION_DATES
    assert set(body["dateOptions"][0]) == {"_id", "date", "votes"}
    assert "password" not in response.text


@pytest.mark.asyncio
async def test_get_expired_meeting(async_client: AsyncClient):
    meeting_id = await _create(async_client, deadline="2000-01-01T00:00:00Z")

    response = await async_client.get(f"/api/meetings/{meeting_id}")

    assert response.json()["isExpired"] is True


@pytest.mark.asyncio
async def test_get_meeting_not_found(async_client: AsyncClient):
    response = await async_client.get("/api/meetings/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "Meeting does-not-exist not found"}


# ===== Auth =====


@pytest.mark.asyncio
async def test_authenticate(async_client: AsyncClient):
    meeting_id = await _create(async_client)

    ok = await async_client.post(f"/api/meetings/{meeting_id}/auth", json={"password": "owner-pw"})
    bad = await async_client.post(f"/api/meetings/{meeting_id}/auth", json={"password": "guess"})

    assert ok.status_code == 200
    assert ok.json() == {"message": "Authenticated"}
    assert bad.status_code == 401
    assert "error" in bad.json()


@pytest.mark.asyncio
async def test_authenticate_unknown_meeting(async_client: AsyncClient):
    response = await async_client.post("/api/meetings/nope/auth", json={"password": "x"})

    assert response.status_code == 404


# ===== Update =====


@pytest.mark.asyncio
async def test_update_meeting(async_client: AsyncClient):
    meeting_id = await _create(async_client)

    response = await async_client.put(
        f"/api/meetings/{meeting_id}",
        json={"password": "owner-pw", "title": "Sunday Catan", "dateOptions": OPTION_DATES[:1]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Sunday Catan"
    assert body["description"] == "Bring snacks"
    assert [option["date"] for option in body["dateOptions"]] == OPTION_DATES[:1]


@pytest.mark.asyncio
async def test_update_meeting_wrong_password(async_client: AsyncClient):
    meeting_id = await _create(async_client)

    response = await async_client.put(
        f"/api/meetings/{meeting_id}", json={"password": "wrong", "title": "Hijacked"}
    )

    assert response.status_code == 401
    current = await async_client.get(f"/api/meetings/{meeting_id}")
    assert current.json()["title"] == "Saturday Catan"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes",
    [{"dateOptions": []}, {"deadline": "nope"}, {"title": " "}, {"dateOptions": ["someday"]}],
)
async def test_update_meeting_wrong_password_checked_before_payload(async_client: AsyncClient, changes):
    meeting_id = await _create(async_client)

    response = await async_client.put(
        f"/api/meetings/{meeting_id}", json={"password": "wrong", **changes}
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Meeting password does not match"}


@pytest.mark.asyncio
async def test_update_unknown_meeting_with_bad_payload(async_client: AsyncClient):
    response = await async_client.put(
        "/api/meetings/does-not-exist", json={"password": "x", "dateOptions": []}
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_deadline_out_of_range_after_utc_shift(async_client: AsyncClient):
    response = await async_client.post(
        "/api/meetings", json=_payload(deadline="9999-12-31T23:59:59-05:00")
    )

    assert response.status_code == 400
    assert "out of range" in response.json()["error"]


# ===== Search =====


@pytest.mark.asyncio
async def test_search(async_client: AsyncClient):
    catan = await _create(async_client)
    await _create(async_client, title="Chess club")

    response = await async_client.get("/api/meetings/search", params={"title": "catan"})

    assert response.status_code == 200
    assert response.json() == [{"_id": catan, "title": "Saturday Catan"}]


@pytest.mark.asyncio
async def test_search_by_id(async_client: AsyncClient):
    meeting_id = await _create(async_client)

    response = await async_client.get("/api/meetings/search", params={"title": meeting_id})

    assert [hit["_id"] for hit in response.json()] == [meeting_id]


@pytest.mark.asyncio
async def test_search_without_query(async_client: AsyncClient):
    await _create(async_client)

    response = await async_client.get("/api/meetings/search")

    assert response.status_code == 200
    assert response.json() == []


# ===== Misc =====


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    response = await async_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
