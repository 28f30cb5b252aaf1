"""BoardTime API client tests (HTTP mocked at the session level)"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from boardtime_client import BoardTimeAPI


def _response(status_code: int, body=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode() if body is not None else b""
    response.url = "http://backend/api"
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(session):
    return BoardTimeAPI(base_url="http://backend/", session=session)


def test_create_meeting(api, session):
    session.request.return_value = _response(201, {"meetingId": "m1"})

    meeting_id, error = api.create_meeting("Catan", "pw", "2099-01-01T00:00:00Z", ["2098-12-30T18:00:00Z"])

    assert (meeting_id, error) == ("m1", None)
    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "POST"
    assert kwargs["url"] == "http://backend/api/meetings"
    assert kwargs["json"]["dateOptions"] == ["2098-12-30T18:00:00Z"]
    assert kwargs["timeout"] == 15


def test_error_body_becomes_message(api, session):
    session.request.return_value = _response(409, {"error": "Voting for this meeting has closed"})

    data, error = api.submit_vote("m1", "alice", "pw", ["o1"])

    assert data is None
    assert error == {"status_code": 409, "message": "Voting for this meeting has closed"}


def test_connection_error(api, session):
    session.request.side_effect = requests.ConnectionError("refused")

    counts, error = api.get_vote_counts("m1")

    assert counts == {}
    assert error["status_code"] is None
    assert "refused" in error["message"]


def test_update_meeting_maps_date_options(api, session):
    session.request.return_value = _response(200, {"_id": "m1"})

    api.update_meeting("m1", "pw", title="New", date_options=["2099-01-01T00:00:00Z"])

    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "PUT"
    assert kwargs["json"] == {
        "password": "pw",
        "title": "New",
        "dateOptions": ["2099-01-01T00:00:00Z"],
    }


def test_search_sends_query_param(api, session):
    session.request.return_value = _response(200, [{"_id": "m1", "title": "Catan"}])

    hits, error = api.search_meetings("cat")

    assert error is None
    assert hits == [{"_id": "m1", "title": "Catan"}]
    assert session.request.call_args.kwargs["params"] == {"title": "cat"}
    assert session.request.call_args.kwargs["url"].endswith("/api/meetings/search")


def test_authenticate(api, session):
    session.request.return_value = _response(200, {"message": "Authenticated"})
    assert api.authenticate("m1", "pw") == (True, None)

    session.request.return_value = _response(401, {"error": "Meeting password does not match"})
    ok, error = api.authenticate("m1", "bad")
    assert ok is False
    assert error["status_code"] == 401


def test_ranked_results_ties_keep_server_order(api, session):
    session.request.return_value = _response(200, {"o1": 1, "o2": 3, "o3": 1, "o4": 3})

    ranked, error = api.ranked_results("m1")

    assert error is None
    assert ranked == [("o2", 3), ("o4", 3), ("o1", 1), ("o3", 1)]
