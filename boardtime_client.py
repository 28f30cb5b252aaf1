"""BoardTime API client.

A thin wrapper around the BoardTime HTTP API using the ``requests``
library.  It mirrors the calls the web front‑end makes, so scripts
and other services can create meetings, vote and read results without
a browser:

* :meth:`BoardTimeAPI.create_meeting` / :meth:`get_meeting` /
  :meth:`update_meeting` / :meth:`search_meetings` / :meth:`authenticate`
* :meth:`BoardTimeAPI.submit_vote` / :meth:`get_my_vote`
* :meth:`BoardTimeAPI.get_vote_counts` / :meth:`get_voters`
* :meth:`BoardTimeAPI.ranked_results` – the counts map sorted by
  votes, highest first, as the result view shows it.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is ``None`` (or an empty container)
and ``error`` is a dictionary with ``status_code`` and ``message``,
the message being the ``error`` field of the API's JSON body.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class BoardTimeAPI:
    """Client for the BoardTime meeting scheduling API."""

    def __init__(
        self,
        *,
        base_url: str,
        prefix: str = "/api",
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the backend, e.g. ``http://localhost:8000``.
            prefix: Path prefix the API is mounted under.
            timeout: Per‑request timeout in seconds.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        self.base_url = base_url.rstrip("/") + "/" + prefix.strip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``).
            path: Path relative to the API prefix (e.g. ``/meetings``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("error") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Meetings
    # ------------------------------------------------------------------
    def create_meeting(
        self,
        title: str,
        password: str,
        deadline: str,
        date_options: List[str],
        description: str = "",
    ) -> Tuple[Optional[str], Optional[Error]]:
        """Create a meeting.  Returns ``(meeting_id, error)``."""
        payload = {
            "title": title,
            "description": description,
            "password": password,
            "deadline": deadline,
            "dateOptions": date_options,
        }
        data, error = self._request("POST", "/meetings", json_body=payload)
        if error:
            return None, error
        return data.get("meetingId"), None

    def get_meeting(self, meeting_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/meetings/{meeting_id}")

    def update_meeting(
        self, meeting_id: str, password: str, **changes: Any
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Update a meeting.

        Args:
            meeting_id: Identifier of the meeting.
            password: The owner password.
            **changes: Any of ``title``, ``description``, ``deadline`` or
                ``date_options`` (sent as ``dateOptions``).
        """
        payload: Dict[str, Any] = {"password": password}
        for key, value in changes.items():
            payload["dateOptions" if key == "date_options" else key] = value
        return self._request("PUT", f"/meetings/{meeting_id}", json_body=payload)

    def search_meetings(self, title: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", "/meetings/search", params={"title": title})
        if error:
            return [], error
        return data or [], None

    def authenticate(self, meeting_id: str, password: str) -> Tuple[bool, Optional[Error]]:
        """Check the owner password.  Returns ``(True, None)`` on success."""
        _, error = self._request("POST", f"/meetings/{meeting_id}/auth", json_body={"password": password})
        if error:
            return False, error
        return True, None

    # ------------------------------------------------------------------
    # Votes
    # ------------------------------------------------------------------
    def submit_vote(
        self, meeting_id: str, nickname: str, password: str, date_option_ids: List[str]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        payload = {"nickname": nickname, "password": password, "dateOptionIds": date_option_ids}
        return self._request("POST", f"/meetings/{meeting_id}/votes", json_body=payload)

    def get_my_vote(
        self, meeting_id: str, nickname: str, password: str
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        payload = {"nickname": nickname, "password": password}
        return self._request("POST", f"/meetings/{meeting_id}/votes/mine", json_body=payload)

    def get_vote_counts(self, meeting_id: str) -> Tuple[Dict[str, int], Optional[Error]]:
        data, error = self._request("GET", f"/meetings/{meeting_id}/votes")
        if error:
            return {}, error
        return data or {}, None

    def get_voters(self, meeting_id: str, option_id: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", f"/meetings/{meeting_id}/votes/{option_id}")
        if error:
            return [], error
        return data or [], None

    def ranked_results(self, meeting_id: str) -> Tuple[List[Tuple[str, int]], Optional[Error]]:
        """Vote counts as ``(option_id, count)`` pairs, most votes first.

        Ties keep the order the server returned them in.
        """
        counts, error = self.get_vote_counts(meeting_id)
        if error:
            return [], error
        return sorted(counts.items(), key=lambda item: item[1], reverse=True), None
