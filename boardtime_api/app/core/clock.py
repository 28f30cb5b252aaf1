"""
Timestamp helpers.

All timestamps are stored as fixed‑width ISO‑8601 UTC strings
(``2025-10-25T14:00:00Z``) so that equal instants compare equal as
text and SQLite ordering matches chronological ordering.  Input may
carry any UTC offset; naive values (what an HTML ``datetime-local``
field submits) are taken as UTC.
"""

from datetime import datetime, timezone

from .exceptions import InvalidTimestamp

STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse ``value`` into an aware UTC datetime truncated to seconds.

    Raises ``InvalidTimestamp`` for blank or unparseable strings and for
    instants that fall outside the representable range once shifted to
    UTC (e.g. ``9999-12-31T23:59:59-05:00``).
    """
    return _to_utc(value).replace(microsecond=0)


def _to_utc(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        text = (value or "").strip()
        if not text:
            raise InvalidTimestamp("Timestamp must not be empty")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidTimestamp(f"Invalid timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise InvalidTimestamp(f"Timestamp out of range: {value!r}") from exc


def format_timestamp(value: str | datetime) -> str:
    """Normalise ``value`` to the storage format."""
    return parse_timestamp(value).strftime(STORAGE_FORMAT)


def is_expired(deadline: str | datetime, now: datetime | None = None) -> bool:
    """Return True once ``now`` is strictly past ``deadline``.

    Voting at the exact deadline is still allowed, but not a fraction
    of a second later: ``now`` keeps its microseconds.  The result is
    never stored; callers recompute it on every read.
    """
    current = _to_utc(now) if now is not None else utcnow()
    return current > parse_timestamp(deadline)
