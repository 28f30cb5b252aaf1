"""
Domain errors raised by the service layer.

Services raise these instead of ``HTTPException`` so that they stay
usable outside of a request.  Every error carries the HTTP status it
maps to; ``main.create_app`` registers a single handler that renders
them as ``{"error": <message>}``.

All errors derive from ``ValueError`` so callers that only care about
"the request was rejected" can keep catching that.
"""

from fastapi import status


class BoardTimeError(ValueError):
    """Base class for errors reported back to API clients."""

    http_status: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BoardTimeError):
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class EmptyDateOptions(ValidationError):
    default_message = "At least one date option is required"


class InvalidOption(ValidationError):
    default_message = "Date option does not belong to this meeting"


class InvalidTimestamp(ValidationError):
    default_message = "Invalid timestamp"


class AuthError(BoardTimeError):
    http_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed"


class InvalidPassword(AuthError):
    """Meeting owner password did not match."""

    default_message = "Meeting password does not match"


class PasswordMismatch(AuthError):
    """Nickname is taken in this meeting and the vote password differs."""

    http_status = status.HTTP_403_FORBIDDEN
    default_message = "Password does not match the one used for this nickname"


class NotFoundError(BoardTimeError):
    http_status = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class MeetingNotFound(NotFoundError):
    def __init__(self, meeting_id: str) -> None:
        super().__init__(f"Meeting {meeting_id} not found")


class ParticipantNotFound(NotFoundError):
    def __init__(self, nickname: str) -> None:
        super().__init__(f"No vote found for nickname '{nickname}'")


class MeetingExpired(BoardTimeError):
    http_status = status.HTTP_409_CONFLICT
    default_message = "Voting for this meeting has closed"
