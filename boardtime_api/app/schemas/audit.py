"""Pydantic model for audit trail entries."""

from typing import Any, Optional

from pydantic import BaseModel


class AuditEntry(BaseModel):
    id: int
    meeting_id: Optional[str] = None
    actor: Optional[str] = None
    action: str
    object_type: Optional[str] = None
    object_id: Optional[str] = None
    # SQLite CURRENT_TIMESTAMP text, UTC ("YYYY-MM-DD HH:MM:SS").
    timestamp: str
    details: Optional[Any] = None
