"""
Pydantic schema definitions for API payloads.

Schemas are separated from database rows to decouple the wire
representation (camelCase keys, ``_id`` identifiers) from persistence.
"""
