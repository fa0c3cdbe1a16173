"""Identifier parsing shared by the services."""
import uuid
from typing import Optional

from driveclone.exceptions import NotFoundError


def parse_id(value, not_found_message: str) -> uuid.UUID:
    """Parse a client-supplied id; a malformed id reads as a missing record."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise NotFoundError(not_found_message)


def parse_parent_id(value, not_found_message: str) -> Optional[uuid.UUID]:
    """Like parse_id, but ``None``, ``""`` and ``"null"`` select the root level."""
    if value is None or value == "" or value == "null":
        return None
    return parse_id(value, not_found_message)
