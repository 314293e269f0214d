"""
NoteKeeper Backend: Identifier Service
=======================================

What:  Generates new resource identifiers and parses identifiers taken from
       URL paths.
How:   Identifiers are UUID4 values. A path segment is accepted only in the
       canonical 8-4-4-4-12 hexadecimal form.

Classification:
    "asdf"                                  → MalformedIdError (400)
    "5f1e...-...-..." (well-formed, absent) → left to the store (404)
"""

import re
import uuid

from notekeeper.exceptions import MalformedIdError

_UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def new_identifier() -> uuid.UUID:
    """Return a fresh random identifier for a new entity."""
    return uuid.uuid4()


def is_well_formed(raw: str) -> bool:
    return bool(_UUID_PATTERN.match(raw))


def parse_identifier(raw: str, resource: str = "resource") -> uuid.UUID:
    """
    Parse a path identifier.

    Args:
        raw:      The path segment exactly as received
        resource: Resource name used in the error context

    Returns:
        The identifier as a UUID

    Raises:
        MalformedIdError: raw is not a canonical UUID string
    """
    if not is_well_formed(raw):
        raise MalformedIdError(raw_id=raw, resource=resource)
    return uuid.UUID(raw)
