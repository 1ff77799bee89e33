"""
Identifier helpers shared by the models.

Record ids are opaque UUID4 strings generated application-side.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional


def new_id() -> str:
    return str(uuid.uuid4())


def normalize_id(value: Any) -> Optional[str]:
    """
    Return the canonical form of an id, or None when it is not a valid id.

    Lookups treat None as "not found" so a malformed id never surfaces as
    a distinct error.
    """
    if value is None:
        return None
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
