"""Small shared utility helpers used across modules."""

import re
from datetime import datetime, timezone


def utc_iso_now() -> str:
    """Return current UTC timestamp as ISO-8601 string."""

    return datetime.now(timezone.utc).isoformat()


def agent_id_from_name(name: str) -> str:
    """Derive a URL-safe agent id: lowercase, runs of other characters become '-'."""

    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower())
    return slug.strip("-")
