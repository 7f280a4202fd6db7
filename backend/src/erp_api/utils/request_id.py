"""Request correlation IDs."""

import re
import uuid

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied IDs end up in logs; only accept short opaque tokens
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{8,64}$")


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a well-formed incoming request ID or mint a new UUID4."""
    if incoming and _SAFE_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())
