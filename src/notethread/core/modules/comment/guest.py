"""Display names for guest commenters.

A guest name is a label, not an identity: it is derived from the connection's
address and user agent, two guests may share a name, and the same guest gets a new
name when either input changes.
"""

import hashlib
import json
from typing import Any

GUEST_NAME_PREFIX = "void-"
GUEST_HASH_LENGTH = 5


def serialize_user_agent(user_agent: Any) -> str:
    """JSON-encode the user agent, or return an empty string if it cannot be encoded."""
    try:
        return json.dumps(user_agent, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError, RecursionError):
        return ""


def make_guest_name(address: str | None, user_agent: Any) -> str:
    """Build a short pseudo-name like `void-3fa9c` for an unauthenticated commenter."""
    source = f"{address or ''}-{serialize_user_agent(user_agent)}"
    digest = hashlib.md5(source.encode("utf-8"), usedforsecurity=False).hexdigest()
    return GUEST_NAME_PREFIX + digest[:GUEST_HASH_LENGTH]
