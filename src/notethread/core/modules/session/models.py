"""Session management models."""

from datetime import datetime
from typing import Any, NewType

from pydantic import BaseModel, Field

from notethread.utils import now

AuthToken = NewType("AuthToken", str)


class Session(BaseModel):
    """Account authentication session.

    Indexed on auth_token - unique, account_id, created_at (TTL 30 days).
    MongoDB assigns the ObjectId `_id`; sessions are only looked up by token.
    """

    account_id: int
    auth_token: str
    created_at: datetime = Field(default_factory=now)

    def to_mongo(self) -> dict[str, Any]:
        return self.model_dump()
