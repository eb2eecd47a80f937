from datetime import datetime

from pydantic import Field

from notethread.core.db import MongoModel
from notethread.utils import now


class Note(MongoModel):
    """Published note that readers comment on."""

    content: str
    account_id: int  # Owner
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
