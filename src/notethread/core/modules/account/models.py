from datetime import datetime

from pydantic import BaseModel, Field

from notethread.core.db import MongoModel
from notethread.utils import now


class Account(MongoModel):
    """Account domain model with credentials."""

    name: str  # Login name, unique
    nickname: str = ""
    image: str = ""  # Avatar URL
    password_hash: str  # bcrypt hash
    created_at: datetime = Field(default_factory=now)


class AccountView(BaseModel):
    """Public profile of an account, safe to expose next to its comments."""

    id: int = Field(..., description="Account ID")
    name: str = Field(..., description="Login name")
    nickname: str = Field(..., description="Display name")
    image: str = Field(..., description="Avatar URL")

    @classmethod
    def from_domain(cls, account: Account) -> "AccountView":
        """Create view model from domain model."""
        return cls(id=account.id, name=account.name, nickname=account.nickname, image=account.image)
