from datetime import datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from notethread.core.db import MongoModel
from notethread.core.modules.account.models import AccountView
from notethread.utils import now


class Comment(MongoModel):
    """Comment on a note with one level of threading.

    A comment with no parent anchors a thread; a reply points at a top-level comment.
    Authored either by an account or by a guest, never both.
    """

    content: str
    note_id: int
    parent_id: int | None = None
    account_id: int | None = None
    guest_name: str | None = None  # Set only for guest comments
    guest_ip: str | None = None  # Diagnostic only
    guest_ua: str | None = None  # Diagnostic only, JSON-serialized user agent
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    @model_validator(mode="after")
    def check_single_author(self) -> Self:
        if (self.account_id is None) == (self.guest_name is None):
            raise ValueError("Comment must have exactly one author: account_id or guest_name")
        return self


class ClientInfo(BaseModel):
    """Connection metadata of the caller, used to name guests."""

    address: str | None = None
    user_agent: str | None = None


class CommentView(BaseModel):
    """Comment with its author's public profile (API representation)."""

    id: int = Field(..., description="Comment ID")
    content: str = Field(..., description="Comment text")
    note_id: int = Field(..., description="Note the comment belongs to")
    parent_id: int | None = Field(None, description="Top-level comment this reply belongs to, null for top-level")
    account_id: int | None = Field(None, description="Author account ID, null for guests")
    guest_name: str | None = Field(None, description="Guest display name, null for account comments")
    created_at: datetime
    updated_at: datetime
    account: AccountView | None = Field(None, description="Author public profile, null for guests")

    @classmethod
    def from_domain(cls, comment: Comment, account: AccountView | None) -> Self:
        """Create view model from domain model."""
        return cls(
            id=comment.id,
            content=comment.content,
            note_id=comment.note_id,
            parent_id=comment.parent_id,
            account_id=comment.account_id,
            guest_name=comment.guest_name,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            account=account,
        )


class CommentThread(CommentView):
    """Top-level comment with its direct replies, oldest first.

    Replies are plain CommentView items, so threads never nest deeper than one level.
    """

    replies: list[CommentView] = Field(default_factory=list, description="Direct replies ordered by creation time")


class DeleteCommentResult(BaseModel):
    success: bool
