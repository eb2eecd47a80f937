import asyncio
from collections import defaultdict
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from notethread.core.core import Service
from notethread.core.modules.ai.models import AIMention
from notethread.core.modules.comment.guest import make_guest_name, serialize_user_agent
from notethread.core.modules.comment.models import ClientInfo, Comment, CommentThread, CommentView
from notethread.core.modules.counter.models import CounterType
from notethread.core.pagination import PaginationResult, SortOrder, page_offset
from notethread.errors import NotFoundError, ValidationError
from notethread.utils import now

logger = structlog.get_logger(__name__)

# Same message for missing and not-owned comments, so other accounts' comments can't be probed
COMMENT_NOT_FOUND_OR_NO_PERMISSION = "Comment not found or no permission"


class CommentService(Service):
    """Manages threaded comments on notes."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("comments")

    async def on_start(self) -> None:
        """Create indexes for thread listing, reply lookup and ownership checks."""
        await self._collection.create_index([("note_id", 1), ("parent_id", 1), ("created_at", -1)])
        await self._collection.create_index([("parent_id", 1), ("created_at", 1)])
        await self._collection.create_index([("account_id", 1)])

    async def get_comment(self, comment_id: int) -> Comment:
        """Get comment by ID."""
        doc = await self._collection.find_one({"_id": comment_id})
        if doc is None:
            raise NotFoundError(f"Comment not found: {comment_id}")
        return Comment.model_validate(doc)

    def to_view(self, comment: Comment) -> CommentView:
        """Attach the author's public profile to a comment."""
        return CommentView.from_domain(comment, self.core.services.account.get_account_view(comment.account_id))

    async def create_comment(
        self,
        note_id: int,
        content: str,
        parent_id: int | None = None,
        account_id: int | None = None,
        client: ClientInfo | None = None,
    ) -> Comment:
        """Create a top-level comment or a reply, as an account or as a guest.

        Without account_id the comment is a guest comment named from the client's
        address and user agent. Content mentioning the AI responder is handed off to
        it in the background after the comment is stored.
        """
        if not content:
            raise ValidationError("Comment content cannot be empty")

        if not await self.core.services.note.has_note(note_id):
            raise NotFoundError(f"Note not found: {note_id}")

        if parent_id is not None:
            parent_id = await self._resolve_thread_parent(note_id, parent_id)

        if account_id is not None:
            comment = await self._insert_comment(note_id, content, parent_id, account_id=account_id)
        else:
            client = client or ClientInfo()
            comment = await self._insert_comment(
                note_id,
                content,
                parent_id,
                guest_name=make_guest_name(client.address, client.user_agent),
                guest_ip=client.address,
                guest_ua=serialize_user_agent(client.user_agent),
            )

        logger.info(
            "comment_created",
            comment_id=comment.id,
            note_id=note_id,
            parent_id=parent_id,
            account_id=account_id,
            guest_name=comment.guest_name,
        )

        ai = self.core.services.ai
        if ai.is_mentioned(content):
            ai.dispatch_mention(AIMention(content=content, note_id=note_id))

        return comment

    async def create_ai_comment(self, note_id: int, content: str) -> Comment:
        """Store the AI responder's answer as a top-level guest comment. Never re-triggers the responder."""
        # The note may have been deleted while the answer was being generated
        if not await self.core.services.note.has_note(note_id):
            raise NotFoundError(f"Note not found: {note_id}")
        comment = await self._insert_comment(note_id, content, None, guest_name=self.core.config.ai_guest_name)
        logger.info("ai_comment_created", comment_id=comment.id, note_id=note_id)
        return comment

    async def list_comments(
        self, note_id: int, page: int = 1, size: int = 20, order_by: SortOrder = SortOrder.DESC
    ) -> PaginationResult[CommentThread]:
        """Get a page of threads for a note.

        Only top-level comments are counted and paginated, sorted by creation time in
        order_by direction. Each carries all of its replies, always oldest first.
        """
        offset = page_offset(page, size)
        query: dict[str, Any] = {"note_id": note_id, "parent_id": None}

        cursor = (
            self._collection.find(query)
            .sort([("created_at", order_by.direction), ("_id", order_by.direction)])
            .skip(offset)
            .limit(size)
        )
        total, top_level = await asyncio.gather(
            self._collection.count_documents(query),
            Comment.list_cursor(cursor),
        )

        replies = await self._get_replies([comment.id for comment in top_level])
        items = [
            CommentThread(
                **self.to_view(comment).model_dump(),
                replies=[self.to_view(reply) for reply in replies.get(comment.id, [])],
            )
            for comment in top_level
        ]

        logger.debug(
            "list_comments",
            note_id=note_id,
            page=page,
            size=size,
            order_by=order_by,
            total=total,
            returned=len(items),
        )
        return PaginationResult(total=total, items=items)

    async def find_owned_comment(self, comment_id: int, account_id: int | None) -> Comment | None:
        """Single lookup by id and owner. Guests own nothing."""
        if account_id is None:
            return None
        doc = await self._collection.find_one({"_id": comment_id, "account_id": account_id})
        if doc is None:
            return None
        return Comment.model_validate(doc)

    async def can_mutate(self, comment_id: int, account_id: int | None) -> bool:
        """Check whether the account may edit or delete the comment."""
        return await self.find_owned_comment(comment_id, account_id) is not None

    async def get_owned_comment(self, comment_id: int, account_id: int | None) -> Comment:
        """Get a comment owned by the account, or raise the combined not-found/no-permission error."""
        comment = await self.find_owned_comment(comment_id, account_id)
        if comment is None:
            raise NotFoundError(COMMENT_NOT_FOUND_OR_NO_PERMISSION)
        return comment

    async def update_comment(self, comment: Comment, content: str) -> Comment:
        """Replace comment content. Note, parent and author never change."""
        if not content:
            raise ValidationError("Comment content cannot be empty")

        updated_at = now()
        result = await self._collection.update_one(
            {"_id": comment.id}, {"$set": {"content": content, "updated_at": updated_at}}
        )
        if result.matched_count == 0:
            raise NotFoundError(COMMENT_NOT_FOUND_OR_NO_PERMISSION)

        logger.info("comment_updated", comment_id=comment.id, account_id=comment.account_id)
        return comment.model_copy(update={"content": content, "updated_at": updated_at})

    async def delete_comment(self, comment_id: int) -> int:
        """Delete a comment and its direct replies in one statement, return count of deleted comments."""
        result = await self._collection.delete_many({"$or": [{"_id": comment_id}, {"parent_id": comment_id}]})
        logger.info("comment_deleted", comment_id=comment_id, deleted_count=result.deleted_count)
        return result.deleted_count

    async def delete_comments_by_note(self, note_id: int) -> int:
        """Delete all comments on a note and return count of deleted comments."""
        result = await self._collection.delete_many({"note_id": note_id})
        return result.deleted_count

    async def _resolve_thread_parent(self, note_id: int, parent_id: int) -> int:
        """Return the top-level comment a new reply attaches to.

        A reply to a reply joins the same thread, so stored comments never nest deeper
        than one level.
        """
        parent = await self._collection.find_one({"_id": parent_id, "note_id": note_id})
        if parent is None:
            raise NotFoundError(f"Parent comment not found: {parent_id}")
        thread_id = parent.get("parent_id")
        return parent_id if thread_id is None else int(thread_id)

    async def _get_replies(self, parent_ids: list[int]) -> dict[int, list[Comment]]:
        """Replies grouped by parent, oldest first."""
        if not parent_ids:
            return {}
        cursor = self._collection.find({"parent_id": {"$in": parent_ids}}).sort([("created_at", 1), ("_id", 1)])
        grouped: dict[int, list[Comment]] = defaultdict(list)
        for reply in await Comment.list_cursor(cursor):
            if reply.parent_id is not None:
                grouped[reply.parent_id].append(reply)
        return grouped

    async def _insert_comment(
        self,
        note_id: int,
        content: str,
        parent_id: int | None,
        account_id: int | None = None,
        guest_name: str | None = None,
        guest_ip: str | None = None,
        guest_ua: str | None = None,
    ) -> Comment:
        comment_id = await self.core.services.counter.get_next_sequence(CounterType.COMMENT)
        timestamp = now()
        comment = Comment(
            id=comment_id,
            content=content,
            note_id=note_id,
            parent_id=parent_id,
            account_id=account_id,
            guest_name=guest_name,
            guest_ip=guest_ip,
            guest_ua=guest_ua,
            created_at=timestamp,
            updated_at=timestamp,
        )
        await self._collection.insert_one(comment.to_mongo())
        return comment
