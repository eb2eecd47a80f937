from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from notethread.core.core import Service
from notethread.core.modules.counter.models import CounterType
from notethread.core.modules.note.models import Note
from notethread.core.pagination import PaginationResult, SortOrder, page_offset
from notethread.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class NoteService(Service):
    """Manages notes."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("notes")

    async def on_start(self) -> None:
        """Create indexes for owner listing."""
        await self._collection.create_index([("account_id", 1), ("created_at", -1)])

    async def create_note(self, account_id: int, content: str) -> Note:
        """Create note owned by account."""
        if not content:
            raise ValidationError("Note content cannot be empty")

        note_id = await self.core.services.counter.get_next_sequence(CounterType.NOTE)
        note = Note(id=note_id, content=content, account_id=account_id)
        await self._collection.insert_one(note.to_mongo())
        logger.info("note_created", note_id=note_id, account_id=account_id)
        return note

    async def get_note(self, note_id: int) -> Note:
        """Get note by ID."""
        doc = await self._collection.find_one({"_id": note_id})
        if not doc:
            raise NotFoundError(f"Note not found: {note_id}")
        return Note.model_validate(doc)

    async def has_note(self, note_id: int) -> bool:
        """Check if note exists by ID."""
        return await self._collection.count_documents({"_id": note_id}, limit=1) > 0

    async def list_notes(
        self, account_id: int, page: int = 1, size: int = 20, order_by: SortOrder = SortOrder.DESC
    ) -> PaginationResult[Note]:
        """Get paginated notes owned by account, sorted by creation time."""
        query = {"account_id": account_id}
        total = await self._collection.count_documents(query)
        cursor = (
            self._collection.find(query)
            .sort([("created_at", order_by.direction), ("_id", order_by.direction)])
            .skip(page_offset(page, size))
            .limit(size)
        )
        items = await Note.list_cursor(cursor)
        return PaginationResult(total=total, items=items)

    async def delete_note(self, note_id: int) -> None:
        """Delete note together with all its comments."""
        deleted_comments = await self.core.services.comment.delete_comments_by_note(note_id)
        result = await self._collection.delete_one({"_id": note_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Note not found: {note_id}")
        logger.info("note_deleted", note_id=note_id, deleted_comments=deleted_comments)
