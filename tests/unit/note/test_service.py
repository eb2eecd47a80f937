"""Tests for NoteService and note access."""

import pytest

from notethread.core.pagination import SortOrder
from notethread.errors import NotFoundError, ValidationError


class TestNoteService:
    """Tests for note storage."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, services, alice):
        """Test that notes are stored with sequential ids."""
        first = await services.note.create_note(alice.id, "first")
        second = await services.note.create_note(alice.id, "second")
        assert second.id == first.id + 1
        assert await services.note.get_note(first.id) == first

    @pytest.mark.asyncio
    async def test_empty_content_rejected(self, services, alice):
        with pytest.raises(ValidationError):
            await services.note.create_note(alice.id, "")

    @pytest.mark.asyncio
    async def test_has_note(self, services, note):
        """Test the existence check used by comment creation."""
        assert await services.note.has_note(note.id)
        assert not await services.note.has_note(999)

    @pytest.mark.asyncio
    async def test_get_missing_note(self, services):
        with pytest.raises(NotFoundError, match="Note not found"):
            await services.note.get_note(999)

    @pytest.mark.asyncio
    async def test_list_own_notes(self, services, alice, bob):
        """Test that listing returns the account's notes only."""
        await services.note.create_note(alice.id, "a1")
        await services.note.create_note(bob.id, "b1")
        await services.note.create_note(alice.id, "a2")

        result = await services.note.list_notes(alice.id, order_by=SortOrder.ASC)
        assert result.total == 2
        assert [item.content for item in result.items] == ["a1", "a2"]

    @pytest.mark.asyncio
    async def test_delete_removes_comments(self, services, note, alice, comments_collection):
        """Test that deleting a note deletes its comments."""
        top = await services.comment.create_comment(note.id, "top", account_id=alice.id)
        await services.comment.create_comment(note.id, "reply", parent_id=top.id, account_id=alice.id)

        await services.note.delete_note(note.id)

        assert not await services.note.has_note(note.id)
        assert comments_collection.docs == []

    @pytest.mark.asyncio
    async def test_delete_missing_note(self, services):
        with pytest.raises(NotFoundError):
            await services.note.delete_note(999)
