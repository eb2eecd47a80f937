from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from notethread.core.modules.note.models import Note
from notethread.core.pagination import PaginationResult, SortOrder
from notethread.web.deps import AppDep, AuthTokenDep
from notethread.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["notes"])


class CreateNoteRequest(BaseModel):
    """Request to create a new note."""

    content: str = Field(..., description="Note text (markdown)", min_length=1)


@router.get(
    "/notes",
    summary="List own notes",
    description="Get paginated notes of the current account.",
    operation_id="listNotes",
    responses={
        200: {"description": "Paginated list of notes"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_notes(
    app: AppDep,
    auth_token: AuthTokenDep,
    page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
    size: Annotated[int, Query(ge=1, description="Notes per page")] = 20,
    order_by: Annotated[SortOrder, Query(description="Sort direction on creation time")] = SortOrder.DESC,
) -> PaginationResult[Note]:
    return await app.get_own_notes(auth_token, page, size, order_by)


@router.post(
    "/notes",
    summary="Create note",
    description="Publish a new note owned by the current account.",
    operation_id="createNote",
    status_code=201,
    responses={
        201: {"description": "Note created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid note content"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_note(request: CreateNoteRequest, app: AppDep, auth_token: AuthTokenDep) -> Note:
    return await app.create_note(auth_token, request.content)


@router.get(
    "/notes/{note_id}",
    summary="Get note",
    description="Get a published note. No authentication required.",
    operation_id="getNote",
    responses={
        200: {"description": "Note details"},
        404: {"model": ErrorResponse, "description": "Note not found"},
    },
)
async def get_note(note_id: int, app: AppDep) -> Note:
    return await app.get_note(note_id)


@router.delete(
    "/notes/{note_id}",
    summary="Delete note",
    description="Delete a note together with all of its comments. Only the note owner can delete it.",
    operation_id="deleteNote",
    status_code=204,
    responses={
        204: {"description": "Note deleted successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the owner of this note"},
        404: {"model": ErrorResponse, "description": "Note not found"},
    },
)
async def delete_note(note_id: int, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_note(auth_token, note_id)
