"""Comment-related API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from notethread.core.modules.comment.models import CommentThread, CommentView, DeleteCommentResult
from notethread.core.pagination import PaginationResult, SortOrder
from notethread.web.deps import AppDep, AuthTokenDep, ClientInfoDep, OptionalAuthTokenDep
from notethread.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["comments"])


class CreateCommentRequest(BaseModel):
    """Request to create a new comment or reply."""

    content: str = Field(..., description="The comment text", min_length=1)
    parent_id: int | None = Field(
        None, description="Comment to reply to. A reply to a reply joins the same thread."
    )


class UpdateCommentRequest(BaseModel):
    """Request to edit a comment."""

    content: str = Field(..., description="New comment text", min_length=1)


@router.get(
    "/notes/{note_id}/comments",
    summary="List note comments",
    description=(
        "Get paginated comment threads for a note. Only top-level comments are counted and paginated; "
        "each includes all of its replies, oldest first. No authentication required."
    ),
    operation_id="listComments",
    responses={
        200: {"description": "Paginated list of comment threads"},
    },
)
async def list_comments(
    note_id: int,
    app: AppDep,
    page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
    size: Annotated[int, Query(ge=1, description="Top-level comments per page")] = 20,
    order_by: Annotated[SortOrder, Query(description="Sort direction of threads on creation time")] = SortOrder.DESC,
) -> PaginationResult[CommentThread]:
    return await app.get_note_comments(note_id, page, size, order_by)


@router.post(
    "/notes/{note_id}/comments",
    summary="Create comment",
    description=(
        "Add a comment or reply to a note. Anonymous callers comment as a guest with a generated name. "
        "Mentioning the AI assistant asks it to answer in a follow-up comment."
    ),
    operation_id="createComment",
    status_code=201,
    responses={
        201: {"description": "Comment created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid comment content"},
        404: {"model": ErrorResponse, "description": "Note or parent comment not found"},
    },
)
async def create_comment(
    note_id: int,
    request: CreateCommentRequest,
    app: AppDep,
    auth_token: OptionalAuthTokenDep,
    client: ClientInfoDep,
) -> CommentView:
    return await app.create_comment(auth_token, client, note_id, request.content, request.parent_id)


@router.patch(
    "/comments/{comment_id}",
    summary="Update comment",
    description="Edit the text of a comment. Only the account that wrote it can edit it.",
    operation_id="updateComment",
    responses={
        200: {"description": "Comment updated successfully"},
        400: {"model": ErrorResponse, "description": "Invalid comment content"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Comment not found or no permission"},
    },
)
async def update_comment(
    comment_id: int, request: UpdateCommentRequest, app: AppDep, auth_token: AuthTokenDep
) -> CommentView:
    return await app.update_comment(auth_token, comment_id, request.content)


@router.delete(
    "/comments/{comment_id}",
    summary="Delete comment",
    description="Delete a comment and all of its replies. Only the account that wrote it can delete it.",
    operation_id="deleteComment",
    responses={
        200: {"description": "Comment deleted successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Comment not found or no permission"},
    },
)
async def delete_comment(comment_id: int, app: AppDep, auth_token: AuthTokenDep) -> DeleteCommentResult:
    await app.delete_comment(auth_token, comment_id)
    return DeleteCommentResult(success=True)
