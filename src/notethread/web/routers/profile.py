from fastapi import APIRouter
from pydantic import BaseModel, Field

from notethread.core.modules.account.models import AccountView
from notethread.web.deps import AppDep, AuthTokenDep
from notethread.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"])


class ChangePasswordRequest(BaseModel):
    """Request to change account password."""

    old_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=1, description="New password")


class UpdateProfileRequest(BaseModel):
    """Request to update public profile fields. Omitted fields stay unchanged."""

    nickname: str | None = Field(None, description="Display name shown next to comments")
    image: str | None = Field(None, description="Avatar URL")


@router.get(
    "/profile",
    summary="Get current account profile",
    description="Get the profile of the currently authenticated account.",
    operation_id="getCurrentProfile",
    responses={
        200: {"description": "Current account profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_profile(app: AppDep, auth_token: AuthTokenDep) -> AccountView:
    return await app.get_current_account(auth_token)


@router.patch(
    "/profile",
    summary="Update profile",
    description="Update nickname and avatar of the currently authenticated account.",
    operation_id="updateProfile",
    responses={
        200: {"description": "Updated account profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def update_profile(request: UpdateProfileRequest, app: AppDep, auth_token: AuthTokenDep) -> AccountView:
    return await app.update_profile(auth_token, request.nickname, request.image)


@router.post(
    "/profile/change-password",
    summary="Change password",
    description="Change the password for the currently authenticated account.",
    operation_id="changePassword",
    status_code=204,
    responses={
        204: {"description": "Password changed successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        400: {"model": ErrorResponse, "description": "Invalid current password or invalid new password"},
    },
)
async def change_password(request: ChangePasswordRequest, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.change_password(auth_token, request.old_password, request.new_password)
