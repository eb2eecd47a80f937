from fastapi import APIRouter
from pydantic import BaseModel, Field

from notethread.core.modules.account.models import AccountView
from notethread.web.deps import AppDep, AuthTokenDep
from notethread.web.openapi import ErrorResponse

router = APIRouter(tags=["accounts"])


class CreateAccountRequest(BaseModel):
    """Request to create a new account."""

    name: str = Field(..., min_length=1, description="Login name for the new account")
    password: str = Field(..., min_length=1, description="Password for the new account")
    nickname: str = Field("", description="Display name, defaults to the login name")
    image: str = Field("", description="Avatar URL")


@router.get(
    "/accounts",
    summary="List all accounts",
    description="Get public profiles of all accounts.",
    operation_id="listAccounts",
    responses={
        200: {"description": "List of all accounts"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_accounts(app: AppDep, auth_token: AuthTokenDep) -> list[AccountView]:
    return await app.get_all_accounts(auth_token)


@router.post(
    "/accounts",
    summary="Create new account",
    description="Create a new account. Only accessible by the admin account.",
    operation_id="createAccount",
    status_code=201,
    responses={
        201: {"description": "Account created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid request or name already taken"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def create_account(create_data: CreateAccountRequest, app: AppDep, auth_token: AuthTokenDep) -> AccountView:
    return await app.create_account(
        auth_token, create_data.name, create_data.password, create_data.nickname, create_data.image
    )
