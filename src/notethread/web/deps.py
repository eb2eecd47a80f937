from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from notethread.app import App
from notethread.core.modules.comment.models import ClientInfo
from notethread.core.modules.session.models import AuthToken
from notethread.errors import AuthenticationError

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name="auth_token", auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_optional_auth_token(
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AuthToken | None:
    """Get auth token from Authorization Bearer header or cookie, None if absent or invalid."""

    # Check Bearer token first (preferred)
    if credentials and credentials.scheme == "Bearer":
        auth_token = AuthToken(credentials.credentials)
        if await app.is_auth_token_valid(auth_token):
            return auth_token

    # Fallback to cookie
    if token_cookie:
        auth_token = AuthToken(token_cookie)
        if await app.is_auth_token_valid(auth_token):
            return auth_token

    return None


async def get_auth_token(
    auth_token: Annotated[AuthToken | None, Depends(get_optional_auth_token)],
) -> AuthToken:
    """Get and validate auth token, raise if the caller is not authenticated."""
    if auth_token is None:
        raise AuthenticationError
    return auth_token


async def get_client_info(request: Request) -> ClientInfo:
    """Caller address and raw user agent, for naming guest commenters.

    Behind a trusted proxy the address is already resolved by ProxyHeadersMiddleware.
    """
    address = request.client.host if request.client else None
    return ClientInfo(address=address, user_agent=request.headers.get("user-agent"))


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
AuthTokenDep = Annotated[AuthToken, Depends(get_auth_token)]
OptionalAuthTokenDep = Annotated[AuthToken | None, Depends(get_optional_auth_token)]
ClientInfoDep = Annotated[ClientInfo, Depends(get_client_info)]
