import secrets
from datetime import datetime, timedelta
from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

from notethread.core.core import Service
from notethread.core.modules.account.models import Account
from notethread.core.modules.session.models import AuthToken, Session
from notethread.errors import AuthenticationError
from notethread.utils import now

SESSION_TTL = timedelta(days=30)


class SessionService(Service):
    """Service for managing account sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")
        # auth_token -> (account_id, created_at)
        self._authenticated_accounts: dict[AuthToken, tuple[int, datetime]] = {}

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        await self._collection.create_index([("account_id", 1)])
        # TTL index for automatic session cleanup
        await self._collection.create_index([("created_at", 1)], expireAfterSeconds=int(SESSION_TTL.total_seconds()))

    async def create_session(self, account_id: int) -> AuthToken:
        auth_token = AuthToken(secrets.token_urlsafe(32))
        new_session = Session(account_id=account_id, auth_token=auth_token)
        await self._collection.insert_one(new_session.to_mongo())
        return auth_token

    async def get_authenticated_account(self, auth_token: AuthToken) -> Account:
        # Cache holds the account id only, so profile edits are visible immediately
        cached = self._authenticated_accounts.get(auth_token)
        if cached is None:
            session = await self._collection.find_one({"auth_token": auth_token})
            if session is None:
                raise AuthenticationError("Invalid or expired session")
            cached = (int(session["account_id"]), session["created_at"])

        account_id, created_at = cached
        # The TTL monitor removes expired sessions lazily, and never from this cache
        if now() - created_at >= SESSION_TTL or not self.core.services.account.has_account(account_id):
            self._authenticated_accounts.pop(auth_token, None)
            raise AuthenticationError("Invalid or expired session")

        self._authenticated_accounts[auth_token] = cached
        return self.core.services.account.get_account(account_id)

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            await self.get_authenticated_account(auth_token)
        except AuthenticationError:
            return False
        return True

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Invalidate a session by removing it from the database."""
        self._authenticated_accounts.pop(auth_token, None)
        await self._collection.delete_one({"auth_token": auth_token})
