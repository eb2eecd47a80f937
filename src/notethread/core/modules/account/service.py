from typing import Any

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from notethread.core.core import Service
from notethread.core.modules.account.models import Account, AccountView
from notethread.core.modules.account.validators import validate_account_name, validate_password
from notethread.core.modules.counter.models import CounterType
from notethread.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class AccountService(Service):
    """Manages accounts with in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("accounts")
        self._accounts: dict[int, Account] = {}

    def get_account(self, account_id: int) -> Account:
        """Get account by ID from cache."""
        if account_id not in self._accounts:
            raise NotFoundError(f"Account '{account_id}' not found")
        return self._accounts[account_id]

    def get_account_by_name(self, name: str) -> Account:
        """Get account by login name from cache."""
        account = next((a for a in self._accounts.values() if a.name == name), None)
        if account is None:
            raise NotFoundError(f"Account '{name}' not found")
        return account

    def get_account_view(self, account_id: int | None) -> AccountView | None:
        """Public profile for a comment author, None for guests and removed accounts."""
        if account_id is None or account_id not in self._accounts:
            return None
        return AccountView.from_domain(self._accounts[account_id])

    def has_account(self, account_id: int) -> bool:
        """Check if account exists by ID."""
        return account_id in self._accounts

    def has_name(self, name: str) -> bool:
        """Check if login name is taken."""
        return any(account.name == name for account in self._accounts.values())

    def get_all_accounts(self) -> list[Account]:
        """Get all accounts from cache."""
        return list(self._accounts.values())

    async def create_account(self, name: str, password: str, nickname: str = "", image: str = "") -> Account:
        """Create account with hashed password."""
        validate_account_name(name)
        if self.has_name(name):
            raise ValidationError(f"Account '{name}' already exists")

        validate_password(password)
        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        account_id = await self.core.services.counter.get_next_sequence(CounterType.ACCOUNT)
        account = Account(id=account_id, name=name, nickname=nickname or name, image=image, password_hash=password_hash)
        await self._collection.insert_one(account.to_mongo())
        logger.info("account_created", account_id=account_id, name=name)
        return await self.update_account_cache(account_id)

    def verify_password(self, name: str, password: str) -> bool:
        """Verify password against stored hash."""
        account = next((a for a in self._accounts.values() if a.name == name), None)
        if account is None:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), account.password_hash.encode("utf-8"))

    async def change_password(self, account_id: int, old_password: str, new_password: str) -> None:
        """Change account password after verifying current password."""
        account = self.get_account(account_id)
        if not bcrypt.checkpw(old_password.encode("utf-8"), account.password_hash.encode("utf-8")):
            raise ValidationError("Invalid current password")

        validate_password(new_password)
        password_hash = bcrypt.hashpw(new_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        await self._collection.update_one({"_id": account_id}, {"$set": {"password_hash": password_hash}})
        await self.update_account_cache(account_id)

    async def update_profile(self, account_id: int, nickname: str | None = None, image: str | None = None) -> Account:
        """Update public profile fields. None leaves a field unchanged."""
        self.get_account(account_id)
        changes: dict[str, str] = {}
        if nickname is not None:
            changes["nickname"] = nickname
        if image is not None:
            changes["image"] = image
        if changes:
            await self._collection.update_one({"_id": account_id}, {"$set": changes})
        return await self.update_account_cache(account_id)

    async def ensure_admin_account_exists(self) -> None:
        """Create default admin account if not exists."""
        if not self.has_name("admin"):
            await self.create_account("admin", "admin")

    async def update_all_accounts_cache(self) -> None:
        """Reload all accounts cache from database."""
        accounts = await Account.list_cursor(self._collection.find())
        self._accounts = {account.id: account for account in accounts}

    async def update_account_cache(self, account_id: int) -> Account:
        """Reload a specific account cache from database."""
        account = await self._collection.find_one({"_id": account_id})
        if account is None:
            raise NotFoundError(f"Account '{account_id}' not found")
        self._accounts[account_id] = Account.model_validate(account)
        return self._accounts[account_id]

    async def on_start(self) -> None:
        """Initialize indexes, cache, and admin account."""
        await self._collection.create_index([("name", 1)], unique=True)
        await self.update_all_accounts_cache()
        await self.ensure_admin_account_exists()
        logger.debug("account_service_started", account_count=len(self._accounts))
