from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from notethread.config import Config
from notethread.core.core import Core
from notethread.core.modules.account.models import Account, AccountView
from notethread.core.modules.comment.models import ClientInfo, CommentThread, CommentView
from notethread.core.modules.note.models import Note
from notethread.core.modules.session.models import AuthToken
from notethread.core.pagination import PaginationResult, SortOrder
from notethread.errors import AuthenticationError


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        """Check if authentication token is valid."""
        return await self._core.services.session.is_auth_token_valid(auth_token)

    # === Auth and accounts ===
    async def login(self, name: str, password: str) -> AuthToken:
        """Authenticate account and create session."""
        if not self._core.services.account.verify_password(name, password):
            raise AuthenticationError
        account = self._resolve_account(name)
        return await self._core.services.session.create_session(account.id)

    async def logout(self, auth_token: AuthToken) -> None:
        """Invalidate session."""
        await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.session.invalidate_session(auth_token)

    async def get_current_account(self, auth_token: AuthToken) -> AccountView:
        """Get current authenticated account profile."""
        account = await self._core.services.access.ensure_authenticated(auth_token)
        return AccountView.from_domain(account)

    async def update_profile(self, auth_token: AuthToken, nickname: str | None, image: str | None) -> AccountView:
        """Update nickname and avatar of current account."""
        current = await self._core.services.access.ensure_authenticated(auth_token)
        account = await self._core.services.account.update_profile(current.id, nickname, image)
        return AccountView.from_domain(account)

    async def change_password(self, auth_token: AuthToken, old_password: str, new_password: str) -> None:
        """Change password for current account."""
        account = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.account.change_password(account.id, old_password, new_password)

    async def get_all_accounts(self, auth_token: AuthToken) -> list[AccountView]:
        """Get all accounts (requires authentication)."""
        await self._core.services.access.ensure_authenticated(auth_token)
        return [AccountView.from_domain(account) for account in self._core.services.account.get_all_accounts()]

    async def create_account(
        self, auth_token: AuthToken, name: str, password: str, nickname: str = "", image: str = ""
    ) -> AccountView:
        """Create a new account (admin only)."""
        await self._core.services.access.ensure_admin(auth_token)
        account = await self._core.services.account.create_account(name, password, nickname, image)
        return AccountView.from_domain(account)

    # === Notes ===
    async def create_note(self, auth_token: AuthToken, content: str) -> Note:
        """Create note owned by current account."""
        account = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.note.create_note(account.id, content)

    async def get_note(self, note_id: int) -> Note:
        """Get published note (public)."""
        return await self._core.services.note.get_note(note_id)

    async def get_own_notes(
        self, auth_token: AuthToken, page: int = 1, size: int = 20, order_by: SortOrder = SortOrder.DESC
    ) -> PaginationResult[Note]:
        """Get paginated notes of current account."""
        account = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.note.list_notes(account.id, page, size, order_by)

    async def delete_note(self, auth_token: AuthToken, note_id: int) -> None:
        """Delete note and its comments (owner only)."""
        await self._core.services.access.ensure_note_owner(auth_token, note_id)
        await self._core.services.note.delete_note(note_id)

    # === Comments ===
    async def create_comment(
        self,
        auth_token: AuthToken | None,
        client: ClientInfo,
        note_id: int,
        content: str,
        parent_id: int | None = None,
    ) -> CommentView:
        """Add comment or reply to note (public, guests allowed)."""
        account = await self._core.services.access.resolve_caller(auth_token)
        comment = await self._core.services.comment.create_comment(
            note_id,
            content,
            parent_id=parent_id,
            account_id=account.id if account else None,
            client=client,
        )
        return self._core.services.comment.to_view(comment)

    async def get_note_comments(
        self, note_id: int, page: int = 1, size: int = 20, order_by: SortOrder = SortOrder.DESC
    ) -> PaginationResult[CommentThread]:
        """Get paginated comment threads for note (public)."""
        return await self._core.services.comment.list_comments(note_id, page, size, order_by)

    async def update_comment(self, auth_token: AuthToken, comment_id: int, content: str) -> CommentView:
        """Edit comment content (author only)."""
        comment = await self._core.services.access.ensure_comment_owner(auth_token, comment_id)
        updated = await self._core.services.comment.update_comment(comment, content)
        return self._core.services.comment.to_view(updated)

    async def delete_comment(self, auth_token: AuthToken, comment_id: int) -> None:
        """Delete comment and its replies (author only)."""
        comment = await self._core.services.access.ensure_comment_owner(auth_token, comment_id)
        await self._core.services.comment.delete_comment(comment.id)

    # === Private resolver methods ===
    def _resolve_account(self, name: str) -> Account:
        """Resolve login name to Account object. Raises NotFoundError if not found."""
        return self._core.services.account.get_account_by_name(name)
