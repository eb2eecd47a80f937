from notethread.core.core import Service
from notethread.core.modules.account.models import Account
from notethread.core.modules.comment.models import Comment
from notethread.core.modules.note.models import Note
from notethread.core.modules.session.models import AuthToken
from notethread.errors import AccessDeniedError


class AccessService(Service):
    async def ensure_authenticated(self, auth_token: AuthToken) -> Account:
        """Ensure the account is authenticated."""
        return await self.core.services.session.get_authenticated_account(auth_token)

    async def resolve_caller(self, auth_token: AuthToken | None) -> Account | None:
        """Authenticated account for a public operation, None for guests."""
        if auth_token is None:
            return None
        return await self.core.services.session.get_authenticated_account(auth_token)

    async def ensure_admin(self, auth_token: AuthToken) -> Account:
        """Ensure the authenticated account is admin, raise AccessDeniedError if not."""
        account = await self.core.services.session.get_authenticated_account(auth_token)
        if account.name != "admin":
            raise AccessDeniedError("Admin privileges required")
        return account

    async def ensure_note_owner(self, auth_token: AuthToken, note_id: int) -> Note:
        """Ensure the authenticated account owns the note."""
        account = await self.core.services.session.get_authenticated_account(auth_token)
        note = await self.core.services.note.get_note(note_id)
        if note.account_id != account.id:
            raise AccessDeniedError(f"Access denied: account '{account.id}' does not own note '{note_id}'")
        return note

    async def ensure_comment_owner(self, auth_token: AuthToken, comment_id: int) -> Comment:
        """Ensure the authenticated account wrote the comment.

        Missing and not-owned comments raise the same NotFoundError.
        """
        account = await self.core.services.session.get_authenticated_account(auth_token)
        return await self.core.services.comment.get_owned_comment(comment_id, account.id)
