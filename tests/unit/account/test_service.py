"""Tests for AccountService and SessionService."""

from datetime import timedelta

import pytest

from notethread.core.modules.account.models import AccountView
from notethread.core.modules.session import service as session_service
from notethread.core.modules.session.models import AuthToken
from notethread.errors import AuthenticationError, NotFoundError, ValidationError
from notethread.utils import now


class TestAccountService:
    """Tests for account management."""

    @pytest.mark.asyncio
    async def test_admin_created_on_start(self, services):
        """Test that a default admin account exists after startup."""
        admin = services.account.get_account_by_name("admin")
        assert admin.id == 1
        assert services.account.verify_password("admin", "admin")

    @pytest.mark.asyncio
    async def test_create_account(self, services, alice):
        """Test that new accounts are cached with a hashed password."""
        assert services.account.get_account(alice.id) == alice
        assert alice.password_hash != "secret1"
        assert services.account.verify_password("alice", "secret1")
        assert not services.account.verify_password("alice", "wrong")

    @pytest.mark.asyncio
    async def test_nickname_defaults_to_name(self, bob):
        """Test that accounts without nickname display their name."""
        assert bob.nickname == "bob"

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, services, alice):
        """Test that login names are unique."""
        with pytest.raises(ValidationError, match="already exists"):
            await services.account.create_account("alice", "another")

    @pytest.mark.asyncio
    async def test_public_view(self, services, alice):
        """Test the public profile projection."""
        assert services.account.get_account_view(alice.id) == AccountView(
            id=alice.id, name="alice", nickname="Alice", image="https://img.test/alice.png"
        )
        assert services.account.get_account_view(None) is None
        assert services.account.get_account_view(999) is None

    @pytest.mark.asyncio
    async def test_update_profile(self, services, alice):
        """Test that only provided profile fields change."""
        updated = await services.account.update_profile(alice.id, nickname="Ally")
        assert updated.nickname == "Ally"
        assert updated.image == "https://img.test/alice.png"
        assert services.account.get_account(alice.id).nickname == "Ally"

    @pytest.mark.asyncio
    async def test_change_password(self, services, alice):
        """Test that the old password must match."""
        with pytest.raises(ValidationError, match="Invalid current password"):
            await services.account.change_password(alice.id, "wrong", "newpass")

        await services.account.change_password(alice.id, "secret1", "newpass")
        assert services.account.verify_password("alice", "newpass")

    @pytest.mark.asyncio
    async def test_unknown_account(self, services):
        """Test lookups of unknown accounts."""
        with pytest.raises(NotFoundError):
            services.account.get_account(999)
        with pytest.raises(NotFoundError):
            services.account.get_account_by_name("nobody")


class TestSessionService:
    """Tests for token sessions."""

    @pytest.mark.asyncio
    async def test_session_resolves_account(self, services, alice):
        """Test that a new token authenticates its account."""
        token = await services.session.create_session(alice.id)
        assert (await services.session.get_authenticated_account(token)).id == alice.id
        assert await services.session.is_auth_token_valid(token)

    @pytest.mark.asyncio
    async def test_unknown_token_rejected(self, services):
        """Test that random tokens are not valid."""
        assert not await services.session.is_auth_token_valid(AuthToken("nope"))
        with pytest.raises(AuthenticationError):
            await services.session.get_authenticated_account(AuthToken("nope"))

    @pytest.mark.asyncio
    async def test_invalidated_token_rejected(self, services, alice):
        """Test that logging out revokes the token."""
        token = await services.session.create_session(alice.id)
        await services.session.get_authenticated_account(token)
        await services.session.invalidate_session(token)
        assert not await services.session.is_auth_token_valid(token)

    @pytest.mark.asyncio
    async def test_cached_session_expires(self, services, alice, monkeypatch):
        """Test that a cached token stops authenticating once the session is older than its TTL."""
        token = await services.session.create_session(alice.id)
        assert await services.session.is_auth_token_valid(token)

        later = now() + timedelta(days=31)
        monkeypatch.setattr(session_service, "now", lambda: later)

        assert not await services.session.is_auth_token_valid(token)
        assert token not in services.session._authenticated_accounts

    @pytest.mark.asyncio
    async def test_stored_session_past_ttl_rejected(self, services, alice, database):
        """Test that a session document awaiting TTL cleanup does not authenticate."""
        token = await services.session.create_session(alice.id)
        database.get_collection("sessions").docs[0]["created_at"] = now() - timedelta(days=30, seconds=1)

        with pytest.raises(AuthenticationError):
            await services.session.get_authenticated_account(token)
