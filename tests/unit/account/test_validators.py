"""Tests for account validators."""

import pytest

from notethread.core.modules.account.validators import validate_account_name, validate_password
from notethread.errors import ValidationError


class TestValidatePassword:
    def test_valid_password_accepted(self):
        validate_password("secret1")
        validate_password("ab")

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError, match="at least 2 characters"):
            validate_password("a")

    def test_whitespace_rejected(self):
        with pytest.raises(ValidationError, match="whitespace"):
            validate_password("two words")


class TestValidateAccountName:
    def test_valid_name_accepted(self):
        validate_account_name("alice")

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            validate_account_name("")

    def test_whitespace_rejected(self):
        with pytest.raises(ValidationError, match="whitespace"):
            validate_account_name("alice smith")
