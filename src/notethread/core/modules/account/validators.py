from notethread.errors import ValidationError


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Minimum length of 2 characters

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < 2:
        raise ValidationError("Password must be at least 2 characters long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")


def validate_account_name(name: str) -> None:
    """Validate login name: non-empty, no whitespace."""
    if not name:
        raise ValidationError("Account name cannot be empty")

    if any(char.isspace() for char in name):
        raise ValidationError("Account name cannot contain whitespace characters")
