"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from filmbox.core.config import settings

# Bcrypt cost (rounds).
BCRYPT_ROUNDS = 10

PASSWORD_MIN_LEN = 8
# Symbols accepted by the "special character" password rule.
PASSWORD_SYMBOLS = frozenset("!@#$%^&*()_+-=[]{};':\"\\|,.<>/?")


def password_problem(password: str) -> str | None:
    """
    Return the message for the first password complexity rule that fails, or None.

    Rules are checked in order: length, digit, uppercase letter, symbol.
    """
    if len(password) < PASSWORD_MIN_LEN:
        return f"Password must be at least {PASSWORD_MIN_LEN} characters long"
    if not any("0" <= ch <= "9" for ch in password):
        return "Password must contain at least one digit"
    if not any("A" <= ch <= "Z" for ch in password):
        return "Password must contain at least one uppercase letter"
    if not any(ch in PASSWORD_SYMBOLS for ch in password):
        return "Password must contain at least one special character"
    return None


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(user_id: int, name: str, email: str) -> str:
    """Create a JWT carrying id, name and email, valid for JWT_EXPIRE_MINUTES."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "id": user_id,
        "name": name,
        "email": email,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (id, name, email, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp"]},
    )
