"""Password hashing for staff and guest credentials, using bcrypt directly."""

import bcrypt

# bcrypt ignores everything past 72 bytes and bcrypt>=4.1 refuses longer input.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a plain-text password and return the bcrypt hash as text."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Check a plain-text password against a stored hash.

    Accounts without a password (walk-in guests) never verify.
    """
    if not hashed_password:
        return False
    return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
