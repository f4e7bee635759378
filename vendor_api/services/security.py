"""Password hashing for vendor accounts."""

import bcrypt


def hash_password(password: str) -> str:
    """bcrypt hash of a password, as text for storage."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())
