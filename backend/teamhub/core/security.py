"""Password hashing for the user directory."""

from passlib.context import CryptContext

password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return password_context.hash(password)


def password_matches(password: str, password_hash: str) -> bool:
    """False for malformed hashes instead of raising."""
    try:
        return password_context.verify(password, password_hash)
    except ValueError:
        return False
