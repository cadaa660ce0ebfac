"""Password hashing with passlib."""

from typing import Optional, Tuple

from passlib.context import CryptContext

# bcrypt_sha256 pre-hashes with SHA-256, so passwords past bcrypt's 72 bytes still count
pwd_context = CryptContext(schemes=["bcrypt_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def verify_and_upgrade(plain_password: str, hashed_password: str) -> Tuple[bool, Optional[str]]:
    """Check a password; the second item is a replacement hash when the stored one is outdated."""
    return pwd_context.verify_and_update(plain_password, hashed_password)
