"""Password hashing utilities."""

from passlib.context import CryptContext

# bcrypt_sha256 pre-hashes with SHA-256, so passwords past 72 bytes still count
pwd_context = CryptContext(schemes=["bcrypt_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)
