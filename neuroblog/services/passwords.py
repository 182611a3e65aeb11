from passlib.context import CryptContext

pwd = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return pwd.hash(password)


def verify_and_upgrade(password: str, password_hash: str) -> tuple[bool, str | None]:
    """Check a password; the second item is a fresh hash when the stored one uses outdated parameters."""
    if not password_hash:
        return False, None
    return pwd.verify_and_update(password, password_hash)
