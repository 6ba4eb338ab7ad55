from passlib.context import CryptContext

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time bcrypt comparison; malformed hashes count as a mismatch."""
    try:
        return _pwd_context.verify(plain, hashed)
    except ValueError:
        return False
