import hashlib
import secrets


def generate_reset_token() -> tuple[str, str]:
    """Return a random reset token and the SHA-256 digest that gets stored."""
    token = secrets.token_hex(32)
    return token, hash_token(token)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
