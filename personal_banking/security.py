"""
Credential Hashing

Salted scrypt hashes for account passwords. A stored hash is self-describing
(``scrypt$n$r$p$salt$digest``) so cost parameters can change without
invalidating existing credentials. Plaintext passwords are never stored.
"""

import hashlib
import hmac
import secrets
from typing import Optional

from .config import get_config

SCHEME = "scrypt"


def generate_salt(num_bytes: Optional[int] = None) -> str:
    """Generate random salt for password hashing"""
    return secrets.token_hex(num_bytes or get_config().salt_bytes)


def _scrypt(password: str, salt: str, n: int, r: int, p: int) -> str:
    return hashlib.scrypt(
        password.encode(),
        salt=salt.encode(),
        n=n, r=r, p=p
    ).hex()


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Hash password with a fresh salt using scrypt"""
    config = get_config()
    salt = salt or generate_salt()
    digest = _scrypt(password, salt, config.scrypt_n, config.scrypt_r, config.scrypt_p)
    return f"{SCHEME}${config.scrypt_n}${config.scrypt_r}${config.scrypt_p}${salt}${digest}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify password against a stored hash in constant time"""
    try:
        scheme, n, r, p, salt, digest = stored_hash.split("$")
        if scheme != SCHEME:
            return False
        expected = _scrypt(password, salt, int(n), int(r), int(p))
    except ValueError:
        return False
    return hmac.compare_digest(expected, digest)
