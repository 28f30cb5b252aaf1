"""
Password hashing helpers.

Meetings are owned through a password chosen at creation time and
every participant protects their vote with a password of their own.
Both are stored as PBKDF2‑HMAC‑SHA256 digests with a per‑password
random salt; the plain text is never persisted or returned.
"""

import hashlib
import hmac
import os
from typing import Optional

from .config import settings


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    A 16‑byte random salt is generated for each password.  The
    resulting string holds the iteration count, the salt and the
    digest separated by ``$`` (``<iterations>$<salt hex>$<hash hex>``)
    so that the work factor can be raised later without invalidating
    stored hashes.

    Parameters
    ----------
    password : str
        The plain text password to hash.
    iterations : Optional[int]
        PBKDF2 rounds.  Defaults to ``settings.password_iterations``.

    Returns
    -------
    str
        The encoded hash.
    """
    rounds = iterations or settings.password_iterations
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return f"{rounds}${salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored hash string.

    Recomputes the PBKDF2 digest with the stored salt and iteration
    count and compares it in constant time.  Malformed stored values
    never match.
    """
    try:
        rounds_str, salt_hex, hash_hex = hashed_password.split("$", 2)
        rounds = int(rounds_str)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    if rounds < 1:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(dk, stored_hash)
