"""
Geoturismo Backend — Credential Hashing
=========================================

What:  bcrypt hashing and verification for user passwords.
How:   `bcrypt.gensalt()` produces a fresh salt per password; the salt and
       work factor are embedded in the stored hash, so verification needs
       only the plaintext and the stored value.
"""

import bcrypt

from geoturismo.config import settings


def hash_password(plaintext: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    hashed = bcrypt.hashpw(plaintext.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plaintext: str, stored_hash: str) -> bool:
    """True when `plaintext` matches `stored_hash`; malformed hashes never match."""
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        return False
