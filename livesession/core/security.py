"""
Password hashing helpers.

Passwords are hashed with bcrypt directly (passlib is unmaintained
and broken with bcrypt>=4.1).
"""

import bcrypt

from livesession.core.config import settings


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
