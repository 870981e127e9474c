"""Bcrypt password hasher adapter."""

from __future__ import annotations

import bcrypt


class BcryptPasswordHasher:
    """Password hashing adapter using bcrypt."""

    def __init__(self, rounds: int = 12):
        self._rounds = rounds

    def hash_password(self, password: str) -> str:
        encoded = password.encode("utf-8")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False
