"""Password hashing strategies."""

from __future__ import annotations

import bcrypt

from newshub.domain.users.repositories import PasswordHasher
from newshub.domain.users.rules import PASSWORD_MAX_BYTES


class BcryptPasswordHasher(PasswordHasher):
    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        encoded = password.encode("utf-8")
        if len(encoded) > PASSWORD_MAX_BYTES:
            raise ValueError(f"password longer than {PASSWORD_MAX_BYTES} bytes")
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(encoded, salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        encoded = password.encode("utf-8")
        if len(encoded) > PASSWORD_MAX_BYTES:
            # never stored, older bcrypt releases would silently truncate
            return False
        try:
            return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
        except ValueError:
            # malformed stored hash
            return False
