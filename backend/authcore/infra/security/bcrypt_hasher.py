# authcore/infra/security/bcrypt_hasher.py
from __future__ import annotations

from dataclasses import dataclass

import bcrypt

from authcore.services._shared.errors import HashingError, InvalidInputError
from authcore.services._shared.ports import MAX_PASSWORD_BYTES, PasswordHasher, password_fits

# Work factor used in production; tests may lower it (bcrypt minimum is 4).
DEFAULT_ROUNDS = 12


@dataclass(frozen=True, slots=True)
class BcryptPasswordHasher(PasswordHasher):
    """
    bcrypt adapter for :class:`PasswordHasher`.

    Inputs over 72 UTF-8 bytes are rejected rather than truncated, so two
    passwords sharing a 72-byte prefix can never verify against each other.

    :param rounds: log2 work factor passed to ``bcrypt.gensalt``.
    """

    rounds: int = DEFAULT_ROUNDS

    def hash(self, password: str) -> str:
        if not password_fits(password):
            raise InvalidInputError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
        except (ValueError, TypeError) as exc:
            raise HashingError(f"bcrypt hashing failed: {exc}") from exc

    def verify(self, password: str, hashed: str) -> bool:
        # nothing over the limit was ever hashed
        if not password_fits(password):
            return False
        # bcrypt.checkpw compares in constant time; it raises only on a bad hash.
        try:
            return bool(bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8")))
        except ValueError as exc:
            raise HashingError("Malformed password hash") from exc
