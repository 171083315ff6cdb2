from __future__ import annotations

from typing import Protocol

# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def password_fits(password: str) -> bool:
    """Whether ``password`` encodes to at most :data:`MAX_PASSWORD_BYTES` UTF-8 bytes."""
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


class PasswordHasher(Protocol):
    """
    Port for one-way password hashing.

    ``hash`` MUST be salted (two calls on the same input yield different
    strings) and ``verify`` MUST compare in constant time. Passwords longer
    than :data:`MAX_PASSWORD_BYTES` are never truncated.
    """

    def hash(self, password: str) -> str:
        """
        Return a salted hash string.

        :raises InvalidInputError: If ``password`` exceeds the byte limit.
        :raises HashingError: On internal failure.
        """
        ...

    def verify(self, password: str, hashed: str) -> bool:
        """
        Check ``password`` against ``hashed``.

        :returns: ``False`` on mismatch or an over-long password (never
            raises for a wrong password).
        :raises HashingError: If ``hashed`` is malformed.
        """
        ...
