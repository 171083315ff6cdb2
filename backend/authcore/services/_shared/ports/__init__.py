"""
authcore.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that define the contracts
between the auth service and its infrastructure.

These ports decouple the service layer from concrete implementations of
hashing, token signing, session and code storage, user records, and mail.

Modules
-------
- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`: salted one-way hashing.

- :mod:`token_issuer`:
    Defines :class:`~.TokenIssuer`, :class:`~.TokenKind` and
    :class:`~.TokenClaims`: signed, expiring access/refresh tokens.

- :mod:`session_registry`:
    Defines :class:`~.SessionRegistry`: the single valid refresh token per user.

- :mod:`otp_store`:
    Defines :class:`~.OneTimeCodeStore`: destructive-read codes per email.

- :mod:`user_repository`:
    Defines :class:`~.UserRepository` and :class:`~.UserRecord`.

- :mod:`mailer`:
    Defines :class:`~.Mailer`: transactional email delivery.

Design Notes
------------
All these ports follow the *Dependency Inversion Principle (DIP)* to keep
the service layer independent from implementation details.
Concrete adapters (Redis, SQLAlchemy, bcrypt, PyJWT, SMTP) live under
``authcore.infra``; the in-memory doubles beside each port back unit tests
and single-process development.
"""

from __future__ import annotations

from .mailer import InMemoryMailer, Mailer, OutgoingEmail
from .otp_store import InMemoryOneTimeCodeStore, OneTimeCodeStore
from .password_hasher import MAX_PASSWORD_BYTES, PasswordHasher, password_fits
from .session_registry import InMemorySessionRegistry, SessionRegistry
from .token_issuer import TokenClaims, TokenIssuer, TokenKind
from .user_repository import InMemoryUserRepository, UserRecord, UserRepository

__all__ = [
    "MAX_PASSWORD_BYTES",
    "PasswordHasher",
    "password_fits",
    "TokenIssuer",
    "TokenKind",
    "TokenClaims",
    "SessionRegistry",
    "InMemorySessionRegistry",
    "OneTimeCodeStore",
    "InMemoryOneTimeCodeStore",
    "UserRepository",
    "UserRecord",
    "InMemoryUserRepository",
    "Mailer",
    "InMemoryMailer",
    "OutgoingEmail",
]
