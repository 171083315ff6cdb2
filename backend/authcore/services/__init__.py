"""Service layer public API.

Re-exports
----------
- Auth service (from ``authcore.services.auth``)
    * :class:`AuthService`
    * :class:`AuthSettings`
"""

from __future__ import annotations

from .auth import AuthService, AuthSettings

__all__ = ["AuthService", "AuthSettings"]
