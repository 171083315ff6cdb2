"""Named key namespaces for the key-value store."""

from __future__ import annotations

from enum import Enum


class KeyNamespace(str, Enum):
    """
    Every key written to the key-value store lives under one of these prefixes.

    :cvar EMAIL_VERIFICATION: One-time codes proving control of an address.
    :cvar PASSWORD_RESET: Opaque password-reset tokens.
    :cvar REFRESH_TOKEN: The single valid refresh token per user.
    """

    EMAIL_VERIFICATION = "email_otp"
    PASSWORD_RESET = "password_reset_token"
    REFRESH_TOKEN = "user_refresh_token"

    def key(self, suffix: str) -> str:
        """
        Build the composite store key ``<namespace>:<suffix>``.

        :param suffix: User id or normalized email.
        :type suffix: str
        :returns: Namespaced key.
        :rtype: str
        """
        return f"{self.value}:{suffix}"
