from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from user_directory.services.accounts import AccountService, Forbidden, Unauthorized

logger = logging.getLogger(__name__)

ADMIN_EMAIL_HEADER = "X-Admin-Email"
ADMIN_PASSWORD_HEADER = "X-Admin-Password"


class AccessPolicy(Protocol):
    name: str

    def check(self, headers: Mapping[str, str], accounts: AccountService) -> dict[str, Any] | None:
        """Return the acting admin (or None when not tracked); raise to deny."""
        ...


class OpenAccessPolicy:
    """Admin routes are reachable without credentials."""

    name = "open"

    def check(self, headers: Mapping[str, str], accounts: AccountService) -> dict[str, Any] | None:  # noqa: ARG002
        return None


class AdminCredentialsPolicy:
    """Admin routes require X-Admin-Email / X-Admin-Password of an admin record."""

    name = "credentials"

    def check(self, headers: Mapping[str, str], accounts: AccountService) -> dict[str, Any] | None:
        email = (headers.get(ADMIN_EMAIL_HEADER) or "").strip()
        password = headers.get(ADMIN_PASSWORD_HEADER) or ""
        if not email or not password:
            raise Unauthorized("Admin credentials required")

        record, is_admin = accounts.authenticate(email, password)
        if not is_admin:
            logger.warning("Non-admin %s attempted an admin operation", email)
            raise Forbidden("Admin privileges required")
        return record


def build_access_policy(mode: str) -> AccessPolicy:
    value = (mode or "").strip().lower()
    if value == "credentials":
        return AdminCredentialsPolicy()
    if value != "open":
        raise ValueError(f"Unknown ADMIN_ACCESS_MODE: {mode!r} (expected 'open' or 'credentials')")
    logger.warning("ADMIN_ACCESS_MODE=open: admin routes accept unauthenticated requests")
    return OpenAccessPolicy()
