from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


DEFAULT_BALANCE = "$1,000.00"
DEFAULT_PICTURE = "http://placehold.it/32x32"
DEFAULT_AGE = 25
DEFAULT_EYE_COLOR = "brown"
DEFAULT_COMPANY = "Freelance"
DEFAULT_PHONE = "+1 (000) 000-0000"
DEFAULT_ADDRESS = "123 Main Street, Anytown, USA"
DEFAULT_FIRST_NAME = "User"
DEFAULT_LAST_NAME = "Anonymous"

# Keys a profile update may never overwrite.
IMMUTABLE_FIELDS = frozenset({"_id", "createdAt", "updatedAt"})


@dataclass
class UserDocument:
    """
    In-memory view of users.json.

    `revision` identifies the on-disk content the document was loaded from
    (None when no file existed yet).
    """

    users: list[dict[str, Any]] = field(default_factory=list)
    admins: list[dict[str, Any]] = field(default_factory=list)
    revision: str | None = None

    def to_json(self) -> dict[str, Any]:
        return {"users": self.users, "admins": self.admins}

    def find_user_by_email(self, email: str) -> dict[str, Any] | None:
        for user in self.users:
            if user.get("email") == email:
                return user
        return None

    def find_user_by_id(self, user_id: str) -> dict[str, Any] | None:
        for user in self.users:
            if user.get("_id") == user_id:
                return user
        return None

    def find_admin_by_email(self, email: str) -> dict[str, Any] | None:
        for admin in self.admins:
            if admin.get("email") == email:
                return admin
        return None


def redact(record: dict[str, Any]) -> dict[str, Any]:
    """Copy of `record` without the password hash."""
    return {k: v for k, v in record.items() if k != "password"}


def utc_now_iso() -> str:
    # Same shape as JavaScript's Date.toISOString(): 2024-01-31T12:00:00.000Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
