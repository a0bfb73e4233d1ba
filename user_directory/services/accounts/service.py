from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Protocol

from .errors import Conflict, InvalidInput, NotFound, Unauthorized
from .ids import IdentifierFactory
from .models import (
    DEFAULT_ADDRESS,
    DEFAULT_AGE,
    DEFAULT_BALANCE,
    DEFAULT_COMPANY,
    DEFAULT_EYE_COLOR,
    DEFAULT_FIRST_NAME,
    DEFAULT_LAST_NAME,
    DEFAULT_PHONE,
    DEFAULT_PICTURE,
    IMMUTABLE_FIELDS,
    redact,
    utc_now_iso,
)
from .password import password_too_long
from .store import JsonRecordStore

logger = logging.getLogger(__name__)


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...


class MediaDeleter(Protocol):
    def delete(self, public_id: str) -> bool: ...


def _given(value: Any) -> bool:
    return value is not None and value != ""


def _pick(profile: Mapping[str, Any], key: str, default: Any) -> Any:
    value = profile.get(key)
    return value if _given(value) else default


def build_name(raw: Any) -> dict[str, str]:
    """
    Normalize the `name` field of a registration.

    Accepts {"first", "last"} or a free-text string split on the first space.
    """
    if isinstance(raw, Mapping):
        first = raw.get("first")
        last = raw.get("last")
        return {
            "first": first if _given(first) else DEFAULT_FIRST_NAME,
            "last": last if _given(last) else DEFAULT_LAST_NAME,
        }
    if isinstance(raw, str) and raw.strip():
        first, _, last = raw.strip().partition(" ")
        return {"first": first, "last": last.strip() or DEFAULT_LAST_NAME}
    return {"first": DEFAULT_FIRST_NAME, "last": DEFAULT_LAST_NAME}


class AccountService:
    """
    Registration, login, profile and admin operations over a JsonRecordStore.

    Every operation re-reads the document; mutations run load-modify-save under
    the store lock. Records leave this class redacted (no `password`).
    """

    def __init__(
        self,
        store: JsonRecordStore,
        hasher: PasswordHasher,
        media_store: Optional[MediaDeleter] = None,
        ids: Optional[IdentifierFactory] = None,
        clock: Optional[Callable[[], str]] = None,
    ):
        self._store = store
        self._hasher = hasher
        self._media_store = media_store
        self._ids = ids or IdentifierFactory()
        self._now = clock or utc_now_iso

    def register(self, email: str | None, password: str | None, profile: Mapping[str, Any] | None = None) -> dict:
        if not email or not password:
            raise InvalidInput("Email and password are required")
        if password_too_long(password):
            raise InvalidInput("Password must be at most 72 bytes")
        profile = profile or {}
        password_hash = self._hasher.hash(password)

        with self._store.locked():
            document = self._store.load()
            if document.find_user_by_email(email) is not None:
                raise Conflict("User already exists")

            now = self._now()
            user = {
                "_id": self._ids.new_id(),
                "guid": self._ids.new_guid(),
                "isActive": True,
                "balance": _pick(profile, "balance", DEFAULT_BALANCE),
                "picture": _pick(profile, "picture", DEFAULT_PICTURE),
                "picturePublicId": _pick(profile, "picturePublicId", None),
                "age": _pick(profile, "age", DEFAULT_AGE),
                "eyeColor": _pick(profile, "eyeColor", DEFAULT_EYE_COLOR),
                "name": build_name(profile.get("name")),
                "company": _pick(profile, "company", DEFAULT_COMPANY),
                "email": email,
                "password": password_hash,
                "phone": _pick(profile, "phone", DEFAULT_PHONE),
                "address": _pick(profile, "address", DEFAULT_ADDRESS),
                "createdAt": now,
                "updatedAt": now,
            }
            document.users.append(user)
            self._store.save(document)

        logger.info("Registered user %s (%s)", user["_id"], email)
        return redact(user)

    def authenticate(self, email: str | None, password: str | None) -> tuple[dict, bool]:
        if not email or not password:
            raise InvalidInput("Email and password are required")

        document = self._store.load()

        admin = document.find_admin_by_email(email)
        if admin is not None and self._hasher.verify(password, admin.get("password") or ""):
            return redact(admin), True
        # An admin whose password did not match falls through to the user table.

        user = document.find_user_by_email(email)
        if user is None or not self._hasher.verify(password, user.get("password") or ""):
            logger.warning("Failed login for %s", email)
            raise Unauthorized("Invalid credentials")
        return redact(user), False

    def get_profile(self, email: str | None) -> dict:
        if not email:
            raise InvalidInput("Email parameter is required")
        user = self._store.load().find_user_by_email(email)
        if user is None:
            raise NotFound("User not found")
        return redact(user)

    def update_profile(self, email: str | None, updates: Mapping[str, Any] | None) -> dict:
        if not email or not updates or not isinstance(updates, Mapping):
            raise InvalidInput("Email and updates are required")

        changes = {k: v for k, v in updates.items() if k not in IMMUTABLE_FIELDS}
        if not changes:
            raise InvalidInput("No updatable fields given")
        if "password" in changes:
            new_password = changes["password"]
            if not isinstance(new_password, str) or not new_password:
                raise InvalidInput("Password must be a non-empty string")
            if password_too_long(new_password):
                raise InvalidInput("Password must be at most 72 bytes")
            changes["password"] = self._hasher.hash(new_password)
        if "email" in changes and (not isinstance(changes["email"], str) or not changes["email"]):
            raise InvalidInput("Email must be a non-empty string")

        with self._store.locked():
            document = self._store.load()
            user = document.find_user_by_email(email)
            if user is None:
                raise NotFound("User not found")

            new_email = changes.get("email")
            if new_email is not None and new_email != email:
                if document.find_user_by_email(new_email) is not None:
                    raise Conflict("Email already in use")

            user.update(changes)
            user["updatedAt"] = self._now()
            self._store.save(document)

        logger.info("Updated profile of user %s fields=%s", user.get("_id"), sorted(k for k in changes if k != "password"))
        return redact(user)

    def list_users(self) -> list[dict]:
        return [redact(user) for user in self._store.load().users]

    def set_user_active(self, user_id: str, is_active: bool) -> dict:
        if not isinstance(is_active, bool):
            raise InvalidInput("isActive must be a boolean")

        with self._store.locked():
            document = self._store.load()
            user = document.find_user_by_id(user_id)
            if user is None:
                raise NotFound("User not found")
            user["isActive"] = is_active
            user["updatedAt"] = self._now()
            self._store.save(document)

        logger.info("Set user %s isActive=%s", user_id, is_active)
        return redact(user)

    def delete_user(self, user_id: str) -> dict:
        with self._store.locked():
            document = self._store.load()
            user = document.find_user_by_id(user_id)
            if user is None:
                raise NotFound("User not found")
            document.users.remove(user)
            self._store.save(document)

        logger.info("Deleted user %s", user_id)
        self._release_picture(user)
        return redact(user)

    def _release_picture(self, user: Mapping[str, Any]) -> None:
        public_id = user.get("picturePublicId")
        if not public_id or self._media_store is None:
            return
        try:
            deleted = self._media_store.delete(public_id)
        except Exception as e:
            logger.warning("Media delete failed for %s (user %s): %s", public_id, user.get("_id"), e, exc_info=True)
            return
        if not deleted:
            logger.warning("Media delete reported failure for %s (user %s)", public_id, user.get("_id"))
