from __future__ import annotations

import hashlib
import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from user_directory.database.json_file import atomic_write_bytes, dump_json_bytes, read_json_bytes
from user_directory.database.paths import resolve_users_db_path

from .errors import StaleDocument, StorageUnavailable
from .models import UserDocument

logger = logging.getLogger(__name__)


def _revision_of(raw: bytes | None) -> str | None:
    if raw is None:
        return None
    return hashlib.sha256(raw).hexdigest()


class JsonRecordStore:
    """
    The whole user table as one JSON document: `{"users": [...], "admins": [...]}`.

    There is no partial update; callers load, modify and save the full document
    inside `locked()` so concurrent writers in this process are serialized.
    `save()` additionally refuses a document whose base revision no longer
    matches the file (another process wrote in between).
    """

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = resolve_users_db_path(db_path)
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def _read_raw(self) -> bytes | None:
        try:
            return read_json_bytes(self.db_path)
        except OSError as e:
            raise StorageUnavailable(f"Cannot read {self.db_path}: {e}") from e

    def load(self) -> UserDocument:
        raw = self._read_raw()
        if raw is None:
            return UserDocument(users=[], admins=[], revision=None)

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("User document %s is not valid JSON: %s", self.db_path, e)
            raise StorageUnavailable(f"Corrupt user document {self.db_path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageUnavailable(f"Corrupt user document {self.db_path}: top level is not an object")

        users = data.get("users")
        admins = data.get("admins")
        if users is None:
            users = []
        if admins is None:
            admins = []
        if not isinstance(users, list) or not isinstance(admins, list):
            raise StorageUnavailable(f"Corrupt user document {self.db_path}: users/admins must be arrays")

        return UserDocument(users=users, admins=admins, revision=_revision_of(raw))

    def save(self, document: UserDocument) -> None:
        payload = dump_json_bytes(document.to_json())
        with self._lock:
            current = _revision_of(self._read_raw())
            if current != document.revision:
                logger.warning(
                    "Refusing stale save of %s (base=%s current=%s)",
                    self.db_path,
                    document.revision,
                    current,
                )
                raise StaleDocument()
            try:
                atomic_write_bytes(self.db_path, payload)
            except OSError as e:
                logger.error("Failed to write user document %s: %s", self.db_path, e)
                raise StorageUnavailable(f"Cannot write {self.db_path}: {e}") from e
        document.revision = _revision_of(payload)

    def ensure_exists(self) -> bool:
        """Create an empty document if none exists. Returns True when a file was created."""
        with self._lock:
            document = self.load()
            if document.revision is not None:
                return False
            self.save(document)
            return True
