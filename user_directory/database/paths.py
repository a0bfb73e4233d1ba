from __future__ import annotations

from pathlib import Path

from user_directory.app.core.config import settings
from user_directory.app.core.paths import resolve_repo_path


def resolve_users_db_path(db_path: str | Path | None = None) -> Path:
    """
    Resolve the users.json path consistently across runtime + scripts.

    - When db_path is relative, it's resolved relative to repo root (the parent of `user_directory/`).
    """
    raw = db_path if db_path is not None else settings.DATABASE_PATH
    p = Path(raw)
    if p.is_absolute():
        return p

    return resolve_repo_path(p)
