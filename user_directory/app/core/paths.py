from __future__ import annotations

from pathlib import Path


def package_root() -> Path:
    # user_directory/app/core/paths.py -> user_directory
    return Path(__file__).resolve().parents[2]


def repo_root() -> Path:
    return package_root().parent


def resolve_repo_path(path: str | Path) -> Path:
    """
    Resolve a path relative to the repository root (the parent of `user_directory/`).

    This is the base for runtime configuration paths such as
    settings.DATABASE_PATH (default: data/users.json).
    """
    p = Path(path)
    if p.is_absolute():
        return p
    return repo_root() / p
