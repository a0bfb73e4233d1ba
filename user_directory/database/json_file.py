from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def read_json_bytes(path: str | Path) -> bytes | None:
    """
    Read the raw bytes of a JSON document.

    Returns None when the file does not exist; every other OSError propagates.
    """
    try:
        return Path(path).read_bytes()
    except FileNotFoundError:
        return None


def dump_json_bytes(data: Any) -> bytes:
    return json.dumps(data, ensure_ascii=False, indent=2).encode("utf-8")


def atomic_write_bytes(path: str | Path, payload: bytes) -> None:
    """
    Replace `path` with `payload` so readers see either the old or the new content.

    The payload goes to a temp file in the same directory (same filesystem), is
    fsync'ed, then moved over the target with os.replace().
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
