from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from user_directory.app.core.config import settings
from user_directory.app.core.paths import repo_root
from user_directory.database.paths import resolve_users_db_path
from user_directory.services.accounts import BcryptPasswordHasher, InvalidInput, JsonRecordStore
from user_directory.services.accounts.models import utc_now_iso
from user_directory.services.accounts.password import password_too_long

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def resolved_paths(*, db_path: str | Path | None = None) -> dict[str, Path]:
    return {
        "repo_root": repo_root(),
        "users_db": resolve_users_db_path(db_path),
    }


def ensure_database(*, db_path: str | Path | None = None) -> Path:
    store = JsonRecordStore(db_path=db_path)
    if store.ensure_exists():
        print(f"[OK] Created empty user document: {store.db_path}")
    else:
        print(f"[SKIP] User document already exists: {store.db_path}")
    return store.db_path


def add_admin(
    *,
    email: str,
    password: str,
    name: str | None = None,
    db_path: str | Path | None = None,
    rounds: int | None = None,
) -> dict:
    """Insert an admin record, or replace the password of an existing one."""
    if not email or not password:
        raise InvalidInput("Email and password are required")
    if password_too_long(password):
        raise InvalidInput("Password must be at most 72 bytes")

    hasher = BcryptPasswordHasher(rounds=rounds or settings.BCRYPT_ROUNDS)
    store = JsonRecordStore(db_path=db_path)
    with store.locked():
        document = store.load()
        admin = document.find_admin_by_email(email)
        if admin is None:
            admin = {"email": email, "role": "admin", "createdAt": utc_now_iso()}
            document.admins.append(admin)
        admin["password"] = hasher.hash(password)
        if name:
            admin["name"] = name
        admin["updatedAt"] = utc_now_iso()
        store.save(document)
    logger.info("Admin %s written to %s", email, store.db_path)
    return admin


def print_paths(*, db_path: str | Path | None = None) -> None:
    paths = resolved_paths(db_path=db_path)
    print("[PATHS]")
    print(f"- repo root:  {paths['repo_root']}")
    print(f"- users db:   {paths['users_db']}")


def run_server(*, host: str | None = None, port: int | None = None, reload: bool = False) -> None:
    try:
        import uvicorn
    except Exception as exc:  # pragma: no cover
        raise SystemExit(f"uvicorn is required to run the server: {exc}")

    uvicorn.run(
        "user_directory.app.main:app",
        host=host or settings.HOST,
        port=port or settings.PORT,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="User Directory API runtime")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="start the HTTP server")
    p_run.add_argument("--host", default=None)
    p_run.add_argument("--port", type=int, default=None)
    p_run.add_argument("--reload", action="store_true", help="development mode: auto reload")

    db_help = "path of users.json (relative paths resolve against the repo root; default settings.DATABASE_PATH)"

    p_init = sub.add_parser("init-db", help="create an empty user document if none exists")
    p_init.add_argument("--db-path", default=None, help=db_help)

    p_paths = sub.add_parser("paths", help="print the resolved paths")
    p_paths.add_argument("--db-path", default=None, help=db_help)

    p_admin = sub.add_parser("add-admin", help="seed an admin account (or reset its password)")
    p_admin.add_argument("--email", required=True)
    p_admin.add_argument("--password", required=True)
    p_admin.add_argument("--name", default=None)
    p_admin.add_argument("--db-path", default=None, help=db_help)

    p_hash = sub.add_parser("hash-password", help="print a bcrypt hash for a password")
    p_hash.add_argument("password")

    return parser


def main(argv: list[str] | None = None) -> None:
    configure_logging()

    # `python -m user_directory` with no arguments starts the server.
    if argv is None and len(sys.argv) == 1:
        run_server()
        return

    args = build_parser().parse_args(argv)

    if args.cmd == "run":
        run_server(host=args.host, port=args.port, reload=bool(args.reload))
        return

    if args.cmd == "init-db":
        ensure_database(db_path=args.db_path)
        print_paths(db_path=args.db_path)
        return

    if args.cmd == "paths":
        print_paths(db_path=args.db_path)
        return

    if args.cmd == "add-admin":
        try:
            add_admin(email=args.email, password=args.password, name=args.name, db_path=args.db_path)
        except InvalidInput as e:
            raise SystemExit(f"[ERROR] {e.message}")
        print(f"[OK] Admin ready: {args.email}")
        return

    if args.cmd == "hash-password":
        print(BcryptPasswordHasher(rounds=settings.BCRYPT_ROUNDS).hash(args.password))
        return
