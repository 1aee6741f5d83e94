#!/usr/bin/env python3
"""
Inkwell -- admin command line.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080 --reload
  python main.py users list
  python main.py users list --all
  python main.py users delete ada@example.com
  python main.py users restore ada@example.com
  python main.py authors delete 3
  python main.py authors restore 3
  python main.py posts delete 7
  python main.py posts restore 7

Deletes are soft: the row is stamped with deleted_at and hidden from the API,
and `restore` brings it back.

Environment variables (or .env):
  SECRET_KEY    Required. HS256 signing secret, at least 32 characters.
  DATABASE_URL  SQLAlchemy URL. Defaults to inkwell.db next to the code.
  PORT          Port for `serve` when --port is not given. Defaults to 3000.
"""

import argparse
import sys

from auth.store import UserStore
from content.store import ContentStore
from core.config import get_settings


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "asgi:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )
    return 0


def _users(args: argparse.Namespace) -> int:
    store = UserStore(get_settings().database_url)
    try:
        if args.action == "list":
            users = store.list_users(include_deleted=args.all)
            if not users:
                print("  No users.")
            for u in users:
                state = f"deleted {u.deleted_at}" if u.deleted_at else "active"
                print(f"  {u.id:>5}  {u.email:<40} {u.name:<30} {state}")
            return 0

        user = store.get_by_email(args.email, include_deleted=True)
        if user is None:
            print(f"  [!] No user with email '{args.email}'.")
            return 1
        if args.action == "delete":
            changed = store.delete_user(user.id)
        else:
            changed = store.restore_user(user.id)
        return _report("User", args.email, args.action, changed)
    finally:
        store.close()


def _content(args: argparse.Namespace) -> int:
    store = ContentStore(get_settings().database_url)
    try:
        if args.entity == "authors":
            op = store.delete_author if args.action == "delete" else store.restore_author
            label = "Author"
        else:
            op = store.delete_post if args.action == "delete" else store.restore_post
            label = "Post"
        return _report(label, str(args.id), args.action, op(args.id))
    finally:
        store.close()


def _report(label: str, key: str, action: str, changed: bool) -> int:
    if changed:
        print(f"  {label} {key} {action}d.")
        return 0
    already = "deleted" if action == "delete" else "active"
    print(f"  [!] {label} {key} not found or already {already}.")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inkwell",
        description="Inkwell admin commands: run the API server, soft-delete and restore records.",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API with uvicorn.")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST setting).")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: PORT setting).")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development).")
    serve.set_defaults(func=_serve)

    users = sub.add_parser("users", help="List, soft-delete or restore accounts.")
    users_sub = users.add_subparsers(dest="action", required=True)
    users_list = users_sub.add_parser("list", help="List accounts.")
    users_list.add_argument("--all", action="store_true", help="Include soft-deleted accounts.")
    for action in ("delete", "restore"):
        p = users_sub.add_parser(action, help=f"{action.capitalize()} an account by email.")
        p.add_argument("email")
    users.set_defaults(func=_users)

    for entity in ("authors", "posts"):
        ent = sub.add_parser(entity, help=f"Soft-delete or restore {entity}.")
        ent_sub = ent.add_subparsers(dest="action", required=True)
        for action in ("delete", "restore"):
            p = ent_sub.add_parser(action, help=f"{action.capitalize()} by id.")
            p.add_argument("id", type=int)
        ent.set_defaults(func=_content, entity=entity)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
