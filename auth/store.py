"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as content/store.py).
UserStore is the repository; _row_to_user is the mapper.
Route, strategy and dependency code never touches SQL directly.

Soft delete:
  delete_user() stamps deleted_at instead of removing the row. Every default
  lookup (get_by_id, get_by_email, list_users) filters deleted_at IS NULL, so a
  soft-deleted account can neither log in nor pass the bearer strategy, even
  with a token that still verifies. restore_user() clears the stamp.

Security:
  All queries use bound parameters. No f-strings in SQL.
  email is UNIQUE across active and soft-deleted rows -- a deleted account's
  email stays reserved until the account is restored or purged out of band.

Layer rule: no imports from api/ or content/.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from auth.models import User
from core.config import get_settings
from core.db import make_engine, now_iso

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Column("deleted_at", String(32)),  # NULL = active
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore()
        user_id = store.create_user(User(name="Ada", email="ada@example.com", hashed_password=hash_password("s3cret")))
        user = store.get_by_email("ada@example.com")
        store.close()
    """

    def __init__(self, db_url: str | None = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> int:
        """Insert a new user and return its assigned database ID.

        Raises sqlalchemy.exc.IntegrityError if the email already exists.
        The signup route turns that into a 400.
        """
        stamp = now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _users.insert().values(
                    name=user.name,
                    email=user.email,
                    hashed_password=user.hashed_password,
                    created_at=stamp,
                    updated_at=stamp,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def delete_user(self, user_id: int) -> bool:
        """Soft-delete an active user. Returns True if a row was marked, False if not found."""
        stamp = now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _users.update()
                .where((_users.c.id == user_id) & (_users.c.deleted_at.is_(None)))
                .values(deleted_at=stamp, updated_at=stamp)
            )
            conn.commit()
        return result.rowcount > 0

    def restore_user(self, user_id: int) -> bool:
        """Clear deleted_at on a soft-deleted user. Returns True if a row was restored."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _users.update()
                .where((_users.c.id == user_id) & (_users.c.deleted_at.is_not(None)))
                .values(deleted_at=None, updated_at=now_iso())
            )
            conn.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Reads (active rows only unless include_deleted=True)
    # ------------------------------------------------------------------

    def get_by_id(self, user_id: int, include_deleted: bool = False) -> User | None:
        """Look up a user by primary key. Returns None if not found or soft-deleted."""
        stmt = _users.select().where(_users.c.id == user_id)
        if not include_deleted:
            stmt = stmt.where(_users.c.deleted_at.is_(None))
        with self.engine.connect() as conn:
            row = conn.execute(stmt).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_email(self, email: str, include_deleted: bool = False) -> User | None:
        """Look up a user by exact email (case-sensitive). Returns None if not found or soft-deleted."""
        stmt = _users.select().where(_users.c.email == email)
        if not include_deleted:
            stmt = stmt.where(_users.c.deleted_at.is_(None))
        with self.engine.connect() as conn:
            row = conn.execute(stmt).fetchone()
        return _row_to_user(row) if row is not None else None

    def list_users(self, include_deleted: bool = False) -> list[User]:
        """Return users ordered by id. Used by the admin CLI."""
        stmt = _users.select().order_by(_users.c.id)
        if not include_deleted:
            stmt = stmt.where(_users.c.deleted_at.is_(None))
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_user(r) for r in rows]

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )
