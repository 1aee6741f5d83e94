"""
content/store.py -- SQLAlchemy-backed persistence layer for authors and posts.

Uses SQLAlchemy Core (not ORM) so the domain dataclasses in content/models.py
remain the authoritative domain representation.

Pattern: Repository + Data Mapper. ContentStore is the repository (one clean
interface per entity). The _row_to_* functions are the mappers (they translate
raw DB rows into domain dataclasses). Route handlers never touch SQL directly.

Soft delete: delete_* stamps deleted_at; every default read filters
deleted_at IS NULL; restore_* clears the stamp. Nothing here removes rows.

Security: all queries use bound parameters. Column names for updates come
from fixed whitelists, never from request input.

Usage:
    store = ContentStore()                               # DATABASE_URL default
    store = ContentStore("postgresql://user:pw@host/db") # PostgreSQL
    author_id = store.create_author(Author(name="Ursula"))
    store.create_post(Post(title="Hello", author_id=author_id))
    posts = store.list_posts_with_author()
    store.close()
"""

from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, and_, select
from sqlalchemy.engine import Engine

from content.models import Author, Post
from core.config import get_settings
from core.db import make_engine, now_iso

# Fields PUT /authors/{id} and PUT /posts/{id} may overwrite.
_AUTHOR_FIELDS = frozenset({"name", "bio", "birthdate"})
_POST_FIELDS = frozenset({"title", "content", "author_id"})

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_authors = Table(
    "authors",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("bio", Text),
    Column("birthdate", String(10)),  # YYYY-MM-DD
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Column("deleted_at", String(32)),  # NULL = active
)

_posts = Table(
    "posts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("content", Text),
    Column("author_id", Integer),  # non-owning reference to authors.id
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Column("deleted_at", String(32)),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ContentStore:
    def __init__(self, db_url: Optional[str] = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Shared soft-delete helpers
    # ------------------------------------------------------------------

    def _update_active(self, table: Table, row_id: int, allowed: frozenset, fields: dict) -> bool:
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"Unknown {table.name} fields: {unknown!r}")
        with self.engine.connect() as conn:
            result = conn.execute(
                table.update()
                .where((table.c.id == row_id) & (table.c.deleted_at.is_(None)))
                .values(**fields, updated_at=now_iso())
            )
            conn.commit()
        return result.rowcount > 0

    def _soft_delete(self, table: Table, row_id: int) -> bool:
        stamp = now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                table.update()
                .where((table.c.id == row_id) & (table.c.deleted_at.is_(None)))
                .values(deleted_at=stamp, updated_at=stamp)
            )
            conn.commit()
        return result.rowcount > 0

    def _restore(self, table: Table, row_id: int) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(
                table.update()
                .where((table.c.id == row_id) & (table.c.deleted_at.is_not(None)))
                .values(deleted_at=None, updated_at=now_iso())
            )
            conn.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Authors
    # ------------------------------------------------------------------

    def create_author(self, author: Author) -> int:
        """Insert a new author and return its assigned database ID."""
        stamp = now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _authors.insert().values(
                    name=author.name,
                    bio=author.bio,
                    birthdate=author.birthdate,
                    created_at=stamp,
                    updated_at=stamp,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_author(self, author_id: int, include_deleted: bool = False) -> Optional[Author]:
        stmt = _authors.select().where(_authors.c.id == author_id)
        if not include_deleted:
            stmt = stmt.where(_authors.c.deleted_at.is_(None))
        with self.engine.connect() as conn:
            row = conn.execute(stmt).fetchone()
        return _row_to_author(row) if row is not None else None

    def list_authors(self) -> list[Author]:
        """Return all active authors ordered by id."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _authors.select().where(_authors.c.deleted_at.is_(None)).order_by(_authors.c.id)
            ).fetchall()
        return [_row_to_author(r) for r in rows]

    def update_author(self, author_id: int, **fields) -> bool:
        """Overwrite the given fields on an active author.

        Accepted fields: name, bio, birthdate. Unknown keys raise ValueError.
        Returns True if a row was updated, False if the author is absent or
        soft-deleted.
        """
        return self._update_active(_authors, author_id, _AUTHOR_FIELDS, fields)

    def delete_author(self, author_id: int) -> bool:
        """Soft-delete an author. Posts referencing it are left untouched."""
        return self._soft_delete(_authors, author_id)

    def restore_author(self, author_id: int) -> bool:
        return self._restore(_authors, author_id)

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    def create_post(self, post: Post) -> int:
        """Insert a new post and return its assigned database ID."""
        stamp = now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _posts.insert().values(
                    title=post.title,
                    content=post.content,
                    author_id=post.author_id,
                    created_at=stamp,
                    updated_at=stamp,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_post(self, post_id: int, include_deleted: bool = False) -> Optional[Post]:
        stmt = _posts.select().where(_posts.c.id == post_id)
        if not include_deleted:
            stmt = stmt.where(_posts.c.deleted_at.is_(None))
        with self.engine.connect() as conn:
            row = conn.execute(stmt).fetchone()
        return _row_to_post(row) if row is not None else None

    def list_posts_with_author(self) -> list[Post]:
        """Return all active posts ordered by id, each with its author attached.

        LEFT OUTER JOIN so posts without an author (or whose author was
        soft-deleted) are still listed, with post.author left as None. The
        deleted_at filter sits in the ON clause, not WHERE, for that reason.
        """
        a = _authors.alias("a")
        stmt = (
            select(
                _posts,
                a.c.id.label("a_id"),
                a.c.name.label("a_name"),
                a.c.bio.label("a_bio"),
                a.c.birthdate.label("a_birthdate"),
                a.c.created_at.label("a_created_at"),
                a.c.updated_at.label("a_updated_at"),
            )
            .select_from(_posts.outerjoin(a, and_(_posts.c.author_id == a.c.id, a.c.deleted_at.is_(None))))
            .where(_posts.c.deleted_at.is_(None))
            .order_by(_posts.c.id)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        posts = []
        for row in rows:
            post = _row_to_post(row)
            if row.a_id is not None:
                post.author = Author(
                    id=row.a_id,
                    name=row.a_name,
                    bio=row.a_bio,
                    birthdate=row.a_birthdate,
                    created_at=row.a_created_at,
                    updated_at=row.a_updated_at,
                )
            posts.append(post)
        return posts

    def update_post(self, post_id: int, **fields) -> bool:
        """Overwrite the given fields on an active post.

        Accepted fields: title, content, author_id. Returns False if the post
        is absent or soft-deleted.
        """
        return self._update_active(_posts, post_id, _POST_FIELDS, fields)

    def delete_post(self, post_id: int) -> bool:
        return self._soft_delete(_posts, post_id)

    def restore_post(self, post_id: int) -> bool:
        return self._restore(_posts, post_id)

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_author(row) -> Author:
    return Author(
        id=row.id,
        name=row.name,
        bio=row.bio,
        birthdate=row.birthdate,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def _row_to_post(row) -> Post:
    return Post(
        id=row.id,
        title=row.title,
        content=row.content,
        author_id=row.author_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )
