"""
content/models.py -- Domain dataclasses for authors and posts.

These are pure data containers with zero logic. Soft-delete filtering, field
whitelists and the post/author join all live in content/store.py.

Separation of concerns: these dataclasses are the content domain's truth,
just as auth/models.py owns accounts. Neither layer imports the other.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Author:
    """A writer that posts can be attributed to.

    birthdate is an ISO date string (YYYY-MM-DD) or None.
    id is None before the record is written to the database.
    """

    name: str
    bio: Optional[str] = None
    birthdate: Optional[str] = None
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""
    deleted_at: Optional[str] = None


@dataclass
class Post:
    """A piece of content, optionally attributed to an Author.

    author_id is a non-owning reference: deleting the author leaves the post in
    place. author is only populated by ContentStore.list_posts_with_author(),
    and stays None when the referenced author is absent or soft-deleted.
    """

    title: str
    content: Optional[str] = None
    author_id: Optional[int] = None
    id: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""
    deleted_at: Optional[str] = None
    author: Optional[Author] = None
