"""
API request and response models for Inkwell REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
content/models.py, which own the internal domain representation. Route
handlers map between the two.

JSON field names for authors and posts are camelCase (authorId, createdAt).
Request models accept either camelCase or snake_case keys.

Separation of concerns: domain dataclasses = domain truth; api/ models = API contract.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from content.models import Author, Post

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Deliberately loose: one "@", no whitespace, a dot in the domain part.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# bcrypt refuses passwords longer than 72 bytes (UTF-8), not characters.
PASSWORD_MAX_LENGTH = 72


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class MessageResponse(BaseModel):
    """Plain confirmation body, e.g. after a delete."""

    model_config = ConfigDict(frozen=True)

    message: str


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Request body for POST /api/signup."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_LENGTH:
            raise ValueError(f"password must be at most {PASSWORD_MAX_LENGTH} bytes when UTF-8 encoded")
        return v


class SignupResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    message: str


class LoginRequest(BaseModel):
    """Documented body for POST /api/login.

    The local strategy reads the body itself; this model only feeds the
    OpenAPI schema.
    """

    email: str
    password: str


class LoginUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    email: str


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    token_type: str = "Bearer"
    user: LoginUser


class ProfileResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str
    message: str


# ---------------------------------------------------------------------------
# Authors
# ---------------------------------------------------------------------------


class AuthorCreate(BaseModel):
    """Request body for POST /api/authors."""

    model_config = ConfigDict(str_strip_whitespace=True, alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1, max_length=255)
    bio: Optional[str] = Field(default=None, max_length=5000)
    birthdate: Optional[date] = None


class AuthorUpdate(BaseModel):
    """Request body for PUT /api/authors/{id}.

    Only the keys present in the body are written. Sending "bio": null clears
    the bio; omitting "bio" leaves it unchanged.
    """

    model_config = ConfigDict(str_strip_whitespace=True, alias_generator=to_camel, populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    bio: Optional[str] = Field(default=None, max_length=5000)
    birthdate: Optional[date] = None


class AuthorResponse(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    bio: Optional[str]
    birthdate: Optional[str]
    created_at: str
    updated_at: str

    @classmethod
    def from_author(cls, author: Author) -> "AuthorResponse":
        """Factory Method: the domain-to-transport mapping lives next to the model."""
        return cls(
            id=author.id,
            name=author.name,
            bio=author.bio,
            birthdate=author.birthdate,
            created_at=author.created_at,
            updated_at=author.updated_at,
        )


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


class PostCreate(BaseModel):
    """Request body for POST /api/posts."""

    model_config = ConfigDict(str_strip_whitespace=True, alias_generator=to_camel, populate_by_name=True)

    title: str = Field(min_length=1, max_length=255)
    content: Optional[str] = None
    author_id: Optional[int] = Field(default=None, gt=0)


class PostUpdate(BaseModel):
    """Request body for PUT /api/posts/{id}. Same partial-overwrite rule as AuthorUpdate."""

    model_config = ConfigDict(str_strip_whitespace=True, alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = None
    author_id: Optional[int] = Field(default=None, gt=0)


class PostResponse(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    content: Optional[str]
    author_id: Optional[int]
    created_at: str
    updated_at: str


class PostWithAuthorResponse(PostResponse):
    """One row of GET /api/posts: the post plus its nested author (or null)."""

    author: Optional[AuthorResponse] = None


def post_to_response(post: Post) -> PostResponse:
    return PostResponse(
        id=post.id,
        title=post.title,
        content=post.content,
        author_id=post.author_id,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def post_to_listing(post: Post) -> PostWithAuthorResponse:
    return PostWithAuthorResponse(
        id=post.id,
        title=post.title,
        content=post.content,
        author_id=post.author_id,
        created_at=post.created_at,
        updated_at=post.updated_at,
        author=AuthorResponse.from_author(post.author) if post.author is not None else None,
    )
