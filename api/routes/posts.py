"""
api/routes/posts.py -- Post CRUD routes.

Routes:
  GET    /api/posts       -- list active posts with nested author (public)
  POST   /api/posts       -- create post (bearer)
  PUT    /api/posts/{id}  -- overwrite the supplied fields (bearer)
  DELETE /api/posts/{id}  -- soft-delete (bearer)

authorId, when given, must name an active author; otherwise the request is
rejected with 400 before anything is written.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from api.models import (
    MessageResponse,
    PostCreate,
    PostResponse,
    PostUpdate,
    PostWithAuthorResponse,
    post_to_listing,
    post_to_response,
)
from auth.dependencies import require_bearer
from content.models import Post
from content.store import ContentStore
from core.errors import NotFoundError, ValidationError

router = APIRouter()

_NOT_FOUND = "Post not found."


def _check_author(store: ContentStore, author_id: Optional[int]) -> None:
    if author_id is not None and store.get_author(author_id) is None:
        raise ValidationError(f"Author {author_id} does not exist.")


@router.get("/posts", response_model=list[PostWithAuthorResponse])
def list_posts(request: Request) -> list[PostWithAuthorResponse]:
    """Return all active posts, each joined with its author."""
    store: ContentStore = request.app.state.content
    return [post_to_listing(p) for p in store.list_posts_with_author()]


@router.post(
    "/posts",
    response_model=PostResponse,
    status_code=201,
    dependencies=[Depends(require_bearer)],
)
def create_post(request: Request, body: PostCreate) -> PostResponse:
    store: ContentStore = request.app.state.content
    _check_author(store, body.author_id)
    post_id = store.create_post(Post(title=body.title, content=body.content, author_id=body.author_id))
    return post_to_response(store.get_post(post_id))


@router.put("/posts/{post_id}", response_model=PostResponse, dependencies=[Depends(require_bearer)])
def update_post(request: Request, post_id: int, body: PostUpdate) -> PostResponse:
    """Overwrite the fields present in the body. "authorId": null detaches the post."""
    store: ContentStore = request.app.state.content
    fields = body.model_dump(exclude_unset=True)
    if "title" in fields and fields["title"] is None:
        raise ValidationError("title cannot be null.")
    if store.get_post(post_id) is None:
        raise NotFoundError(_NOT_FOUND)
    _check_author(store, fields.get("author_id"))
    if not store.update_post(post_id, **fields):
        raise NotFoundError(_NOT_FOUND)
    return post_to_response(store.get_post(post_id))


@router.delete("/posts/{post_id}", response_model=MessageResponse, dependencies=[Depends(require_bearer)])
def delete_post(request: Request, post_id: int) -> MessageResponse:
    store: ContentStore = request.app.state.content
    if not store.delete_post(post_id):
        raise NotFoundError(_NOT_FOUND)
    return MessageResponse(message="Post deleted successfully.")
