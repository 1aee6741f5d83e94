"""
api/routes/authors.py -- Author CRUD routes.

Routes:
  GET    /api/authors       -- list active authors (public)
  POST   /api/authors       -- create author (bearer)
  PUT    /api/authors/{id}  -- overwrite the supplied fields (bearer)
  DELETE /api/authors/{id}  -- soft-delete (bearer)

A soft-deleted author disappears from GET /authors and answers 404 to
PUT/DELETE. Its posts stay listed with author: null.
"""

from fastapi import APIRouter, Depends, Request

from api.models import AuthorCreate, AuthorResponse, AuthorUpdate, MessageResponse
from auth.dependencies import require_bearer
from content.models import Author
from content.store import ContentStore
from core.errors import NotFoundError, ValidationError

router = APIRouter()

_NOT_FOUND = "Author not found."


@router.get("/authors", response_model=list[AuthorResponse])
def list_authors(request: Request) -> list[AuthorResponse]:
    """Return all active authors."""
    store: ContentStore = request.app.state.content
    return [AuthorResponse.from_author(a) for a in store.list_authors()]


@router.post(
    "/authors",
    response_model=AuthorResponse,
    status_code=201,
    dependencies=[Depends(require_bearer)],
)
def create_author(request: Request, body: AuthorCreate) -> AuthorResponse:
    store: ContentStore = request.app.state.content
    author_id = store.create_author(
        Author(
            name=body.name,
            bio=body.bio,
            birthdate=body.birthdate.isoformat() if body.birthdate else None,
        )
    )
    return AuthorResponse.from_author(store.get_author(author_id))


@router.put("/authors/{author_id}", response_model=AuthorResponse, dependencies=[Depends(require_bearer)])
def update_author(request: Request, author_id: int, body: AuthorUpdate) -> AuthorResponse:
    """Overwrite the fields present in the body; absent fields are left alone."""
    store: ContentStore = request.app.state.content
    fields = body.model_dump(exclude_unset=True)
    if "name" in fields and fields["name"] is None:
        raise ValidationError("name cannot be null.")
    if fields.get("birthdate") is not None:
        fields["birthdate"] = fields["birthdate"].isoformat()
    if not store.update_author(author_id, **fields):
        raise NotFoundError(_NOT_FOUND)
    return AuthorResponse.from_author(store.get_author(author_id))


@router.delete("/authors/{author_id}", response_model=MessageResponse, dependencies=[Depends(require_bearer)])
def delete_author(request: Request, author_id: int) -> MessageResponse:
    store: ContentStore = request.app.state.content
    if not store.delete_author(author_id):
        raise NotFoundError(_NOT_FOUND)
    return MessageResponse(message="Author deleted successfully.")
