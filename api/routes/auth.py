"""
api/routes/auth.py -- Signup, login and profile endpoints.

Routes:
  POST /api/signup   -- create an account (public)
  POST /api/login    -- local strategy; returns a bearer token (public, rate limited)
  GET  /api/profile  -- bearer strategy; returns the caller's account

Security:
  POST /login is rate-limited per client IP (Settings.login_rate_limit).
  The local strategy equalizes bcrypt timing between unknown email and wrong
  password -- use require_local, never inline get_by_email() + verify_password().
  Cache-Control: no-store on login responses so tokens are not cached.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from api.limiter import login_throttle
from api.models import LoginRequest, LoginResponse, LoginUser, ProfileResponse, SignupRequest, SignupResponse
from auth.dependencies import get_principal, require_bearer, require_local
from auth.models import Principal, User
from auth.passwords import hash_password
from auth.store import UserStore
from auth.tokens import TokenSigner
from core.errors import ValidationError

logger = logging.getLogger("inkwell.api")

# Auth policy:
# - POST /api/signup:  public
# - POST /api/login:   require_local -- email/password from the body
# - GET  /api/profile: require_bearer
router = APIRouter()


@router.post("/signup", response_model=SignupResponse, status_code=201)
def signup(request: Request, body: SignupRequest) -> SignupResponse:
    """Register a new account. The password is stored only as a bcrypt hash."""
    user_store: UserStore = request.app.state.user_store
    user = User(name=body.name, email=body.email, hashed_password=hash_password(body.password))
    try:
        user_id = user_store.create_user(user)
    except IntegrityError as exc:
        raise ValidationError("A user with that email already exists.") from exc
    logger.info("User %d signed up", user_id)
    return SignupResponse(id=user_id, email=body.email, message="User created successfully.")


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(login_throttle)],
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": LoginRequest.model_json_schema()}},
        }
    },
)
async def login(request: Request, user: User = Depends(require_local)) -> JSONResponse:
    """Exchange email + password for a signed bearer token.

    The gate has already run the local strategy; reaching this body means the
    credentials were valid. The token is issued here, not in the strategy.
    """
    tokens: TokenSigner = request.app.state.tokens
    token = tokens.issue(user.id, user.email)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            token=token,
            token_type="Bearer",  # noqa: S106 # nosec B106 -- token type, not a password
            user=LoginUser(id=user.id, email=user.email),
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/profile", response_model=ProfileResponse, dependencies=[Depends(require_bearer)])
async def profile(principal: Principal = Depends(get_principal)) -> ProfileResponse:
    """Return the identity the bearer gate attached to this request."""
    return ProfileResponse(id=principal.id, name=principal.name, email=principal.email, message="Access granted.")
