"""
auth/tokens.py -- Bearer token issuance and verification (JWT, HS256).

Security design decisions:
  JWT: python-jose with HS256. Tokens carry sub (user id), email, iat and exp.
       Verification is stateless -- only the signing secret is needed, there is
       no server-side session table.

  verify() returns None on any failure (bad signature, expired, malformed,
       missing claims). The cause is logged at DEBUG for operators but never
       returned, so callers cannot turn it into an oracle. The request gate
       turns None into a 401.

  TokenSigner is built once in the app lifespan from Settings and stored on
       app.state.tokens. The secret lives only on that instance; it is never
       logged and never rendered in a response.

Layer rule: no imports from api/ or content/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode

from auth.models import TokenClaims
from core.config import Settings

logger = logging.getLogger("inkwell.auth")

_ALGORITHM = "HS256"

DEFAULT_EXPIRE_SECONDS = 3600


class TokenSigner:
    """Issues and verifies signed, time-limited bearer tokens.

    Usage:
        signer = TokenSigner.from_settings(get_settings())
        token = signer.issue(user.id, user.email)
        claims = signer.verify(token)  # TokenClaims or None
    """

    __slots__ = ("_secret_key", "_expire_seconds")

    def __init__(self, secret_key: str, expire_seconds: int = DEFAULT_EXPIRE_SECONDS) -> None:
        if not secret_key:
            raise ValueError("TokenSigner requires a non-empty secret key.")
        if expire_seconds <= 0:
            raise ValueError("expire_seconds must be positive.")
        self._secret_key = secret_key
        self._expire_seconds = expire_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenSigner:
        return cls(settings.secret_key, settings.token_expire_seconds)

    def __repr__(self) -> str:
        return f"TokenSigner(algorithm={_ALGORITHM!r}, expire_seconds={self._expire_seconds})"

    @property
    def expire_seconds(self) -> int:
        return self._expire_seconds

    def issue(self, user_id: int, email: str, expire_seconds: int = 0, now: datetime | None = None) -> str:
        """Encode a signed JWT for the given subject.

        Args:
            user_id:        Numeric user id, stored as the sub claim.
            email:          Subject email, stored as the email claim.
            expire_seconds: Token lifetime. If 0 (default), uses the signer's
                            configured lifetime (1 hour unless overridden).
            now:            Issuance time. Defaults to the current UTC time;
                            tests pass an earlier time to mint expired tokens.
        """
        duration = expire_seconds if expire_seconds > 0 else self._expire_seconds
        issued = now or datetime.now(timezone.utc)
        expire = issued + timedelta(seconds=duration)
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": int(issued.timestamp()),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenClaims | None:
        """Check signature, then expiry. Returns the claims, or None on any failure.

        A token is valid while now < exp. jose alone still accepts it during
        the second that ends at exp, so expiry is checked again here.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except JWTError as exc:
            logger.debug("Token rejected: %s", type(exc).__name__)
            return None
        if not _is_canonical_signature(token):
            logger.debug("Token rejected: non-canonical signature encoding")
            return None
        try:
            claims = TokenClaims(
                user_id=int(payload["sub"]),
                email=str(payload["email"]),
                issued_at=int(payload["iat"]),
                expires_at=int(payload["exp"]),
            )
        except (KeyError, TypeError, ValueError):
            logger.debug("Token rejected: missing or malformed claims")
            return None
        if claims.expires_at <= datetime.now(timezone.utc).timestamp():
            logger.debug("Token rejected: expired")
            return None
        return claims


def _is_canonical_signature(token: str) -> bool:
    """True when the signature segment is the exact base64url encoding of its bytes.

    base64url decoding ignores the unused low bits of the final character, so
    several strings decode to the same signature. Only the one issue() emits
    is accepted.
    """
    segment = token.rsplit(".", 1)[-1]
    try:
        raw = base64url_decode(segment.encode("ascii"))
    except ValueError:
        return False
    return base64url_encode(raw).decode("ascii") == segment
