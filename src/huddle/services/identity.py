"""Anonymous session identity.

Every client gets an opaque session id carried in a signed cookie. The id is
the only credential the service knows about: it tags posts at creation and
authorizes their deletion. Resolution never touches storage; a cookie that
cannot be read or verified is treated as absent and a fresh id is issued.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime

from jose import JWTError, jwt

from huddle.core.settings import settings

logger = logging.getLogger(__name__)

SESSION_TOKEN_TYPE = "anon"
SESSION_ID_BYTES = 24


@dataclass(frozen=True)
class ResolvedSession:
    """Outcome of resolving a request's session cookie."""

    session_id: str
    # Set when a new id was minted and must be written back as a cookie.
    issued_token: str | None = None

    @property
    def is_new(self) -> bool:
        return self.issued_token is not None


def new_session_id() -> str:
    """Return a fresh, unguessable session id."""
    return secrets.token_urlsafe(SESSION_ID_BYTES)


def encode_session_token(session_id: str) -> str:
    """Sign ``session_id`` into the cookie value."""
    now = datetime.now(UTC)
    payload: dict[str, object] = {
        "sub": session_id,
        "typ": SESSION_TOKEN_TYPE,
        "iat": int(now.timestamp()),
        "exp": int(now.timestamp()) + settings.session_cookie_max_age_seconds,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str | None) -> str | None:
    """Return the session id inside ``token``, or None if it is not a valid session cookie."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        logger.debug("Discarding unverifiable session cookie")
        return None
    if payload.get("typ") != SESSION_TOKEN_TYPE:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject


def resolve_session(cookies: dict[str, str]) -> ResolvedSession:
    """Resolve the caller's session from its cookies; always succeeds."""
    session_id = decode_session_token(cookies.get(settings.session_cookie_name))
    if session_id is not None:
        return ResolvedSession(session_id=session_id)
    session_id = new_session_id()
    return ResolvedSession(session_id=session_id, issued_token=encode_session_token(session_id))
