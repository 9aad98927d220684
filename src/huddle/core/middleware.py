from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from huddle.core.settings import settings
from huddle.services.identity import resolve_session


class AnonymousSessionMiddleware(BaseHTTPMiddleware):
    """Attach the anonymous session id to ``request.state`` and persist new ones."""

    async def dispatch(self, request: Request, call_next):
        resolved = resolve_session(dict(request.cookies))
        request.state.anonymous_session_id = resolved.session_id
        response: Response = await call_next(request)
        if resolved.is_new:
            response.set_cookie(
                key=settings.session_cookie_name,
                value=resolved.issued_token or "",
                max_age=settings.session_cookie_max_age_seconds,
                path="/",
                httponly=True,
                samesite="lax",
                secure=settings.session_cookie_secure,
            )
        return response
