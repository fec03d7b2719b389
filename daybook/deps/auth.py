"""Authorization guard for every route that touches owned resources.

The token comes from the session cookie, or from an ``Authorization: Bearer``
header for non-browser clients. A request without a resolvable token is
rejected before any resource query runs; with no token at all the store is
not touched.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Header, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import OperationFailed
from ..core.results import ErrorKind
from ..crud.sessions import resolve_session
from ..db.session import get_db
from ..middlewares import principal_ctx_var


@dataclass(frozen=True)
class AuthContext:
    user_id: int
    token: str


def extract_token(request: Request, authorization: str | None = None) -> str | None:
    token = (request.cookies.get(settings.SESSION_COOKIE_NAME) or "").strip()
    if token:
        return token
    if authorization:
        scheme, credentials = get_authorization_scheme_param(authorization)
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()
    return None


def bind_principal(request: Request, principal: str | None = None) -> None:
    """Make ``principal`` visible to log records emitted by the current handler.

    Sync dependencies and sync handlers each run in a worker thread with their
    own copy of the context, so a value set by the guard is gone by the time
    the handler logs. Handlers call this first; ``request.state`` carries the
    value between the two.
    """

    principal = principal or getattr(request.state, "principal", None)
    if principal:
        request.state.principal = principal
        principal_ctx_var.set(principal)


def require_session(
    request: Request,
    db: Session = Depends(get_db),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> AuthContext:
    token = extract_token(request, authorization)
    if not token:
        raise OperationFailed(ErrorKind.UNAUTHENTICATED)
    user_id = resolve_session(db, token)
    if user_id is None:
        raise OperationFailed(ErrorKind.UNAUTHENTICATED)
    request.state.principal = f"user:{user_id}"
    request.state.user_id = user_id
    return AuthContext(user_id=user_id, token=token)
