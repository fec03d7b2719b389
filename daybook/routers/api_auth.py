from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, Request, Response
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import OperationFailed, unwrap
from ..core.results import ErrorKind
from ..crud.sessions import create_session, destroy_session, purge_expired_sessions, resolve_session
from ..crud.users import create_account, delete_account, get_user, verify_credentials
from ..db.session import get_db
from ..deps.auth import AuthContext, bind_principal, extract_token, require_session
from ..schemas.auth import LoginRequest, OkResponse, SignupRequest, UserOut, UserResponse

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])
logger = logging.getLogger("daybook.auth")


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_max_age,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
    )


@router.post("/signup", response_model=UserResponse, summary="Create an account and start a session")
def signup(payload: SignupRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    user = unwrap(
        create_account(
            db,
            payload.username,
            payload.password,
            email=payload.email,
            name=payload.name,
        )
    )
    bind_principal(request, f"user:{user.id}")
    token = create_session(db, user.id)
    set_session_cookie(response, token)
    logger.info("auth.signup", extra={"extra_data": {"user_id": user.id}})
    return UserResponse(user=UserOut.model_validate(user))


@router.post("/login", response_model=UserResponse, summary="Verify credentials and start a session")
def login(payload: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    verified = verify_credentials(db, payload.identifier, payload.password)
    if not verified.ok:
        logger.info("auth.login_failed")
    user = unwrap(verified)
    bind_principal(request, f"user:{user.id}")
    purge_expired_sessions(db)
    token = create_session(db, user.id)
    set_session_cookie(response, token)
    logger.info("auth.login", extra={"extra_data": {"user_id": user.id}})
    return UserResponse(user=UserOut.model_validate(user))


@router.post("/logout", response_model=OkResponse, summary="End the current session")
def logout(
    request: Request,
    response: Response,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
):
    token = extract_token(request, authorization)
    user_id = resolve_session(db, token)
    if user_id is not None:
        bind_principal(request, f"user:{user_id}")
    destroy_session(db, token)
    clear_session_cookie(response)
    logger.info("auth.logout")
    return OkResponse()


@router.get("/me", response_model=UserResponse, summary="Current account")
def me(auth: AuthContext = Depends(require_session), db: Session = Depends(get_db)):
    user = get_user(db, auth.user_id)
    if user is None:
        raise OperationFailed(ErrorKind.UNAUTHENTICATED)
    return UserResponse(user=UserOut.model_validate(user))


@router.delete("/account", response_model=OkResponse, summary="Delete the account and everything it owns")
def remove_account(
    request: Request,
    response: Response,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    bind_principal(request)
    unwrap(delete_account(db, auth.user_id, token=auth.token))
    clear_session_cookie(response)
    return OkResponse()
