from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.errors import unwrap
from ..crud.reflections import (
    create_reflection,
    delete_reflection,
    get_reflection,
    list_reflections,
    update_reflection,
)
from ..db.session import get_db
from ..deps.auth import AuthContext, require_session
from ..schemas.auth import OkResponse
from ..schemas.reflection import (
    ReflectionIn,
    ReflectionListResponse,
    ReflectionOut,
    ReflectionResponse,
)

router = APIRouter(prefix="/api/v1/reflections", tags=["reflections"])


@router.get("", response_model=ReflectionListResponse)
def api_list_reflections(auth: AuthContext = Depends(require_session), db: Session = Depends(get_db)):
    reflections = [ReflectionOut.model_validate(item) for item in list_reflections(db, auth.user_id)]
    return ReflectionListResponse(reflections=reflections)


@router.post("", response_model=ReflectionResponse)
def api_create_reflection(
    payload: ReflectionIn,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    reflection = unwrap(create_reflection(db, auth.user_id, payload.model_dump()))
    return ReflectionResponse(reflection=ReflectionOut.model_validate(reflection))


@router.get("/{reflection_id}", response_model=ReflectionResponse)
def api_get_reflection(
    reflection_id: int,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    reflection = unwrap(get_reflection(db, auth.user_id, reflection_id))
    return ReflectionResponse(reflection=ReflectionOut.model_validate(reflection))


@router.put("/{reflection_id}", response_model=ReflectionResponse)
def api_update_reflection(
    reflection_id: int,
    payload: ReflectionIn,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    reflection = unwrap(update_reflection(db, auth.user_id, reflection_id, payload.model_dump()))
    return ReflectionResponse(reflection=ReflectionOut.model_validate(reflection))


@router.delete("/{reflection_id}", response_model=OkResponse)
def api_delete_reflection(
    reflection_id: int,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    unwrap(delete_reflection(db, auth.user_id, reflection_id))
    return OkResponse()
