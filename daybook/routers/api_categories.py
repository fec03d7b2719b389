from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.errors import unwrap
from ..crud.categories import (
    create_category,
    delete_category,
    get_category,
    list_categories,
    update_category,
)
from ..db.session import get_db
from ..deps.auth import AuthContext, require_session
from ..schemas.auth import OkResponse
from ..schemas.category import CategoryIn, CategoryListResponse, CategoryOut, CategoryResponse

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=CategoryListResponse)
def api_list_categories(auth: AuthContext = Depends(require_session), db: Session = Depends(get_db)):
    categories = [CategoryOut.model_validate(category) for category in list_categories(db, auth.user_id)]
    return CategoryListResponse(categories=categories)


@router.post("", response_model=CategoryResponse)
def api_create_category(
    payload: CategoryIn,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    category = unwrap(create_category(db, auth.user_id, payload.model_dump()))
    return CategoryResponse(category=CategoryOut.model_validate(category))


@router.get("/{category_id}", response_model=CategoryResponse)
def api_get_category(category_id: int, auth: AuthContext = Depends(require_session), db: Session = Depends(get_db)):
    category = unwrap(get_category(db, auth.user_id, category_id))
    return CategoryResponse(category=CategoryOut.model_validate(category))


@router.put("/{category_id}", response_model=CategoryResponse)
def api_update_category(
    category_id: int,
    payload: CategoryIn,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    category = unwrap(update_category(db, auth.user_id, category_id, payload.model_dump()))
    return CategoryResponse(category=CategoryOut.model_validate(category))


@router.delete("/{category_id}", response_model=OkResponse)
def api_delete_category(category_id: int, auth: AuthContext = Depends(require_session), db: Session = Depends(get_db)):
    unwrap(delete_category(db, auth.user_id, category_id))
    return OkResponse()
