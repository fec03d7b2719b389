from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.errors import unwrap
from ..crud.entries import create_entry, delete_entry, get_entry, list_entries, update_entry
from ..db.session import get_db
from ..deps.auth import AuthContext, require_session
from ..schemas.auth import OkResponse
from ..schemas.entry import EntryIn, EntryListResponse, EntryOut, EntryResponse
from ..schemas.export import ExportDocument
from ..services.export import export_user_data

router = APIRouter(prefix="/api/v1/entries", tags=["entries"])


def _respond(entry) -> EntryResponse:
    return EntryResponse(entry=EntryOut.model_validate(entry))


@router.get("", response_model=EntryListResponse)
def api_list_entries(auth: AuthContext = Depends(require_session), db: Session = Depends(get_db)):
    entries = [EntryOut.model_validate(entry) for entry in list_entries(db, auth.user_id)]
    return EntryListResponse(entries=entries)


@router.get("/export/json", response_model=ExportDocument, summary="Export everything the caller owns")
def api_export_json(auth: AuthContext = Depends(require_session), db: Session = Depends(get_db)):
    return export_user_data(db, auth.user_id)


@router.post("", response_model=EntryResponse)
def api_create_entry(
    payload: EntryIn,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    return _respond(unwrap(create_entry(db, auth.user_id, payload.model_dump())))


@router.get("/{entry_id}", response_model=EntryResponse)
def api_get_entry(entry_id: int, auth: AuthContext = Depends(require_session), db: Session = Depends(get_db)):
    return _respond(unwrap(get_entry(db, auth.user_id, entry_id)))


@router.put("/{entry_id}", response_model=EntryResponse)
def api_update_entry(
    entry_id: int,
    payload: EntryIn,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    return _respond(unwrap(update_entry(db, auth.user_id, entry_id, payload.model_dump())))


@router.delete("/{entry_id}", response_model=OkResponse)
def api_delete_entry(entry_id: int, auth: AuthContext = Depends(require_session), db: Session = Depends(get_db)):
    unwrap(delete_entry(db, auth.user_id, entry_id))
    return OkResponse()
