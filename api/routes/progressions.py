"""REST endpoints for saved chord progressions."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.deps import Caller, Ledger, get_db, registered_account
from api.schemas.progressions import (
    CreateProgressionRequest,
    ProgressionListResponse,
    ProgressionResponse,
    UpdateProgressionRequest,
)
from core.usage.errors import AccountNotFoundError
from db import progressions as store
from db.models import SavedProgression

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/progressions", tags=["progressions"])

DbSession = Annotated[Session, Depends(get_db)]


def _to_response(progression: SavedProgression) -> ProgressionResponse:
    return ProgressionResponse(
        id=progression.id,
        mode=progression.mode,  # type: ignore[arg-type]
        chords=list(progression.chords),
        genre=progression.genre,
        color_roll=progression.color_roll,
        number_roll=progression.number_roll,
        is_favorite=progression.is_favorite,
        created_at=progression.created_at,
    )


def _owner(caller: Caller, ledger: Ledger) -> str:
    account_id = registered_account(caller)
    try:
        ledger.get_account(account_id)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Account not found: {account_id!r}") from exc
    return account_id


Owner = Annotated[str, Depends(_owner)]


def _owned(db: Session, progression_id: str, account_id: str) -> SavedProgression:
    progression = store.get_progression(db, progression_id)
    if progression is None or progression.account_id != account_id:
        raise HTTPException(status_code=404, detail=f"Progression not found: {progression_id!r}")
    return progression


@router.get("", response_model=ProgressionListResponse)
def list_progressions(account_id: Owner, db: DbSession) -> ProgressionListResponse:
    """List the caller's saved progressions, newest first."""
    rows = store.list_progressions(db, account_id)
    return ProgressionListResponse(progressions=[_to_response(p) for p in rows], total=len(rows))


@router.get("/favorites", response_model=ProgressionListResponse)
def list_favorites(account_id: Owner, db: DbSession) -> ProgressionListResponse:
    """List the caller's favourite progressions."""
    rows = store.list_favorites(db, account_id)
    return ProgressionListResponse(progressions=[_to_response(p) for p in rows], total=len(rows))


@router.post("", response_model=ProgressionResponse, status_code=201)
def create_progression(
    body: CreateProgressionRequest, account_id: Owner, db: DbSession
) -> ProgressionResponse:
    """Save a roll result for the caller."""
    try:
        progression = store.create_progression(
            db,
            mode=body.mode,
            chords=body.chords,
            account_id=account_id,
            genre=body.genre,
            color_roll=body.color_roll,
            number_roll=body.number_roll,
            is_favorite=body.is_favorite,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    logger.info("Saved progression %s for %s", progression.id, account_id)
    return _to_response(progression)


@router.get("/{progression_id}", response_model=ProgressionResponse)
def get_progression(progression_id: str, account_id: Owner, db: DbSession) -> ProgressionResponse:
    """Fetch one of the caller's progressions."""
    return _to_response(_owned(db, progression_id, account_id))


@router.patch("/{progression_id}", response_model=ProgressionResponse)
def update_progression(
    progression_id: str,
    body: UpdateProgressionRequest,
    account_id: Owner,
    db: DbSession,
) -> ProgressionResponse:
    """Update chords, genre or the favourite flag."""
    _owned(db, progression_id, account_id)
    changes = body.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(status_code=422, detail="No fields to update")
    updated = store.update_progression(db, progression_id, **changes)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Progression not found: {progression_id!r}")
    return _to_response(updated)


@router.delete("/{progression_id}", status_code=204)
def delete_progression(progression_id: str, account_id: Owner, db: DbSession) -> None:
    """Delete one of the caller's progressions."""
    _owned(db, progression_id, account_id)
    store.delete_progression(db, progression_id)
    logger.info("Deleted progression %s", progression_id)
