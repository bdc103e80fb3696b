# swapcore/api/matches.py
"""
Match Lifecycle API Router

Endpoints:
- GET /matches/ - Current user's matches
- GET /matches/candidates - Users available to connect with
- POST /matches/{partner_id} - Connect (idempotent)
- PATCH /matches/{partner_id}/status - Advance swap status
- POST /matches/{partner_id}/rating - Rate a completed swap
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from swapcore import models
from swapcore.api.deps import get_current_user, raise_http_error
from swapcore.crud import match as match_crud
from swapcore.database import get_db
from swapcore.schemas.match import ConnectResponse, Match, RatingCreate, RatingResponse, StatusUpdate
from swapcore.schemas.user import Candidate
from swapcore.services import directory

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get("/", response_model=List[Match])
def get_my_matches(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return [Match.from_model(m) for m in match_crud.get_matches_for_user(db, current_user.id)]


@router.get("/candidates", response_model=List[Candidate])
def get_candidates(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Discovery feed, best-rated teachers first."""
    return [Candidate.model_validate(u) for u in directory.candidates(db, current_user.id)]


@router.post("/{partner_id}", response_model=ConnectResponse)
def connect(
    partner_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        result = directory.connect(db, current_user.id, partner_id)
    except ValueError as e:
        raise_http_error(e)
    return ConnectResponse(**{**result, "outcome": result["outcome"].value})


@router.patch("/{partner_id}/status", response_model=Match)
def update_status(
    partner_id: int,
    payload: StatusUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        match = directory.set_match_status(db, current_user.id, partner_id, payload.status)
    except ValueError as e:
        raise_http_error(e)
    return Match.from_model(match)


@router.post("/{partner_id}/rating", response_model=RatingResponse)
def rate_session(
    partner_id: int,
    payload: RatingCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        result = directory.rate_session(db, current_user.id, partner_id, payload.rating)
    except ValueError as e:
        raise_http_error(e)
    return RatingResponse(**result)
