# swapcore/crud/match.py
"""
Match CRUD Operations
Directed match rows; each connection is stored as two rows, one per owner.
"""

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from swapcore import models
from swapcore.models.match import MatchStatus


def get_match(
    db: Session,
    owner_id: int,
    partner_id: int,
    *,
    for_update: bool = False
) -> Optional[models.Match]:
    """
    Get one user's view of the match with a partner.

    Args:
        db: Database session
        owner_id: User whose view is requested
        partner_id: Counterpart user ID
        for_update: Lock the row (honoured by databases that support it)

    Returns:
        Match object or None if the users are not connected
    """
    query = db.query(models.Match).filter(
        models.Match.owner_id == owner_id,
        models.Match.partner_id == partner_id
    )
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_pair(
    db: Session,
    user_id: int,
    partner_id: int,
    *,
    for_update: bool = False
) -> Tuple[Optional[models.Match], Optional[models.Match]]:
    """Return (user's view, partner's mirrored view)."""
    return (
        get_match(db, user_id, partner_id, for_update=for_update),
        get_match(db, partner_id, user_id, for_update=for_update),
    )


def create_pair(db: Session, user_a: models.User, user_b: models.User) -> Tuple[models.Match, models.Match]:
    """Create both directed views of a new connection (not-started)."""
    a_view = models.Match(partner_id=user_b.id, status=MatchStatus.NOT_STARTED.value)
    b_view = models.Match(partner_id=user_a.id, status=MatchStatus.NOT_STARTED.value)
    user_a.matches.append(a_view)
    user_b.matches.append(b_view)
    db.flush()
    return a_view, b_view


def get_matches_for_user(db: Session, owner_id: int) -> List[models.Match]:
    return (
        db.query(models.Match)
        .filter(models.Match.owner_id == owner_id)
        .order_by(models.Match.id.asc())
        .all()
    )


def get_connected_ids(db: Session, owner_id: int) -> set:
    rows = db.query(models.Match.partner_id).filter(models.Match.owner_id == owner_id).all()
    return {partner_id for (partner_id,) in rows}
