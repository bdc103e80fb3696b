# swapcore/services/directory.py
"""
Connection Directory

Population-wide operations: forming connections, mirrored status changes,
discovery candidates, rating completed swaps and deleting users.

Every write that touches both directed views of a pair goes through
`mirrored_pair`, which serialises work on the unordered pair and commits
both rows in a single transaction (or neither).
"""

import logging
import threading
import weakref
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from swapcore import models
from swapcore.crud import match as match_crud
from swapcore.crud import user as user_crud
from swapcore.exceptions import AlreadyRated, NotCompleted, NotConnected
from swapcore.models.match import MatchStatus
from swapcore.services import gamification, lifecycle
from swapcore.services.gamification import LedgerPolicy
from swapcore.services.lifecycle import Outcome

logger = logging.getLogger(__name__)

# Entries disappear once no caller holds the lock.
_pair_locks: "weakref.WeakValueDictionary[frozenset, threading.Lock]" = weakref.WeakValueDictionary()
_pair_locks_guard = threading.Lock()


# ======================
# MIRRORED WRITES
# ======================

def pair_lock(user_id: int, partner_id: int) -> threading.Lock:
    """Lock shared by both orderings of the same pair."""
    key = frozenset((user_id, partner_id))
    with _pair_locks_guard:
        return _pair_locks.setdefault(key, threading.Lock())


@contextmanager
def _pair_transaction(db: Session, user_id: int, partner_id: int):
    lock = pair_lock(user_id, partner_id)
    with lock:
        try:
            yield
            db.commit()
        except Exception:
            db.rollback()
            raise


@contextmanager
def mirrored_pair(db: Session, user_id: int, partner_id: int):
    """
    Yield (user's view, partner's view) of an existing match.

    Commits when the block exits normally and rolls back on any exception,
    so no reader ever sees one side updated and the other stale.

    Raises:
        NotConnected: If either directed view is missing
    """
    with _pair_transaction(db, user_id, partner_id):
        own, mirror = match_crud.get_pair(db, user_id, partner_id, for_update=True)
        if own is None or mirror is None:
            raise NotConnected(user_id, partner_id)
        yield own, mirror


def apply_mirrored(
    db: Session,
    user_id: int,
    partner_id: int,
    transform: Callable[[models.Match], None],
    side_effect: Optional[Callable[[models.Match, models.Match], None]] = None,
) -> Tuple[models.Match, models.Match]:
    """
    Apply `transform` to both views of a pair as one indivisible write.

    `side_effect` runs inside the same transaction after both views are
    updated (XP awards, system messages).
    """
    with mirrored_pair(db, user_id, partner_id) as (own, mirror):
        transform(own)
        transform(mirror)
        if own.shared_state() != mirror.shared_state():
            raise RuntimeError(
                f"Mirrored match state diverged for pair ({user_id}, {partner_id})"
            )
        if side_effect is not None:
            side_effect(own, mirror)
    return own, mirror


# ======================
# CONNECTIONS
# ======================

def connect(db: Session, user_id: int, target_user_id: int) -> Dict[str, Any]:
    """
    Connect two users.

    Creates both directed matches (not-started) and rewards both users with
    XP and a streak point. Repeating the request is a no-op.

    Raises:
        UnknownUser: If either user does not exist
        ValueError: If a user tries to connect with themselves
    """
    if user_id == target_user_id:
        raise ValueError("Cannot connect with yourself")

    user_crud.require_user(db, user_id)
    user_crud.require_user(db, target_user_id)

    with _pair_transaction(db, user_id, target_user_id):
        own, mirror = match_crud.get_pair(db, user_id, target_user_id, for_update=True)
        if own is not None or mirror is not None:
            logger.info("Connect ignored, already connected (user_id=%s, target_id=%s)", user_id, target_user_id)
            return {
                "outcome": Outcome.ALREADY_CONNECTED,
                "user_id": user_id,
                "partner_id": target_user_id,
                "xp_awarded": 0,
            }

        locked = user_crud.lock_users(db, [user_id, target_user_id])
        user, target = locked[user_id], locked[target_user_id]
        match_crud.create_pair(db, user, target)
        lifecycle.apply_connection_rewards(user)
        lifecycle.apply_connection_rewards(target)

    logger.info("Users connected (user_id=%s, target_id=%s)", user_id, target_user_id)
    return {
        "outcome": Outcome.CONNECTED,
        "user_id": user_id,
        "partner_id": target_user_id,
        "xp_awarded": LedgerPolicy.CONNECT_XP,
    }


def set_match_status(db: Session, user_id: int, partner_id: int, status) -> models.Match:
    """
    Advance the swap status for a pair.

    The status is mirrored onto both views. Completing the swap credits XP
    to the acting user only.

    Raises:
        UnknownUser: If either user does not exist
        NotConnected: If the users have no match
        InvalidTransition: If `status` does not directly follow the current status
    """
    requested = MatchStatus(status)
    user_crud.require_user(db, user_id)
    user_crud.require_user(db, partner_id)

    def _reward(own, mirror):
        if requested is MatchStatus.COMPLETED:
            actor = user_crud.lock_users(db, [user_id])[user_id]
            lifecycle.apply_completion_reward(actor)

    own, _ = apply_mirrored(
        db,
        user_id,
        partner_id,
        lambda match: lifecycle.transition(match, requested),
        side_effect=_reward,
    )
    logger.info(
        "Match status changed (user_id=%s, partner_id=%s, status=%s)",
        user_id, partner_id, requested.value,
    )
    return own


# ======================
# DISCOVERY
# ======================

def candidates_for(user, all_users) -> List:
    """
    Users `user` can still discover: not themselves, not already connected,
    not administrators. Highest teacher rating first; ties keep input order.
    """
    connected = {match.partner_id for match in user.matches}
    pool = [
        other for other in all_users
        if other.id != user.id and other.id not in connected and not other.is_admin
    ]
    return sorted(pool, key=lambda other: other.teacher_rating or 0.0, reverse=True)


def candidates(db: Session, user_id: int) -> List[models.User]:
    user = user_crud.require_user(db, user_id)
    return candidates_for(user, user_crud.get_users(db))


# ======================
# RATINGS
# ======================

def rate_session(db: Session, rater_id: int, teacher_id: int, rating: int) -> Dict[str, Any]:
    """
    Rate the partner of a completed swap.

    The rating is stored on the rater's own view only and folded into the
    teacher's running average. Each rater rates a swap once.

    Raises:
        ValueError: If rating is outside 1-5
        UnknownUser: If either user does not exist
        NotConnected: If the users have no match
        NotCompleted: If the rater's view is not completed
        AlreadyRated: If the rater already rated this swap
    """
    if not (1 <= rating <= 5):
        raise ValueError("Rating must be between 1 and 5")

    user_crud.require_user(db, rater_id)
    user_crud.require_user(db, teacher_id)

    with _pair_transaction(db, rater_id, teacher_id):
        match = match_crud.get_match(db, rater_id, teacher_id, for_update=True)
        if match is None:
            raise NotConnected(rater_id, teacher_id)
        if match.status != MatchStatus.COMPLETED.value:
            raise NotCompleted("Only completed swaps can be rated")
        if match.rating is not None:
            raise AlreadyRated("You have already rated this swap")

        match.rating = rating
        teacher = user_crud.lock_users(db, [teacher_id])[teacher_id]
        state = gamification.apply_rating(teacher, rating)

    logger.info("Swap rated (rater_id=%s, teacher_id=%s, rating=%s)", rater_id, teacher_id, rating)
    return {
        "rater_id": rater_id,
        "teacher_id": teacher_id,
        "rating": rating,
        "teacher_rating": round(state.teacher_rating, 2),
        "total_ratings": state.total_ratings,
        "message": "Rating submitted successfully",
    }


# ======================
# ADMIN OPERATIONS
# ======================

def delete_user(db: Session, user_id: int) -> Dict[str, Any]:
    """
    Delete a user and cascade: their matches on both sides, every message
    they sent or received, their posts, skills and calendar events.

    Badges other users earned through the deleted connections are kept.
    """
    user = user_crud.require_user(db, user_id)
    try:
        user_crud.delete_user(db, user)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("User deleted (user_id=%s)", user_id)
    return {"user_id": user_id, "message": "User deleted successfully"}
