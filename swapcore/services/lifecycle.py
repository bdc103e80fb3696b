# swapcore/services/lifecycle.py
"""
Match Lifecycle

State machine for one directed match:

    not-started -> in-progress -> completed

`completed` is terminal. Anything else (regressions, skips, repeating the
current status) is an InvalidTransition. The functions here act on a
single user's view; the Connection Directory applies them to both views
of a pair inside one transaction.
"""

import enum
import logging

from swapcore.exceptions import InvalidTransition
from swapcore.models.match import MatchStatus
from swapcore.services import gamification
from swapcore.services.gamification import LedgerPolicy

logger = logging.getLogger(__name__)

TRANSITIONS = {
    MatchStatus.NOT_STARTED: MatchStatus.IN_PROGRESS,
    MatchStatus.IN_PROGRESS: MatchStatus.COMPLETED,
}


class Outcome(str, enum.Enum):
    """Non-error results of lifecycle operations."""
    CONNECTED = "connected"
    ALREADY_CONNECTED = "already_connected"
    PROPOSED = "proposed"
    PROPOSAL_SUPERSEDED = "proposal_superseded"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    NO_PENDING_PROPOSAL = "no_pending_proposal"


def validate_transition(current, requested) -> MatchStatus:
    current = MatchStatus(current)
    requested = MatchStatus(requested)
    if TRANSITIONS.get(current) is not requested:
        raise InvalidTransition(current.value, requested.value)
    return requested


def transition(match, requested) -> None:
    """Move one directed match to `requested`, or raise InvalidTransition."""
    match.status = validate_transition(match.status, requested).value


def apply_connection_rewards(user) -> None:
    """Streak and XP for forming a connection; the new match must already be on `user.matches`."""
    user.streak = (user.streak or 0) + LedgerPolicy.CONNECT_STREAK
    state = gamification.award_xp(user, LedgerPolicy.CONNECT_XP)
    logger.info(
        "Connection reward applied (user_id=%s, level=%s, xp=%s, streak=%s)",
        user.id, state.level, state.xp, user.streak,
    )


def apply_completion_reward(user) -> None:
    """XP for the user who marked the swap completed; the counterpart gets nothing here."""
    state = gamification.award_xp(user, LedgerPolicy.COMPLETE_XP)
    logger.info(
        "Completion reward applied (user_id=%s, level=%s, xp=%s)",
        user.id, state.level, state.xp,
    )
