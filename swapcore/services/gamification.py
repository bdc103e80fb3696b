# swapcore/services/gamification.py
"""
Gamification Ledger

Pure computations over a user snapshot: experience and levels, badge
derivation and the running teacher rating. Nothing here touches the
database; `apply_*` helpers write a computed result back onto a user object
so every lifecycle transition goes through the same recompute.
"""

from typing import NamedTuple, Set


# =====================================
# CONFIGURATION CONSTANTS
# =====================================

class LedgerPolicy:
    """XP economy policy configuration."""
    LEVEL_UP_THRESHOLD = 100  # XP needed per level
    CONNECT_XP = 25           # Awarded to both users when a connection forms
    COMPLETE_XP = 50          # Awarded to the user who marks a swap completed
    CONNECT_STREAK = 1
    SIGNUP_BADGE = "Newbie"


# (minimum count, badge) per counter; all thresholds are inclusive
BADGE_THRESHOLDS = {
    "matches": ((1, "First Match"), (5, "Social Butterfly"), (10, "Super Connector")),
    "skills_to_teach": ((1, "First Lesson"), (3, "Mentor"), (5, "Guru")),
    "skills_to_learn": ((1, "Curious Learner"), (3, "Skill Seeker"), (5, "Polymath")),
    "streak": ((3, "Consistent"), (7, "Dedicated"), (14, "Unstoppable")),
}


class XpState(NamedTuple):
    level: int
    xp: int


class RatingState(NamedTuple):
    teacher_rating: float
    total_ratings: int


# =====================================
# PURE COMPUTATIONS
# =====================================

def apply_xp(user, amount: int) -> XpState:
    """
    Compute level and XP after awarding `amount`.

    XP rolls over into levels every LEVEL_UP_THRESHOLD points, e.g.
    level 1 / 90 XP plus 25 gives level 2 / 15 XP.
    """
    if amount < 0:
        raise ValueError("XP amount cannot be negative")
    total = (user.xp or 0) + amount
    return XpState(
        level=(user.level or 1) + total // LedgerPolicy.LEVEL_UP_THRESHOLD,
        xp=total % LedgerPolicy.LEVEL_UP_THRESHOLD,
    )


def _counters(user) -> dict:
    return {
        "matches": len(user.matches),
        "skills_to_teach": len(user.skills_to_teach),
        "skills_to_learn": len(user.skills_to_learn),
        "streak": user.streak or 0,
    }


def recompute_badges(user) -> Set[str]:
    """
    Derive the badge set from the user's counters.

    The result is a union with the badges already held: a badge is never
    taken away, even if the counter that earned it has since dropped.
    """
    badges = set(user.badges or [])
    for counter, value in _counters(user).items():
        for threshold, badge in BADGE_THRESHOLDS[counter]:
            if value >= threshold:
                badges.add(badge)
    return badges


def record_rating(teacher, rating: int) -> RatingState:
    """Fold one new rating into the teacher's running average."""
    if not (1 <= rating <= 5):
        raise ValueError("Rating must be between 1 and 5")
    old_count = teacher.total_ratings or 0
    old_total = (teacher.teacher_rating or 0.0) * old_count
    new_count = old_count + 1
    return RatingState(
        teacher_rating=(old_total + rating) / new_count,
        total_ratings=new_count,
    )


# =====================================
# WRITE-BACK HELPERS
# =====================================

def award_xp(user, amount: int) -> XpState:
    """Apply XP to the user object, then refresh its badges."""
    state = apply_xp(user, amount)
    user.level, user.xp = state.level, state.xp
    refresh_badges(user)
    return state


def refresh_badges(user) -> Set[str]:
    badges = recompute_badges(user)
    # Assign a new list so the JSON column is flagged dirty.
    user.badges = sorted(badges)
    return badges


def apply_rating(teacher, rating: int) -> RatingState:
    state = record_rating(teacher, rating)
    teacher.teacher_rating, teacher.total_ratings = state.teacher_rating, state.total_ratings
    return state
