# swapcore/services/profile_service.py
"""
Profile Service Layer
Sign-up, profile edits and skill verification. Badges are recomputed after
every change so the counters and the badge set never drift apart.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from swapcore import models
from swapcore.crud import skill as skill_crud
from swapcore.crud import user as user_crud
from swapcore.services import gamification
from swapcore.services.gamification import LedgerPolicy

logger = logging.getLogger(__name__)


def sign_up(
    db: Session,
    *,
    name: str,
    bio: Optional[str] = None,
    skills_to_teach: Optional[List[tuple]] = None,
    skills_to_learn: Optional[List[int]] = None,
    is_admin: bool = False,
) -> models.User:
    """
    Create a user at level 1 with the sign-up badge.

    Args:
        db: Database session
        name: Display name
        bio: Optional profile text
        skills_to_teach: (skill_id, proficiency 1-3) pairs
        skills_to_learn: Skill ids
        is_admin: Administrative account (hidden from discovery)

    Raises:
        ValueError: If a skill id or proficiency is invalid
    """
    name = (name or "").strip()
    if not name:
        raise ValueError("Name cannot be empty")

    try:
        user = user_crud.create_user(db, name=name, bio=bio, is_admin=is_admin)
        user.badges = [LedgerPolicy.SIGNUP_BADGE]
        skill_crud.replace_user_skills(
            db,
            user,
            teach=skills_to_teach or [],
            learn=skills_to_learn or [],
        )
        gamification.refresh_badges(user)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info("User signed up (user_id=%s)", user.id)
    return user


def update_profile(
    db: Session,
    user_id: int,
    *,
    name: Optional[str] = None,
    bio: Optional[str] = None,
    skills_to_teach: Optional[List[tuple]] = None,
    skills_to_learn: Optional[List[int]] = None,
) -> models.User:
    """
    Edit a profile. Omitted fields are left unchanged.

    Dropping a taught skill also drops its verification.
    """
    user = user_crud.require_user(db, user_id)
    try:
        if name is not None:
            if not name.strip():
                raise ValueError("Name cannot be empty")
            user.name = name.strip()
        if bio is not None:
            user.bio = bio
        skill_crud.replace_user_skills(db, user, teach=skills_to_teach, learn=skills_to_learn)
        gamification.refresh_badges(user)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    return user


def verify_skill(db: Session, user_id: int, skill_id: int) -> models.User:
    """
    Mark a taught skill as verified.

    Raises:
        ValueError: If the user does not teach the skill
    """
    user = user_crud.require_user(db, user_id)
    row = next((us for us in user.skills_to_teach if us.skill_id == skill_id), None)
    if row is None:
        raise ValueError("Only skills you teach can be verified")
    row.is_verified = True
    db.commit()
    db.refresh(user)
    logger.info("Skill verified (user_id=%s, skill_id=%s)", user_id, skill_id)
    return user
