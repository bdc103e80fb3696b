from typing import List, Optional

from sqlalchemy.orm import Session

from swapcore import models

DEFAULT_SKILL_CATALOG = [
    ("React", "Programming"),
    ("Python", "Programming"),
    ("UI/UX Design", "Design"),
    ("Graphic Design", "Design"),
    ("Public Speaking", "Communication"),
    ("Spanish", "Languages"),
    ("French", "Languages"),
    ("Photography", "Creative"),
    ("Guitar", "Music"),
    ("Cooking", "Lifestyle"),
    ("Data Analysis", "Programming"),
    ("Marketing", "Business"),
]


# ============================
# SKILL CATALOG
# ============================

def get_skill(db: Session, skill_id: int) -> Optional[models.Skill]:
    return db.query(models.Skill).filter(models.Skill.id == skill_id).first()


def get_skills(db: Session, skip: int = 0, limit: int = 100) -> List[models.Skill]:
    return db.query(models.Skill).order_by(models.Skill.id.asc()).offset(skip).limit(limit).all()


def seed_skill_catalog(db: Session) -> int:
    """Insert any catalog entries that are missing. Returns how many were added."""
    existing = {name for (name,) in db.query(models.Skill.name).all()}
    added = 0
    for name, category in DEFAULT_SKILL_CATALOG:
        if name in existing:
            continue
        db.add(models.Skill(name=name, category=category))
        added += 1
    db.commit()
    return added


# ============================
# USER SKILLS (TEACH / LEARN)
# ============================

def replace_user_skills(
    db: Session,
    user: models.User,
    *,
    teach: Optional[List[tuple]] = None,
    learn: Optional[List[int]] = None,
) -> None:
    """
    Replace a user's teach and/or learn sets.

    `teach` holds (skill_id, proficiency) pairs, `learn` holds skill ids.
    Sets are keyed by skill id, so repeated ids collapse to the last entry.
    Verification survives for taught skills that are kept.
    """
    if teach is not None:
        wanted = {}
        for skill_id, proficiency in teach:
            if proficiency not in (1, 2, 3):
                raise ValueError("Proficiency must be 1, 2 or 3")
            wanted[skill_id] = proficiency
        _require_skills(db, wanted.keys())

        current = {us.skill_id: us for us in user.skills_to_teach}
        for skill_id, row in current.items():
            if skill_id not in wanted:
                user.user_skills.remove(row)
        for skill_id, proficiency in wanted.items():
            if skill_id in current:
                current[skill_id].proficiency = proficiency
            else:
                user.user_skills.append(
                    models.UserSkill(skill_id=skill_id, skill_type="teach", proficiency=proficiency)
                )

    if learn is not None:
        wanted_ids = list(dict.fromkeys(learn))
        _require_skills(db, wanted_ids)

        current = {us.skill_id: us for us in user.skills_to_learn}
        for skill_id, row in current.items():
            if skill_id not in wanted_ids:
                user.user_skills.remove(row)
        for skill_id in wanted_ids:
            if skill_id not in current:
                user.user_skills.append(models.UserSkill(skill_id=skill_id, skill_type="learn"))

    db.flush()


def _require_skills(db: Session, skill_ids) -> None:
    for skill_id in skill_ids:
        if not get_skill(db, skill_id):
            raise ValueError(f"Skill {skill_id} not found")
