from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from swapcore import models
from swapcore.exceptions import UnknownUser


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def require_user(db: Session, user_id: int) -> models.User:
    user = get_user(db, user_id)
    if user is None:
        raise UnknownUser(user_id)
    return user


def get_users(db: Session) -> List[models.User]:
    return db.query(models.User).order_by(models.User.id.asc()).all()


def create_user(db: Session, *, name: str, bio: Optional[str] = None, is_admin: bool = False) -> models.User:
    user = models.User(
        name=name,
        bio=bio,
        is_admin=is_admin,
        level=1,
        xp=0,
        streak=0,
        badges=[],
        teacher_rating=0.0,
        total_ratings=0,
    )
    db.add(user)
    db.flush()
    return user


def delete_user(db: Session, user: models.User) -> None:
    """Remove a user row along with everything it owns or is referenced by."""
    user_id = user.id
    db.query(models.Match).filter(
        (models.Match.owner_id == user_id) | (models.Match.partner_id == user_id)
    ).delete(synchronize_session=False)
    db.query(models.Message).filter(
        (models.Message.sender_id == user_id) | (models.Message.receiver_id == user_id)
    ).delete(synchronize_session=False)
    db.query(models.Post).filter(models.Post.author_id == user_id).delete(synchronize_session=False)
    db.query(models.CalendarEvent).filter(
        models.CalendarEvent.owner_id == user_id
    ).delete(synchronize_session=False)
    db.query(models.UserSkill).filter(models.UserSkill.user_id == user_id).delete(synchronize_session=False)
    db.query(models.User).filter(models.User.id == user_id).delete(synchronize_session=False)
    db.flush()
    # Bulk deletes bypass the identity map.
    db.expire_all()


def users_for_update(db: Session, user_ids):
    """Query locking the given user rows, in id order, and reloading their state."""
    return (
        db.query(models.User)
        .filter(models.User.id.in_(sorted(set(user_ids))))
        .order_by(models.User.id.asc())
        .with_for_update()
        .populate_existing()
    )


def lock_users(db: Session, user_ids) -> Dict[int, models.User]:
    """
    Lock user rows for the rest of the transaction (honoured by databases
    that support it). Rows are locked in id order.

    Raises:
        UnknownUser: If any id does not exist
    """
    users = {user.id: user for user in users_for_update(db, user_ids).all()}
    for user_id in user_ids:
        if user_id not in users:
            raise UnknownUser(user_id)
    return users
