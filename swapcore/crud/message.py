from typing import List, Optional

from sqlalchemy.orm import Session

from swapcore import models


def create_message(
    db: Session,
    *,
    sender_id: int,
    receiver_id: int,
    text: str,
    is_system_message: bool = False,
    event_type: Optional[str] = None,
) -> models.Message:
    message = models.Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        text=text,
        is_system_message=is_system_message,
        event_type=event_type,
    )
    db.add(message)
    db.flush()
    return message


def get_conversation(db: Session, user_id: int, partner_id: int, limit: int = 200) -> List[models.Message]:
    return (
        db.query(models.Message)
        .filter(
            ((models.Message.sender_id == user_id) & (models.Message.receiver_id == partner_id))
            | ((models.Message.sender_id == partner_id) & (models.Message.receiver_id == user_id))
        )
        .order_by(models.Message.id.asc())
        .limit(limit)
        .all()
    )


def get_message(db: Session, message_id: int) -> Optional[models.Message]:
    return db.query(models.Message).filter(models.Message.id == message_id).first()
