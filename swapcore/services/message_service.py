from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from swapcore import models
from swapcore.crud import message as message_crud
from swapcore.crud import user as user_crud

logger = logging.getLogger(__name__)


SYSTEM_MESSAGE_TEMPLATES = {
    "session_proposed": "{name} proposed a session for {date}.",
    "session_proposal_superseded": "The earlier session proposal for {date} was replaced by a new one.",
    "session_confirmed": "Session confirmed for {date}!",
    "session_declined": "The session proposal for {date} was declined.",
}


def send_message(
    db: Session,
    *,
    sender_id: int,
    receiver_id: int,
    text: str,
) -> models.Message:
    text = (text or "").strip()
    if not text:
        raise ValueError("Message text cannot be empty")
    if sender_id == receiver_id:
        raise ValueError("Cannot send a message to yourself")
    user_crud.require_user(db, sender_id)
    user_crud.require_user(db, receiver_id)

    message = message_crud.create_message(
        db,
        sender_id=sender_id,
        receiver_id=receiver_id,
        text=text,
    )
    db.commit()
    db.refresh(message)
    return message


def list_conversation(
    db: Session,
    *,
    user_id: int,
    partner_id: int,
    limit: int = 200,
) -> List[models.Message]:
    return message_crud.get_conversation(db, user_id, partner_id, limit=limit)


def toggle_reaction(
    db: Session,
    *,
    user_id: int,
    partner_id: int,
    message_id: int,
    reaction: str,
) -> Optional[models.Message]:
    """
    Set a reaction on a message; reacting with the same emoji again clears it.

    Returns None, without writing, unless the message belongs to the
    conversation between user_id and partner_id.
    """
    message = message_crud.get_message(db, message_id)
    if not message or {message.sender_id, message.receiver_id} != {user_id, partner_id}:
        return None
    message.reaction = None if message.reaction == reaction else reaction
    db.commit()
    return message


def emit_system_message(
    db: Session,
    *,
    actor_id: int,
    counterpart_id: int,
    event_type: str,
    **fields,
) -> models.Message:
    """
    Record a lifecycle system message in the pair's conversation.

    Always emitted, whichever chat the client happens to have open; the
    caller owns the transaction.
    """
    text = SYSTEM_MESSAGE_TEMPLATES[event_type].format(**fields)
    message = message_crud.create_message(
        db,
        sender_id=actor_id,
        receiver_id=counterpart_id,
        text=text,
        is_system_message=True,
        event_type=event_type,
    )
    logger.info(
        "System message emitted (event_type=%s, sender_id=%s, receiver_id=%s)",
        event_type, actor_id, counterpart_id,
    )
    return message
