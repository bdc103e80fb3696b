from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from swapcore import models
from swapcore.api.deps import get_current_user, raise_http_error, require_admin
from swapcore.database import get_db
from swapcore.schemas.message import Message, MessageCreate, Post, PostCreate, ReactionUpdate, Suggestions
from swapcore.services import feed_service, message_service, suggestion_service

router = APIRouter(prefix="/messages", tags=["Messages"])
posts_router = APIRouter(prefix="/posts", tags=["Posts"])


@router.get("/{partner_id}", response_model=List[Message])
def get_conversation(
    partner_id: int,
    limit: int = Query(200, ge=1, le=500),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    messages = message_service.list_conversation(
        db, user_id=current_user.id, partner_id=partner_id, limit=limit
    )
    return [Message.model_validate(m) for m in messages]


@router.post("/{partner_id}", response_model=Message, status_code=status.HTTP_201_CREATED)
def send_message(
    partner_id: int,
    payload: MessageCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        message = message_service.send_message(
            db, sender_id=current_user.id, receiver_id=partner_id, text=payload.text
        )
    except ValueError as e:
        raise_http_error(e)
    return Message.model_validate(message)


@router.patch("/{partner_id}/{message_id}/reaction", response_model=Message)
def react_to_message(
    partner_id: int,
    message_id: int,
    payload: ReactionUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    message = message_service.toggle_reaction(
        db,
        user_id=current_user.id,
        partner_id=partner_id,
        message_id=message_id,
        reaction=payload.reaction,
    )
    if not message:
        raise HTTPException(status_code=404, detail="Message not found")
    return Message.model_validate(message)


@router.get("/{partner_id}/suggestions", response_model=Suggestions)
def get_suggestions(
    partner_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Conversation starters for a new match; falls back to fixed text when the AI service fails."""
    try:
        suggestions = suggestion_service.starters_for(db, current_user.id, partner_id)
    except ValueError as e:
        raise_http_error(e)
    return Suggestions(partner_id=partner_id, suggestions=suggestions)


# ======================
# FEED
# ======================
@posts_router.get("/", response_model=List[Post])
def list_posts(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    return [Post.model_validate(p) for p in feed_service.list_posts(db, limit=limit, offset=offset)]


@posts_router.post("/", response_model=Post, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        post = feed_service.create_post(db, author_id=current_user.id, caption=payload.caption)
    except ValueError as e:
        raise_http_error(e)
    return Post.model_validate(post)


@posts_router.delete("/{post_id}")
def delete_post(
    post_id: int,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        return feed_service.delete_post(db, post_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
