import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from swapcore import models
from swapcore.crud import post as post_crud
from swapcore.crud import user as user_crud

logger = logging.getLogger(__name__)


def create_post(db: Session, *, author_id: int, caption: str) -> models.Post:
    user_crud.require_user(db, author_id)
    caption = (caption or "").strip()
    if not caption:
        raise ValueError("Caption cannot be empty")
    post = post_crud.create_post(db, author_id=author_id, caption=caption)
    db.commit()
    db.refresh(post)
    return post


def list_posts(db: Session, limit: int = 50, offset: int = 0) -> List[models.Post]:
    return post_crud.get_posts(db, limit=limit, offset=offset)


def delete_post(db: Session, post_id: int) -> Dict[str, Any]:
    post = post_crud.get_post(db, post_id)
    if not post:
        raise ValueError("Post not found")
    db.delete(post)
    db.commit()
    logger.info("Post deleted (post_id=%s)", post_id)
    return {"post_id": post_id, "message": "Post deleted successfully"}
