from typing import List, Optional

from sqlalchemy.orm import Session

from swapcore import models


def create_post(db: Session, *, author_id: int, caption: str) -> models.Post:
    post = models.Post(author_id=author_id, caption=caption)
    db.add(post)
    db.flush()
    return post


def get_post(db: Session, post_id: int) -> Optional[models.Post]:
    return db.query(models.Post).filter(models.Post.id == post_id).first()


def get_posts(db: Session, limit: int = 50, offset: int = 0) -> List[models.Post]:
    return (
        db.query(models.Post)
        .order_by(models.Post.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
