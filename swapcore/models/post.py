from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, func
from sqlalchemy.orm import relationship
from swapcore.database import Base

DEFAULT_THUMBNAIL_URL = "https://placehold.co/600x400/EEE/31343C?text=New+Post"


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    caption = Column(String(1000), nullable=False)
    thumbnail_url = Column(String(255), default=DEFAULT_THUMBNAIL_URL)
    likes = Column(Integer, default=0, nullable=False)
    comments = Column(Integer, default=0, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    author = relationship("User")
