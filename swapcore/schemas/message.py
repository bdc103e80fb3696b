from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)


class ReactionUpdate(BaseModel):
    reaction: str = Field(..., min_length=1, max_length=16)


class Message(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    text: str
    is_system_message: bool = False
    event_type: Optional[str] = None
    reaction: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Suggestions(BaseModel):
    partner_id: int
    suggestions: List[str]


# ======================
# FEED
# ======================

class PostCreate(BaseModel):
    caption: str = Field(..., min_length=1, max_length=1000)


class Post(BaseModel):
    id: int
    author_id: int
    caption: str
    thumbnail_url: Optional[str] = None
    likes: int = 0
    comments: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
