# swapcore/models/__init__.py
# Import models in dependency order
from .user import User
from .skill import Skill, UserSkill
from .match import Match, MatchStatus
from .message import Message
from .post import Post
from .calendar_event import CalendarEvent

__all__ = [
    "User",
    "Skill",
    "UserSkill",
    "Match",
    "MatchStatus",
    "Message",
    "Post",
    "CalendarEvent",
]
