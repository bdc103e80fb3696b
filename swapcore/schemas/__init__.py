# swapcore/schemas/__init__.py

# User schemas
from .user import (
    Skill,
    TeachSkillIn,
    UserSkillOut,
    UserCreate,
    ProfileUpdate,
    User,
    Candidate,
)

# Match & negotiation schemas
from .match import (
    Match,
    SessionProposal,
    ConnectResponse,
    StatusUpdate,
    RatingCreate,
    RatingResponse,
    ProposalCreate,
    ProposalReply,
    SystemMessageEvent,
    NegotiationResponse,
)

# Messaging & feed schemas
from .message import Message, MessageCreate, ReactionUpdate, Suggestions, Post, PostCreate

# Calendar schemas
from .calendar import CalendarEntry, CalendarEvent, CalendarEventCreate, GoogleCalendarLink

__all__ = [
    "Skill",
    "TeachSkillIn",
    "UserSkillOut",
    "UserCreate",
    "ProfileUpdate",
    "User",
    "Candidate",
    "Match",
    "SessionProposal",
    "ConnectResponse",
    "StatusUpdate",
    "RatingCreate",
    "RatingResponse",
    "ProposalCreate",
    "ProposalReply",
    "SystemMessageEvent",
    "NegotiationResponse",
    "Message",
    "MessageCreate",
    "ReactionUpdate",
    "Suggestions",
    "Post",
    "PostCreate",
    "CalendarEntry",
    "CalendarEvent",
    "CalendarEventCreate",
    "GoogleCalendarLink",
]
