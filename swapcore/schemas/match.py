from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from swapcore.models.match import MatchStatus


# ======================
# MATCH RESPONSE MODELS
# ======================

class SessionProposal(BaseModel):
    proposer_id: int
    date: datetime
    status: str = "pending"


class Match(BaseModel):
    """One user's view of a connection."""
    user_id: int = Field(..., description="Counterpart user ID")
    status: MatchStatus
    session_proposal: Optional[SessionProposal] = None
    scheduled_session: Optional[datetime] = None
    rating: Optional[int] = None

    @classmethod
    def from_model(cls, match) -> "Match":
        proposal = None
        if match.proposal_status is not None:
            proposal = SessionProposal(
                proposer_id=match.proposal_proposer_id,
                date=match.proposal_date,
                status=match.proposal_status,
            )
        return cls(
            user_id=match.partner_id,
            status=MatchStatus(match.status),
            session_proposal=proposal,
            scheduled_session=match.scheduled_session,
            rating=match.rating,
        )


class ConnectResponse(BaseModel):
    outcome: str
    user_id: int
    partner_id: int
    xp_awarded: int


# ======================
# REQUEST MODELS
# ======================

class StatusUpdate(BaseModel):
    status: MatchStatus


class RatingCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")


class RatingResponse(BaseModel):
    rater_id: int
    teacher_id: int
    rating: int
    teacher_rating: float
    total_ratings: int
    message: str


class ProposalCreate(BaseModel):
    date: str = Field(..., description="ISO 8601 date, e.g. 2024-06-01T10:00:00Z")


class ProposalReply(BaseModel):
    response: Literal["accepted", "declined"]


# ======================
# EVENTS
# ======================

class SystemMessageEvent(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    event_type: Optional[str] = None
    text: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class NegotiationResponse(BaseModel):
    outcome: str
    match: Match
    event: Optional[SystemMessageEvent] = None
    superseded_date: Optional[datetime] = None
