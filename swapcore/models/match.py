# swapcore/models/match.py
import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, TIMESTAMP, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship
from swapcore.database import Base


class MatchStatus(str, enum.Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Match(Base):
    """One user's directed view of a connection with a counterpart."""
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    partner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), default=MatchStatus.NOT_STARTED.value, nullable=False)

    # Outstanding session proposal (all three set or all three null)
    proposal_proposer_id = Column(Integer, nullable=True)
    proposal_date = Column(DateTime, nullable=True)
    proposal_status = Column(String(20), nullable=True)

    scheduled_session = Column(DateTime, nullable=True)

    # Per-observer rating of the completed swap; never mirrored
    rating = Column(Integer, nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("owner_id", "partner_id", name="uq_match_owner_partner"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="check_match_rating_range"),
    )

    owner = relationship("User", foreign_keys=[owner_id], back_populates="matches")
    partner = relationship("User", foreign_keys=[partner_id])

    @property
    def has_pending_proposal(self) -> bool:
        return self.proposal_status == "pending"

    def shared_state(self) -> tuple:
        """Fields that must be identical on both directed views of a pair."""
        return (
            self.status,
            self.proposal_proposer_id,
            self.proposal_date,
            self.proposal_status,
            self.scheduled_session,
        )
