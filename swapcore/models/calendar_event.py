from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, TIMESTAMP, func
from sqlalchemy.orm import relationship
from swapcore.database import Base


class CalendarEvent(Base):
    """Personal goal a user pins on their own calendar."""
    __tablename__ = "calendar_events"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    date = Column(DateTime, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    owner = relationship("User")
