from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CalendarEventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    date: str = Field(..., description="ISO 8601 date")


class CalendarEntry(BaseModel):
    id: str
    type: str  # "swap" or "personal"
    title: str
    description: str
    date: datetime
    partner_id: Optional[int] = None


class CalendarEvent(BaseModel):
    id: int
    owner_id: int
    title: str
    date: datetime

    model_config = ConfigDict(from_attributes=True)


class GoogleCalendarLink(BaseModel):
    url: str
