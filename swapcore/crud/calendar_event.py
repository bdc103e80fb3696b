from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from swapcore import models


def create_calendar_event(db: Session, *, owner_id: int, title: str, date: datetime) -> models.CalendarEvent:
    event = models.CalendarEvent(owner_id=owner_id, title=title, date=date)
    db.add(event)
    db.flush()
    return event


def get_calendar_events(db: Session, owner_id: int) -> List[models.CalendarEvent]:
    return (
        db.query(models.CalendarEvent)
        .filter(models.CalendarEvent.owner_id == owner_id)
        .order_by(models.CalendarEvent.date.asc())
        .all()
    )
