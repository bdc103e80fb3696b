# swapcore/services/calendar_service.py
"""
Calendar export and the per-user calendar view.

`to_ics_text` and `to_google_calendar_url` are pure formatters; times are
naive UTC datetimes as stored on matches.
"""

import uuid
from datetime import datetime, timedelta, UTC
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from swapcore import models
from swapcore.config import settings
from swapcore.crud import calendar_event as calendar_crud
from swapcore.crud import match as match_crud
from swapcore.crud import user as user_crud
from swapcore.exceptions import NotConnected

GOOGLE_CALENDAR_BASE_URL = "https://www.google.com/calendar/render"
DEFAULT_SESSION_LENGTH = timedelta(hours=1)
PRODID = "-//SkillSwap//Session Lifecycle//EN"


def _utc_stamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.strftime("%Y%m%dT%H%M%SZ")


def _escape_ics_text(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def to_ics_text(
    title: str,
    description: str,
    start_time: datetime,
    end_time: Optional[datetime] = None,
    *,
    url: Optional[str] = None,
    uid: Optional[str] = None,
    stamp: Optional[datetime] = None,
) -> str:
    """Render a single-event VCALENDAR block (CRLF line endings)."""
    end_time = end_time or start_time + DEFAULT_SESSION_LENGTH
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "BEGIN:VEVENT",
        f"UID:{uid or uuid.uuid4()}@skillswap",
        f"DTSTAMP:{_utc_stamp(stamp or datetime.now(UTC))}",
    ]
    if url:
        lines.append(f"URL:{url}")
    lines += [
        f"DTSTART:{_utc_stamp(start_time)}",
        f"DTEND:{_utc_stamp(end_time)}",
        f"SUMMARY:{_escape_ics_text(title)}",
        f"DESCRIPTION:{_escape_ics_text(description)}",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines) + "\r\n"


def to_google_calendar_url(
    title: str,
    description: str,
    start_time: datetime,
    end_time: Optional[datetime] = None,
) -> str:
    end_time = end_time or start_time + DEFAULT_SESSION_LENGTH
    query = urlencode({
        "action": "TEMPLATE",
        "text": title,
        "dates": f"{_utc_stamp(start_time)}/{_utc_stamp(end_time)}",
        "details": description,
    })
    return f"{GOOGLE_CALENDAR_BASE_URL}?{query}"


# ======================
# SESSION EVENTS
# ======================

def _overlap_skill(teacher: models.User, learner: models.User) -> Optional[str]:
    """First skill `teacher` teaches that `learner` wants to learn."""
    wanted = {us.skill_id for us in learner.skills_to_learn}
    for user_skill in teacher.skills_to_teach:
        if user_skill.skill_id in wanted:
            return user_skill.name
    return None


def session_event_for(db: Session, user_id: int, partner_id: int) -> Dict[str, Any]:
    """
    Build the calendar event for the scheduled session between two users.

    Raises:
        NotConnected: If the users have no match
        ValueError: If no session is scheduled
    """
    user = user_crud.require_user(db, user_id)
    partner = user_crud.require_user(db, partner_id)
    match = match_crud.get_match(db, user_id, partner_id)
    if match is None:
        raise NotConnected(user_id, partner_id)
    if match.scheduled_session is None:
        raise ValueError("No session is scheduled with this partner")

    learning = _overlap_skill(partner, user) or "a skill"
    teaching = _overlap_skill(user, partner) or "a skill"
    return {
        "title": f"{learning} Session with {partner.name}",
        "description": (
            "A SkillSwap session.\n\n"
            f"You are learning: {learning}.\n"
            f"You are teaching: {teaching}."
        ),
        "start_time": match.scheduled_session,
        "end_time": match.scheduled_session + DEFAULT_SESSION_LENGTH,
    }


def session_ics(db: Session, user_id: int, partner_id: int) -> str:
    event = session_event_for(db, user_id, partner_id)
    return to_ics_text(
        event["title"],
        event["description"],
        event["start_time"],
        event["end_time"],
        url=settings.CALENDAR_EVENT_URL,
        uid=f"swap-{min(user_id, partner_id)}-{max(user_id, partner_id)}-{_utc_stamp(event['start_time'])}",
    )


def session_google_url(db: Session, user_id: int, partner_id: int) -> str:
    event = session_event_for(db, user_id, partner_id)
    return to_google_calendar_url(
        event["title"], event["description"], event["start_time"], event["end_time"]
    )


# ======================
# CALENDAR VIEW
# ======================

def add_calendar_event(db: Session, owner_id: int, title: str, date: datetime) -> models.CalendarEvent:
    user_crud.require_user(db, owner_id)
    title = (title or "").strip()
    if not title:
        raise ValueError("Event title cannot be empty")
    event = calendar_crud.create_calendar_event(db, owner_id=owner_id, title=title, date=date)
    db.commit()
    db.refresh(event)
    return event


def calendar_for(db: Session, user_id: int) -> List[Dict[str, Any]]:
    """Scheduled swap sessions and personal events, earliest first."""
    user = user_crud.require_user(db, user_id)
    entries = []

    for match in user.matches:
        if match.scheduled_session is None or match.partner is None:
            continue
        partner = match.partner
        learning = _overlap_skill(partner, user)
        teaching = _overlap_skill(user, partner)
        description = f"A SkillSwap session with {partner.name}."
        if learning:
            description += f"\nYou are learning: {learning}."
        if teaching:
            description += f"\nYou are teaching: {teaching}."
        entries.append({
            "id": f"swap-{partner.id}-{_utc_stamp(match.scheduled_session)}",
            "type": "swap",
            "title": f"Session with {partner.name}",
            "description": description,
            "date": match.scheduled_session,
            "partner_id": partner.id,
        })

    for event in calendar_crud.get_calendar_events(db, user_id):
        entries.append({
            "id": f"personal-{event.id}",
            "type": "personal",
            "title": event.title,
            "description": f"A session for {event.title}.",
            "date": event.date,
            "partner_id": None,
        })

    return sorted(entries, key=lambda entry: entry["date"])
