# swapcore/api/sessions.py
"""
Session Negotiation API Router

Endpoints:
- POST /sessions/{partner_id}/proposal - Propose a session date
- POST /sessions/{partner_id}/proposal/response - Accept or decline
- GET /sessions/{partner_id}/calendar.ics - Scheduled session as iCalendar
- GET /sessions/{partner_id}/google-calendar - Google Calendar link
- GET /sessions/calendar - Swap sessions and personal events
- POST /sessions/calendar/events - Add a personal event
"""

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from swapcore import models
from swapcore.api.deps import get_current_user, raise_http_error
from swapcore.database import get_db
from swapcore.schemas.calendar import CalendarEntry, CalendarEvent, CalendarEventCreate, GoogleCalendarLink
from swapcore.schemas.match import (
    Match,
    NegotiationResponse,
    ProposalCreate,
    ProposalReply,
    SystemMessageEvent,
)
from swapcore.services import calendar_service, negotiation

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _negotiation_response(result) -> NegotiationResponse:
    return NegotiationResponse(
        outcome=result["outcome"].value,
        match=Match.from_model(result["match"]),
        event=SystemMessageEvent.model_validate(result["event"]) if result["event"] else None,
        superseded_date=result.get("superseded_date"),
    )


# ======================
# CALENDAR VIEW
# ======================
@router.get("/calendar", response_model=List[CalendarEntry])
def get_calendar(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return [CalendarEntry(**entry) for entry in calendar_service.calendar_for(db, current_user.id)]


@router.post("/calendar/events", response_model=CalendarEvent, status_code=status.HTTP_201_CREATED)
def add_calendar_event(
    payload: CalendarEventCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        when = negotiation.parse_session_date(payload.date)
        event = calendar_service.add_calendar_event(db, current_user.id, payload.title, when)
    except ValueError as e:
        raise_http_error(e)
    return CalendarEvent.model_validate(event)


# ======================
# PROPOSE / RESPOND
# ======================
@router.post("/{partner_id}/proposal", response_model=NegotiationResponse)
def propose_session(
    partner_id: int,
    payload: ProposalCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        result = negotiation.propose_session(db, current_user.id, partner_id, payload.date)
    except ValueError as e:
        raise_http_error(e)
    return _negotiation_response(result)


@router.post("/{partner_id}/proposal/response", response_model=NegotiationResponse)
def respond_to_proposal(
    partner_id: int,
    payload: ProposalReply,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        result = negotiation.respond_to_proposal(db, current_user.id, partner_id, payload.response)
    except ValueError as e:
        raise_http_error(e)
    return _negotiation_response(result)


# ======================
# CALENDAR EXPORT
# ======================
@router.get("/{partner_id}/calendar.ics")
def download_ics(
    partner_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        body = calendar_service.session_ics(db, current_user.id, partner_id)
    except ValueError as e:
        raise_http_error(e)
    return Response(
        content=body,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="skillswap-session.ics"'},
    )


@router.get("/{partner_id}/google-calendar", response_model=GoogleCalendarLink)
def google_calendar_link(
    partner_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        url = calendar_service.session_google_url(db, current_user.id, partner_id)
    except ValueError as e:
        raise_http_error(e)
    return GoogleCalendarLink(url=url)
