# swapcore/services/negotiation.py
"""
Session Negotiation Protocol

Propose / accept / decline layered on a match. The negotiation state lives
in the match's optional fields:

- none:      no proposal, no scheduled session
- pending:   proposal set (scheduled session cleared)
- scheduled: scheduled session set, proposal cleared

Every step is mirrored onto both views and announced with a system message
in the pair's conversation.
"""

import logging
from datetime import datetime, UTC
from typing import Any, Dict, Union

from sqlalchemy.orm import Session

from swapcore.crud import user as user_crud
from swapcore.services import message_service
from swapcore.services.directory import apply_mirrored, mirrored_pair
from swapcore.services.lifecycle import Outcome

logger = logging.getLogger(__name__)

PROPOSAL_PENDING = "pending"
RESPONSES = ("accepted", "declined")


# ======================
# DATE HELPERS
# ======================

def parse_session_date(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO 8601 date into a naive UTC datetime (seconds precision).

    Naive input is taken to already be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(
                "Invalid session date format. Use ISO 8601 (e.g., '2024-06-01T10:00:00Z')"
            )
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed.replace(microsecond=0)


def format_session_date(value: datetime) -> str:
    """Medium date, short time, e.g. 'Jun 1, 2024, 10:00 AM' (UTC)."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value:%b} {value.day}, {value.year}, {hour}:{value:%M} {meridiem}"


# ======================
# PROPOSE
# ======================

def propose_session(
    db: Session,
    proposer_id: int,
    counterpart_id: int,
    date: Union[str, datetime],
) -> Dict[str, Any]:
    """
    Propose a session date to a connected partner.

    Clears any scheduled session. An outstanding proposal is replaced and
    the result reports PROPOSAL_SUPERSEDED, with a system message recording
    the replaced date.

    Raises:
        ValueError: If the date cannot be parsed
        UnknownUser: If either user does not exist
        NotConnected: If the users have no match
    """
    when = parse_session_date(date)
    proposer = user_crud.require_user(db, proposer_id)
    user_crud.require_user(db, counterpart_id)

    superseded = []
    events = {}

    def _set_proposal(match):
        if match.owner_id == proposer_id and match.proposal_status == PROPOSAL_PENDING:
            superseded.append(match.proposal_date)
        match.proposal_proposer_id = proposer_id
        match.proposal_date = when
        match.proposal_status = PROPOSAL_PENDING
        match.scheduled_session = None

    def _announce(own, mirror):
        if superseded:
            events["superseded"] = message_service.emit_system_message(
                db,
                actor_id=proposer_id,
                counterpart_id=counterpart_id,
                event_type="session_proposal_superseded",
                date=format_session_date(superseded[0]),
            )
        events["proposed"] = message_service.emit_system_message(
            db,
            actor_id=proposer_id,
            counterpart_id=counterpart_id,
            event_type="session_proposed",
            name=proposer.name,
            date=format_session_date(when),
        )

    own, _ = apply_mirrored(db, proposer_id, counterpart_id, _set_proposal, side_effect=_announce)

    outcome = Outcome.PROPOSAL_SUPERSEDED if superseded else Outcome.PROPOSED
    logger.info(
        "Session proposed (proposer_id=%s, counterpart_id=%s, date=%s, outcome=%s)",
        proposer_id, counterpart_id, when.isoformat(), outcome.value,
    )
    return {
        "outcome": outcome,
        "match": own,
        "event": events["proposed"],
        "superseded_date": superseded[0] if superseded else None,
    }


# ======================
# RESPOND
# ======================

def respond_to_proposal(
    db: Session,
    responder_id: int,
    counterpart_id: int,
    response: str,
) -> Dict[str, Any]:
    """
    Accept or decline the pending proposal between two users.

    accepted: the proposal date becomes the scheduled session.
    declined: the proposal is dropped, nothing is scheduled.
    With no pending proposal the call is a no-op (NO_PENDING_PROPOSAL).

    Raises:
        ValueError: If `response` is not 'accepted'/'declined', or the
            proposer tries to accept their own proposal
        UnknownUser: If either user does not exist
        NotConnected: If the users have no match
    """
    if response not in RESPONSES:
        raise ValueError("Response must be 'accepted' or 'declined'")
    user_crud.require_user(db, responder_id)
    user_crud.require_user(db, counterpart_id)

    with mirrored_pair(db, responder_id, counterpart_id) as (own, mirror):
        if own.proposal_status != PROPOSAL_PENDING:
            return {"outcome": Outcome.NO_PENDING_PROPOSAL, "match": own, "event": None}
        if response == "accepted" and own.proposal_proposer_id == responder_id:
            raise ValueError("You cannot accept your own proposal")

        proposal_date = own.proposal_date
        for match in (own, mirror):
            if response == "accepted":
                match.scheduled_session = proposal_date
            match.proposal_proposer_id = None
            match.proposal_date = None
            match.proposal_status = None

        event = message_service.emit_system_message(
            db,
            actor_id=responder_id,
            counterpart_id=counterpart_id,
            event_type="session_confirmed" if response == "accepted" else "session_declined",
            date=format_session_date(proposal_date),
        )

    logger.info(
        "Session proposal %s (responder_id=%s, counterpart_id=%s)",
        response, responder_id, counterpart_id,
    )
    return {
        "outcome": Outcome.ACCEPTED if response == "accepted" else Outcome.DECLINED,
        "match": own,
        "event": event,
    }
