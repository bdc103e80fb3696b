from __future__ import annotations

from datetime import datetime

import pytest

from swapcore import models
from swapcore.crud import match as match_crud
from swapcore.exceptions import NotConnected
from swapcore.services import directory, message_service, negotiation, profile_service
from swapcore.services.lifecycle import Outcome

PROPOSED_AT = "2024-06-01T10:00:00Z"
PROPOSED_DT = datetime(2024, 6, 1, 10, 0)


@pytest.fixture
def pair(db_session):
    a = profile_service.sign_up(db_session, name="Ada")
    b = profile_service.sign_up(db_session, name="Bea")
    directory.connect(db_session, a.id, b.id)
    return a, b


def _views(db, a, b):
    return match_crud.get_pair(db, a.id, b.id)


def test_propose_sets_pending_on_both_views(db_session, pair):
    a, b = pair

    result = negotiation.propose_session(db_session, a.id, b.id, PROPOSED_AT)

    assert result["outcome"] is Outcome.PROPOSED
    for view in _views(db_session, a, b):
        assert view.proposal_proposer_id == a.id
        assert view.proposal_date == PROPOSED_DT
        assert view.proposal_status == "pending"
        assert view.scheduled_session is None
    event = result["event"]
    assert event.is_system_message is True
    assert event.event_type == "session_proposed"
    assert event.text == "Ada proposed a session for Jun 1, 2024, 10:00 AM."
    assert (event.sender_id, event.receiver_id) == (a.id, b.id)


def test_decline_clears_proposal_and_announces(db_session, pair):
    a, b = pair
    negotiation.propose_session(db_session, a.id, b.id, PROPOSED_AT)

    result = negotiation.respond_to_proposal(db_session, b.id, a.id, "declined")

    assert result["outcome"] is Outcome.DECLINED
    for view in _views(db_session, a, b):
        assert view.proposal_status is None
        assert view.proposal_date is None
        assert view.scheduled_session is None
    assert result["event"].event_type == "session_declined"
    assert "Jun 1, 2024, 10:00 AM" in result["event"].text


def test_accept_schedules_the_session(db_session, pair):
    a, b = pair
    negotiation.propose_session(db_session, a.id, b.id, PROPOSED_AT)

    result = negotiation.respond_to_proposal(db_session, b.id, a.id, "accepted")

    assert result["outcome"] is Outcome.ACCEPTED
    own, mirror = _views(db_session, a, b)
    assert own.shared_state() == mirror.shared_state()
    assert own.scheduled_session == PROPOSED_DT
    assert own.proposal_status is None
    assert result["event"].text == "Session confirmed for Jun 1, 2024, 10:00 AM!"


def test_new_proposal_supersedes_pending_one(db_session, pair):
    a, b = pair
    negotiation.propose_session(db_session, a.id, b.id, PROPOSED_AT)

    result = negotiation.propose_session(db_session, b.id, a.id, "2024-06-03T15:30:00+02:00")

    assert result["outcome"] is Outcome.PROPOSAL_SUPERSEDED
    assert result["superseded_date"] == PROPOSED_DT
    for view in _views(db_session, a, b):
        assert view.proposal_proposer_id == b.id
        assert view.proposal_date == datetime(2024, 6, 3, 13, 30)
    event_types = [m.event_type for m in message_service.list_conversation(db_session, user_id=a.id, partner_id=b.id)]
    assert event_types == ["session_proposed", "session_proposal_superseded", "session_proposed"]


def test_proposal_clears_scheduled_session(db_session, pair):
    a, b = pair
    negotiation.propose_session(db_session, a.id, b.id, PROPOSED_AT)
    negotiation.respond_to_proposal(db_session, b.id, a.id, "accepted")

    negotiation.propose_session(db_session, b.id, a.id, "2024-07-01T09:00:00Z")

    for view in _views(db_session, a, b):
        assert view.scheduled_session is None
        assert view.proposal_status == "pending"


def test_responding_without_a_proposal_is_a_no_op(db_session, pair):
    a, b = pair

    result = negotiation.respond_to_proposal(db_session, b.id, a.id, "accepted")

    assert result["outcome"] is Outcome.NO_PENDING_PROPOSAL
    assert result["event"] is None
    assert db_session.query(models.Message).count() == 0


def test_proposer_cannot_accept_own_proposal(db_session, pair):
    a, b = pair
    negotiation.propose_session(db_session, a.id, b.id, PROPOSED_AT)

    with pytest.raises(ValueError):
        negotiation.respond_to_proposal(db_session, a.id, b.id, "accepted")

    own, _ = _views(db_session, a, b)
    assert own.proposal_status == "pending"


def test_proposer_may_withdraw_by_declining(db_session, pair):
    a, b = pair
    negotiation.propose_session(db_session, a.id, b.id, PROPOSED_AT)

    result = negotiation.respond_to_proposal(db_session, a.id, b.id, "declined")

    assert result["outcome"] is Outcome.DECLINED


def test_invalid_response_and_date(db_session, pair):
    a, b = pair
    with pytest.raises(ValueError):
        negotiation.respond_to_proposal(db_session, b.id, a.id, "maybe")
    with pytest.raises(ValueError):
        negotiation.propose_session(db_session, a.id, b.id, "next tuesday")


def test_negotiation_requires_a_connection(db_session):
    a = profile_service.sign_up(db_session, name="Ada")
    c = profile_service.sign_up(db_session, name="Cy")
    with pytest.raises(NotConnected):
        negotiation.propose_session(db_session, a.id, c.id, PROPOSED_AT)
    with pytest.raises(NotConnected):
        negotiation.respond_to_proposal(db_session, a.id, c.id, "declined")


def test_failed_announcement_leaves_both_views_untouched(db_session, pair, monkeypatch):
    a, b = pair

    def _fail(*args, **kwargs):
        raise RuntimeError("message log unavailable")

    monkeypatch.setattr(message_service, "emit_system_message", _fail)

    with pytest.raises(RuntimeError):
        negotiation.propose_session(db_session, a.id, b.id, PROPOSED_AT)

    for view in _views(db_session, a, b):
        assert view.proposal_status is None


def test_format_session_date():
    assert negotiation.format_session_date(datetime(2024, 6, 1, 0, 5)) == "Jun 1, 2024, 12:05 AM"
    assert negotiation.format_session_date(datetime(2024, 12, 25, 18, 45)) == "Dec 25, 2024, 6:45 PM"


def test_parse_session_date_normalises_to_utc():
    assert negotiation.parse_session_date("2024-06-01T12:00:00.123+02:00") == PROPOSED_DT
    assert negotiation.parse_session_date("2024-06-01T10:00:00") == PROPOSED_DT
