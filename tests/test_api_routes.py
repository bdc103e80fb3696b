from __future__ import annotations

import pytest

pytest.importorskip("fastapi")

from fastapi import HTTPException  # noqa: E402

from swapcore.api import matches, messages, sessions, users  # noqa: E402
from swapcore.api.deps import get_current_user, require_admin  # noqa: E402
from swapcore.schemas.match import ProposalCreate, ProposalReply, RatingCreate, StatusUpdate  # noqa: E402
from swapcore.schemas.message import MessageCreate, PostCreate, ReactionUpdate  # noqa: E402
from swapcore.schemas.user import TeachSkillIn, UserCreate  # noqa: E402
from swapcore.services import profile_service  # noqa: E402


def _sign_up(db, name, **kwargs):
    return users.sign_up(payload=UserCreate(name=name, **kwargs), db=db)


def _admin(db):
    root = profile_service.sign_up(db, name="Root", is_admin=True)
    return get_current_user(x_user_id=root.id, db=db)


def test_sign_up_route_returns_profile(db_session, catalog):
    created = _sign_up(
        db_session,
        "Ada",
        skills_to_teach=[TeachSkillIn(skill_id=catalog["Python"], proficiency=3)],
        skills_to_learn=[catalog["Spanish"]],
    )

    assert created.level == 1 and created.xp == 0
    assert "Newbie" in created.badges
    assert created.skills_to_teach[0].name == "Python"
    assert created.skills_to_learn[0].skill_id == catalog["Spanish"]


def test_sign_up_unknown_skill_is_bad_request(db_session):
    with pytest.raises(HTTPException) as exc:
        _sign_up(db_session, "Ada", skills_to_learn=[404])
    assert exc.value.status_code == 400


def test_sign_up_ignores_admin_flag_in_payload(db_session):
    victim = _sign_up(db_session, "Victim")
    created = _sign_up(db_session, "Mallory", is_admin=True)
    assert created.is_admin is False

    mallory = get_current_user(x_user_id=created.id, db=db_session)
    with pytest.raises(HTTPException) as exc:
        require_admin(current_user=mallory)
    assert exc.value.status_code == 403
    assert users.get_user(user_id=victim.id, db=db_session).id == victim.id


def test_current_user_header_is_required(db_session):
    with pytest.raises(HTTPException) as exc:
        get_current_user(x_user_id=None, db=db_session)
    assert exc.value.status_code == 401

    with pytest.raises(HTTPException) as exc:
        get_current_user(x_user_id=999, db=db_session)
    assert exc.value.status_code == 401


def test_admin_routes_reject_regular_users(db_session):
    ada = _sign_up(db_session, "Ada")
    user = get_current_user(x_user_id=ada.id, db=db_session)

    with pytest.raises(HTTPException) as exc:
        require_admin(current_user=user)
    assert exc.value.status_code == 403


def test_connect_status_and_rating_routes(db_session):
    ada = get_current_user(x_user_id=_sign_up(db_session, "Ada").id, db=db_session)
    bea = get_current_user(x_user_id=_sign_up(db_session, "Bea").id, db=db_session)

    connected = matches.connect(partner_id=bea.id, current_user=ada, db=db_session)
    assert connected.outcome == "connected"
    assert connected.xp_awarded == 25

    again = matches.connect(partner_id=ada.id, current_user=bea, db=db_session)
    assert again.outcome == "already_connected"
    assert again.xp_awarded == 0

    with pytest.raises(HTTPException) as exc:
        matches.rate_session(partner_id=bea.id, payload=RatingCreate(rating=5), current_user=ada, db=db_session)
    assert exc.value.status_code == 400

    matches.update_status(partner_id=bea.id, payload=StatusUpdate(status="in-progress"), current_user=ada, db=db_session)
    done = matches.update_status(partner_id=bea.id, payload=StatusUpdate(status="completed"), current_user=bea, db=db_session)
    assert done.status.value == "completed"
    assert done.user_id == ada.id

    rated = matches.rate_session(partner_id=bea.id, payload=RatingCreate(rating=4), current_user=ada, db=db_session)
    assert rated.teacher_rating == 4.0
    assert rated.total_ratings == 1

    mine = matches.get_my_matches(current_user=ada, db=db_session)
    assert [(m.user_id, m.rating) for m in mine] == [(bea.id, 4)]


def test_unknown_partner_is_not_found(db_session):
    ada = get_current_user(x_user_id=_sign_up(db_session, "Ada").id, db=db_session)

    with pytest.raises(HTTPException) as exc:
        matches.connect(partner_id=999, current_user=ada, db=db_session)
    assert exc.value.status_code == 404

    with pytest.raises(HTTPException) as exc:
        matches.update_status(partner_id=ada.id + 1, payload=StatusUpdate(status="in-progress"), current_user=ada, db=db_session)
    assert exc.value.status_code == 404


def test_invalid_transition_is_bad_request(db_session):
    ada = get_current_user(x_user_id=_sign_up(db_session, "Ada").id, db=db_session)
    bea = get_current_user(x_user_id=_sign_up(db_session, "Bea").id, db=db_session)
    matches.connect(partner_id=bea.id, current_user=ada, db=db_session)

    with pytest.raises(HTTPException) as exc:
        matches.update_status(partner_id=bea.id, payload=StatusUpdate(status="completed"), current_user=ada, db=db_session)
    assert exc.value.status_code == 400


def test_negotiation_routes(db_session):
    ada = get_current_user(x_user_id=_sign_up(db_session, "Ada").id, db=db_session)
    bea = get_current_user(x_user_id=_sign_up(db_session, "Bea").id, db=db_session)
    matches.connect(partner_id=bea.id, current_user=ada, db=db_session)

    proposed = sessions.propose_session(
        partner_id=bea.id, payload=ProposalCreate(date="2024-06-01T10:00:00Z"), current_user=ada, db=db_session
    )
    assert proposed.outcome == "proposed"
    assert proposed.match.session_proposal.proposer_id == ada.id
    assert proposed.event.event_type == "session_proposed"

    accepted = sessions.respond_to_proposal(
        partner_id=ada.id, payload=ProposalReply(response="accepted"), current_user=bea, db=db_session
    )
    assert accepted.outcome == "accepted"
    assert accepted.match.session_proposal is None
    assert accepted.match.scheduled_session.isoformat() == "2024-06-01T10:00:00"

    again = sessions.respond_to_proposal(
        partner_id=ada.id, payload=ProposalReply(response="declined"), current_user=bea, db=db_session
    )
    assert again.outcome == "no_pending_proposal"
    assert again.event is None

    link = sessions.google_calendar_link(partner_id=bea.id, current_user=ada, db=db_session)
    assert link.url.startswith("https://www.google.com/calendar/render?")

    ics = sessions.download_ics(partner_id=bea.id, current_user=ada, db=db_session)
    assert ics.media_type.startswith("text/calendar")
    assert b"DTSTART:20240601T100000Z" in ics.body


def test_bad_proposal_date_is_bad_request(db_session):
    ada = get_current_user(x_user_id=_sign_up(db_session, "Ada").id, db=db_session)
    bea = get_current_user(x_user_id=_sign_up(db_session, "Bea").id, db=db_session)
    matches.connect(partner_id=bea.id, current_user=ada, db=db_session)

    with pytest.raises(HTTPException) as exc:
        sessions.propose_session(partner_id=bea.id, payload=ProposalCreate(date="next tuesday"), current_user=ada, db=db_session)
    assert exc.value.status_code == 400


def test_message_and_reaction_routes(db_session):
    ada = get_current_user(x_user_id=_sign_up(db_session, "Ada").id, db=db_session)
    bea = get_current_user(x_user_id=_sign_up(db_session, "Bea").id, db=db_session)

    sent = messages.send_message(partner_id=bea.id, payload=MessageCreate(text="Hi Bea"), current_user=ada, db=db_session)
    reacted = messages.react_to_message(
        partner_id=ada.id, message_id=sent.id, payload=ReactionUpdate(reaction="👍"), current_user=bea, db=db_session
    )
    assert reacted.reaction == "👍"

    conversation = messages.get_conversation(partner_id=ada.id, limit=200, current_user=bea, db=db_session)
    assert [m.text for m in conversation] == ["Hi Bea"]


def test_reaction_with_wrong_partner_is_not_stored(db_session):
    ada = get_current_user(x_user_id=_sign_up(db_session, "Ada").id, db=db_session)
    bea = get_current_user(x_user_id=_sign_up(db_session, "Bea").id, db=db_session)
    cy = get_current_user(x_user_id=_sign_up(db_session, "Cy").id, db=db_session)
    sent = messages.send_message(partner_id=bea.id, payload=MessageCreate(text="Hi Bea"), current_user=ada, db=db_session)

    for partner_id in (999, cy.id):
        with pytest.raises(HTTPException) as exc:
            messages.react_to_message(
                partner_id=partner_id, message_id=sent.id, payload=ReactionUpdate(reaction="X"), current_user=bea, db=db_session
            )
        assert exc.value.status_code == 404

    with pytest.raises(HTTPException) as exc:
        messages.react_to_message(
            partner_id=bea.id, message_id=sent.id, payload=ReactionUpdate(reaction="X"), current_user=cy, db=db_session
        )
    assert exc.value.status_code == 404

    stored = messages.get_conversation(partner_id=bea.id, limit=200, current_user=ada, db=db_session)
    assert [m.reaction for m in stored] == [None]


def test_same_reaction_twice_clears_it(db_session):
    ada = get_current_user(x_user_id=_sign_up(db_session, "Ada").id, db=db_session)
    bea = get_current_user(x_user_id=_sign_up(db_session, "Bea").id, db=db_session)
    sent = messages.send_message(partner_id=bea.id, payload=MessageCreate(text="Hi Bea"), current_user=ada, db=db_session)

    first = messages.react_to_message(
        partner_id=bea.id, message_id=sent.id, payload=ReactionUpdate(reaction="X"), current_user=ada, db=db_session
    )
    assert first.reaction == "X"
    second = messages.react_to_message(
        partner_id=bea.id, message_id=sent.id, payload=ReactionUpdate(reaction="X"), current_user=ada, db=db_session
    )
    assert second.reaction is None


def test_post_delete_requires_existing_post(db_session):
    admin = _admin(db_session)
    post = messages.create_post(payload=PostCreate(caption="Learning guitar!"), current_user=admin, db=db_session)

    assert messages.delete_post(post_id=post.id, admin=admin, db=db_session)
    with pytest.raises(HTTPException) as exc:
        messages.delete_post(post_id=post.id, admin=admin, db=db_session)
    assert exc.value.status_code == 404


def test_admin_cannot_delete_self(db_session):
    admin = _admin(db_session)
    ada = _sign_up(db_session, "Ada")

    with pytest.raises(HTTPException) as exc:
        users.delete_user(user_id=admin.id, admin=admin, db=db_session)
    assert exc.value.status_code == 400

    assert users.delete_user(user_id=ada.id, admin=admin, db=db_session)["user_id"] == ada.id
    with pytest.raises(HTTPException) as exc:
        users.get_user(user_id=ada.id, db=db_session)
    assert exc.value.status_code == 404
