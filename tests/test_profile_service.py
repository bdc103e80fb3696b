from __future__ import annotations

import pytest

from swapcore.crud import skill as skill_crud
from swapcore.exceptions import UnknownUser
from swapcore.services import profile_service


def test_sign_up_defaults_and_badges(db_session, catalog):
    user = profile_service.sign_up(
        db_session,
        name="  Ada  ",
        bio="Pythonista",
        skills_to_teach=[(catalog["Python"], 3)],
        skills_to_learn=[catalog["Spanish"], catalog["Guitar"], catalog["Cooking"]],
    )

    assert user.name == "Ada"
    assert (user.level, user.xp, user.streak) == (1, 0, 0)
    assert user.teacher_rating == 0.0 and user.total_ratings == 0
    assert user.matches == []
    assert set(user.badges) == {"Newbie", "First Lesson", "Curious Learner", "Skill Seeker"}
    assert [(s.name, s.proficiency) for s in user.skills_to_teach] == [("Python", 3)]
    assert user.verified_skills == set()


def test_sign_up_rejects_unknown_skill_and_bad_proficiency(db_session, catalog):
    with pytest.raises(ValueError):
        profile_service.sign_up(db_session, name="Ada", skills_to_learn=[9999])
    with pytest.raises(ValueError):
        profile_service.sign_up(db_session, name="Ada", skills_to_teach=[(catalog["Python"], 4)])
    with pytest.raises(ValueError):
        profile_service.sign_up(db_session, name="   ")


def test_skill_sets_are_keyed_by_skill_id(db_session, catalog):
    user = profile_service.sign_up(
        db_session,
        name="Ada",
        skills_to_teach=[(catalog["Python"], 1), (catalog["Python"], 2)],
        skills_to_learn=[catalog["French"], catalog["French"]],
    )
    assert [(s.skill_id, s.proficiency) for s in user.skills_to_teach] == [(catalog["Python"], 2)]
    assert len(user.skills_to_learn) == 1


def test_verify_only_taught_skills(db_session, catalog):
    user = profile_service.sign_up(
        db_session,
        name="Ada",
        skills_to_teach=[(catalog["Python"], 3)],
        skills_to_learn=[catalog["Spanish"]],
    )

    profile_service.verify_skill(db_session, user.id, catalog["Python"])
    assert user.verified_skills == {catalog["Python"]}

    with pytest.raises(ValueError):
        profile_service.verify_skill(db_session, user.id, catalog["Spanish"])


def test_dropping_a_taught_skill_drops_its_verification(db_session, catalog):
    user = profile_service.sign_up(
        db_session,
        name="Ada",
        skills_to_teach=[(catalog["Python"], 3), (catalog["Guitar"], 1)],
    )
    profile_service.verify_skill(db_session, user.id, catalog["Python"])
    profile_service.verify_skill(db_session, user.id, catalog["Guitar"])

    profile_service.update_profile(db_session, user.id, skills_to_teach=[(catalog["Guitar"], 2)])
    assert user.verified_skills == {catalog["Guitar"]}

    profile_service.update_profile(db_session, user.id, skills_to_teach=[(catalog["Python"], 1), (catalog["Guitar"], 2)])
    assert user.verified_skills == {catalog["Guitar"]}


def test_profile_edit_keeps_earned_badges(db_session, catalog):
    skills = [catalog[name] for name in ("Python", "React", "Guitar")]
    user = profile_service.sign_up(db_session, name="Ada", skills_to_teach=[(s, 1) for s in skills])
    assert "Mentor" in user.badges

    profile_service.update_profile(db_session, user.id, name="Ada L.", skills_to_teach=[])

    assert user.name == "Ada L."
    assert user.skills_to_teach == []
    assert {"Mentor", "First Lesson"} <= set(user.badges)


def test_update_unknown_user(db_session):
    with pytest.raises(UnknownUser):
        profile_service.update_profile(db_session, 77, name="Ghost")


def test_catalog_seed_is_idempotent(db_session):
    first = skill_crud.seed_skill_catalog(db_session)
    second = skill_crud.seed_skill_catalog(db_session)
    assert first == len(skill_crud.DEFAULT_SKILL_CATALOG)
    assert second == 0
