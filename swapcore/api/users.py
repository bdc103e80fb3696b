from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from swapcore import models
from swapcore.api.deps import get_current_user, raise_http_error, require_admin
from swapcore.crud import skill as skill_crud
from swapcore.crud import user as user_crud
from swapcore.database import get_db
from swapcore.schemas.user import ProfileUpdate, Skill, User, UserCreate
from swapcore.services import directory, profile_service

router = APIRouter(prefix="/users", tags=["Users"])
skills_router = APIRouter(prefix="/skills", tags=["Skills"])


# ======================
# SIGN-UP
# ======================
@router.post("/", response_model=User, status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: UserCreate,
    db: Session = Depends(get_db)
):
    """Public self-registration. Administrator accounts come from swapcore.scripts.bootstrap_admin."""
    try:
        user = profile_service.sign_up(
            db,
            name=payload.name,
            bio=payload.bio,
            skills_to_teach=[(s.skill_id, s.proficiency) for s in payload.skills_to_teach],
            skills_to_learn=payload.skills_to_learn,
            is_admin=False,
        )
    except ValueError as e:
        raise_http_error(e)
    return User.model_validate(user)


# ======================
# PROFILE
# ======================
@router.get("/me", response_model=User)
def get_me(current_user: models.User = Depends(get_current_user)):
    return User.model_validate(current_user)


@router.patch("/me", response_model=User)
def update_me(
    payload: ProfileUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        user = profile_service.update_profile(
            db,
            current_user.id,
            name=payload.name,
            bio=payload.bio,
            skills_to_teach=(
                [(s.skill_id, s.proficiency) for s in payload.skills_to_teach]
                if payload.skills_to_teach is not None
                else None
            ),
            skills_to_learn=payload.skills_to_learn,
        )
    except ValueError as e:
        raise_http_error(e)
    return User.model_validate(user)


@router.post("/me/verified-skills/{skill_id}", response_model=User)
def verify_my_skill(
    skill_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        user = profile_service.verify_skill(db, current_user.id, skill_id)
    except ValueError as e:
        raise_http_error(e)
    return User.model_validate(user)


@router.get("/{user_id}", response_model=User)
def get_user(
    user_id: int,
    db: Session = Depends(get_db)
):
    user = user_crud.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return User.model_validate(user)


# ======================
# ADMIN: DELETE USER
# ======================
@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Delete a user and everything attached to them. The client confirms first."""
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="Admins cannot delete their own account")
    try:
        return directory.delete_user(db, user_id)
    except ValueError as e:
        raise_http_error(e)


# ======================
# SKILL CATALOG
# ======================
@skills_router.get("/", response_model=list[Skill])
def list_skills(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    return [Skill.model_validate(s) for s in skill_crud.get_skills(db, skip=skip, limit=limit)]
