from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ======================
# SKILL SCHEMAS
# ======================

class Skill(BaseModel):
    id: int
    name: str
    category: Optional[str] = "General"

    model_config = ConfigDict(from_attributes=True)


class TeachSkillIn(BaseModel):
    skill_id: int
    proficiency: int = Field(1, ge=1, le=3, description="1 Beginner, 2 Intermediate, 3 Expert")


class UserSkillOut(BaseModel):
    skill_id: int
    name: Optional[str] = None
    proficiency: Optional[int] = None
    is_verified: bool = False

    model_config = ConfigDict(from_attributes=True)


# ======================
# USER SCHEMAS
# ======================

class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    skills_to_teach: List[TeachSkillIn] = []
    skills_to_learn: List[int] = []

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty or just whitespace")
        return v.strip()


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    skills_to_teach: Optional[List[TeachSkillIn]] = None
    skills_to_learn: Optional[List[int]] = None


class User(BaseModel):
    id: int
    name: str
    bio: Optional[str] = None
    is_admin: bool = False
    level: int
    xp: int
    streak: int
    badges: List[str] = []
    teacher_rating: float = 0.0
    total_ratings: int = 0
    skills_to_teach: List[UserSkillOut] = []
    skills_to_learn: List[UserSkillOut] = []
    verified_skills: List[int] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("verified_skills", mode="before")
    @classmethod
    def sort_verified(cls, v):
        return sorted(v) if v is not None else []


class Candidate(BaseModel):
    """Discovery card data."""
    id: int
    name: str
    bio: Optional[str] = None
    level: int
    teacher_rating: float = 0.0
    total_ratings: int = 0
    skills_to_teach: List[UserSkillOut] = []
    skills_to_learn: List[UserSkillOut] = []

    model_config = ConfigDict(from_attributes=True)
