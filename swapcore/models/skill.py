from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, TIMESTAMP, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship
from swapcore.database import Base

PROFICIENCY_LABELS = {1: "Beginner", 2: "Intermediate", 3: "Expert"}


# swapcore/models/skill.py
class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    category = Column(String(50), default="General")

    user_skills = relationship("UserSkill", back_populates="skill", cascade="all, delete-orphan")


class UserSkill(Base):
    __tablename__ = "user_skills"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    skill_id = Column(
        Integer,
        ForeignKey("skills.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    skill_type = Column(String(20), nullable=False)  # 'teach' or 'learn'
    proficiency = Column(Integer)  # 1-3, teach rows only
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "skill_id", "skill_type", name="uq_user_skill_type"),
        CheckConstraint(
            "proficiency IS NULL OR (proficiency >= 1 AND proficiency <= 3)",
            name="check_proficiency_range",
        ),
    )

    # Relationships
    skill = relationship("Skill", back_populates="user_skills")
    user = relationship("User", back_populates="user_skills")

    @property
    def name(self):
        return self.skill.name if self.skill else None
