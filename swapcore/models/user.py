from sqlalchemy import Column, Integer, String, Boolean, Float, JSON, TIMESTAMP, func
from sqlalchemy.orm import relationship
from swapcore.database import Base


# ---------------- USER ----------------
class User(Base):
    __tablename__ = "users"
    # Ids are never reused, even after a user is deleted.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    bio = Column(String(500))
    is_admin = Column(Boolean, default=False, nullable=False)

    # Progression
    level = Column(Integer, default=1, nullable=False)
    xp = Column(Integer, default=0, nullable=False)
    streak = Column(Integer, default=0, nullable=False)
    badges = Column(JSON, default=list, nullable=False)

    # Aggregated feedback as a teacher
    teacher_rating = Column(Float, default=0.0, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    user_skills = relationship("UserSkill", back_populates="user", cascade="all, delete-orphan")
    matches = relationship(
        "Match",
        foreign_keys="Match.owner_id",
        back_populates="owner",
        cascade="all, delete-orphan",
        order_by="Match.id",
    )

    @property
    def skills_to_teach(self):
        return [us for us in self.user_skills if us.skill_type == "teach"]

    @property
    def skills_to_learn(self):
        return [us for us in self.user_skills if us.skill_type == "learn"]

    @property
    def verified_skills(self) -> set:
        return {us.skill_id for us in self.skills_to_teach if us.is_verified}

    def match_with(self, partner_id: int):
        for match in self.matches:
            if match.partner_id == partner_id:
                return match
        return None
