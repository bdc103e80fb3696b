"""Pytest bootstrap and shared fixtures."""

from pathlib import Path
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Ensure project root is on sys.path so `import swapcore` works without installing
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from swapcore import models  # noqa: E402,F401
from swapcore.crud import skill as skill_crud  # noqa: E402
from swapcore.database import Base  # noqa: E402


@pytest.fixture
def db_session():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def catalog(db_session):
    """Seeded skill catalog as {name: id}."""
    skill_crud.seed_skill_catalog(db_session)
    return {s.name: s.id for s in skill_crud.get_skills(db_session)}
