# swapcore/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from swapcore import models  # noqa: F401  (registers tables)
from swapcore.api import matches, messages, sessions, users
from swapcore.config import settings
from swapcore.crud import skill as skill_crud
from swapcore.database import Base, SessionLocal, engine

logging.basicConfig(level=settings.LOG_LEVEL)

# Create database tables
Base.metadata.create_all(bind=engine)

if settings.SEED_SKILL_CATALOG:
    _db = SessionLocal()
    try:
        skill_crud.seed_skill_catalog(_db)
    finally:
        _db.close()

# Initialize FastAPI app
app = FastAPI(title="SkillSwap Lifecycle API")

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://0.0.0.0:8000",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(users.router)            # /users/*
app.include_router(users.skills_router)     # /skills/*
app.include_router(matches.router)          # /matches/*
app.include_router(sessions.router)         # /sessions/*
app.include_router(messages.router)         # /messages/*
app.include_router(messages.posts_router)   # /posts/*


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "SkillSwap Lifecycle API is running",
        "version": "1.0.0",
    }
