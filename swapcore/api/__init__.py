# swapcore/api/__init__.py
from . import matches, messages, sessions, users

__all__ = ["matches", "messages", "sessions", "users"]
