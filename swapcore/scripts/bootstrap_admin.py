import logging
import os
import sys
from typing import Optional

from swapcore import models
from swapcore.database import SessionLocal
from swapcore.services import profile_service

logger = logging.getLogger(__name__)

CONFIRM_PHRASE = "CREATE-FIRST-ADMIN"


def _is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def _required_env(key: str) -> str:
    value = os.getenv(key, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {key}")
    return value


def bootstrap_admin(session_factory=SessionLocal) -> int:
    """
    Create the first administrator account from environment variables.

    ENABLE_ADMIN_BOOTSTRAP must be truthy and ADMIN_BOOTSTRAP_CONFIRM must
    hold CONFIRM_PHRASE. Refuses to run once any admin exists.
    Returns a process exit code.
    """
    try:
        if not _is_truthy(os.getenv("ENABLE_ADMIN_BOOTSTRAP")):
            raise ValueError(
                "Bootstrap disabled. Set ENABLE_ADMIN_BOOTSTRAP=true to run."
            )
        confirm = _required_env("ADMIN_BOOTSTRAP_CONFIRM")
        if confirm != CONFIRM_PHRASE:
            raise ValueError(
                f"Invalid ADMIN_BOOTSTRAP_CONFIRM. Expected exact phrase: {CONFIRM_PHRASE}"
            )
        name = _required_env("ADMIN_NAME")

        db = session_factory()
        try:
            existing_admin_count = db.query(models.User).filter(
                models.User.is_admin.is_(True)
            ).count()
            if existing_admin_count > 0:
                raise ValueError(
                    "Admin bootstrap blocked: an admin already exists. "
                    "This command is one-time for first admin creation."
                )
            user = profile_service.sign_up(db, name=name, is_admin=True)
            print(f"Admin created successfully (user_id={user.id})")
            return 0
        finally:
            db.close()
    except Exception as exc:
        logger.warning("Admin bootstrap failed: %s", exc)
        print(f"Admin bootstrap failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(bootstrap_admin())
