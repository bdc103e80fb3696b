from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from swapcore import models
from swapcore.crud import user as user_crud
from swapcore.database import get_db
from swapcore.exceptions import NotConnected, UnknownUser


def get_current_user(
    x_user_id: Optional[int] = Header(None),
    db: Session = Depends(get_db)
) -> models.User:
    """
    Resolve the acting user supplied by the host application.

    Login is handled outside this service; the host forwards the signed-in
    user's id in the X-User-Id header.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not identify the current user",
    )
    if x_user_id is None:
        raise credentials_exception

    user = user_crud.get_user(db, x_user_id)
    if user is None:
        raise credentials_exception
    return user


def require_admin(current_user: models.User = Depends(get_current_user)) -> models.User:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


def raise_http_error(exc: ValueError):
    """Map a rejected operation onto the matching HTTP error."""
    if isinstance(exc, (UnknownUser, NotConnected)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
