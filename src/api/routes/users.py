"""FastAPI route returning the authenticated user."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user_id
from src.api.schemas import UserResponse
from src.db.connection import get_db
from src.db.models import User
from src.errors import NotFoundError
from src.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/user", response_model=UserResponse)
def get_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """Return the caller's user record."""
    user = UserService(db).get_user(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user
