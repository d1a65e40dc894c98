# app/routers/user.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.attempt import AttemptHistoryResponse
from app.schemas.user import UserProfileResponse, UserStatsResponse
from app.services.attempt_history import AttemptHistoryService
from app.services.progress import ProgressService

router = APIRouter(prefix="/user", tags=["User"])


@router.get("/me", response_model=UserProfileResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get the current user's profile."""
    return current_user


@router.get("/stats", response_model=UserStatsResponse)
def get_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Streaks plus the number of exercises and lessons the user has practised."""
    return ProgressService(db).get_stats(current_user)


@router.get("/attempts", response_model=AttemptHistoryResponse)
def get_attempt_history(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Exercise sessions of the current user, most recent first.
    Attempts on the same exercise within the same clock hour form one session.
    """
    return AttemptHistoryService(db).get_history(current_user.id, page)
