# app/routers/lesson.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.lesson import (
    LessonCompleteResponse,
    LessonDetail,
    LessonGenerateRequest,
    LessonGenerateResponse,
    LessonListResponse,
)
from app.services.lesson import LessonService
from app.services.progress import ProgressService

router = APIRouter(prefix="/lessons", tags=["Lessons"])


@router.get("", response_model=LessonListResponse)
def list_lessons(db: Session = Depends(get_db)):
    """All lessons, ordered by unit then lesson."""
    return LessonListResponse(lessons=LessonService(db).list_lessons())


@router.post("", response_model=LessonGenerateResponse)
async def generate_lesson(
    data: LessonGenerateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Generate a lesson with AI and store it under the "Generated Lessons" unit

    Args:
        data: lesson name, description, difficulty, block count (5-20) and extra requirements
        current_user: Authenticated user

    Returns:
        The created lesson with its blocks
    """
    lesson = await LessonService(db).generate_lesson(data)
    return LessonGenerateResponse(
        lesson=lesson,
        message="Lesson created successfully",
        blocks_created=len(lesson.blocks),
    )


@router.get("/{lesson_id_or_slug}", response_model=LessonDetail)
def get_lesson(lesson_id_or_slug: str, db: Session = Depends(get_db)):
    return LessonService(db).get_lesson(lesson_id_or_slug)


@router.post("/{lesson_id}/complete", response_model=LessonCompleteResponse)
def complete_lesson(
    lesson_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Mark a lesson as completed and update the streak."""
    user = ProgressService(db).complete_lesson(current_user, lesson_id)
    return LessonCompleteResponse(
        streak=user.streak,
        highest_streak=user.highest_streak,
        completed_lessons=user.completed_lessons or [],
    )
