# app/services/progress.py
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from app.core.decorator import db_exception
from app.models.attempt import Attempt
from app.models.exercise import Exercise, ExerciseQuestion
from app.models.lesson import Lesson
from app.models.question import Question
from app.models.user import User
from app.services.attempt_history import make_aware

logger = logging.getLogger(__name__)


def _utc_date(dt: datetime):
    return make_aware(dt).astimezone(timezone.utc).date()


def update_streak(user: User, now: Optional[datetime] = None) -> User:
    """
    Same day keeps the streak, the next day extends it, anything else
    starts over at 1.
    """
    now = now or datetime.now(timezone.utc)

    if user.last_active_date is None:
        user.streak = 1
    else:
        days = (_utc_date(now) - _utc_date(user.last_active_date)).days
        if days == 0:
            user.streak = user.streak or 0
        elif days == 1:
            user.streak = (user.streak or 0) + 1
        else:
            user.streak = 1

    user.highest_streak = max(user.highest_streak or 0, user.streak)
    user.last_active_date = now
    return user


def _append_unique(values, item: int) -> list:
    # A new list object so the JSON column is flagged as modified
    values = list(values or [])
    if item not in values:
        values.append(item)
    return values


class ProgressService:
    def __init__(self, db: Session):
        self.db = db

    @db_exception
    def complete_exercise(
        self,
        user: User,
        exercise_id: int,
        score: Optional[int] = None,
        total_questions: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> User:
        exercise = self.db.query(Exercise).filter(Exercise.id == exercise_id).first()
        if not exercise:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found"
            )

        user.completed_exercises = _append_unique(user.completed_exercises, exercise_id)
        update_streak(user, now)
        self.db.commit()
        self.db.refresh(user)

        logger.info(
            f"User {user.id} completed exercise {exercise_id} "
            f"({score}/{total_questions}, streak {user.streak})"
        )
        return user

    @db_exception
    def complete_lesson(
        self, user: User, lesson_id: int, now: Optional[datetime] = None
    ) -> User:
        lesson = self.db.query(Lesson).filter(Lesson.id == lesson_id).first()
        if not lesson:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found"
            )

        user.completed_lessons = _append_unique(user.completed_lessons, lesson_id)
        update_streak(user, now)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User {user.id} completed lesson {lesson_id} (streak {user.streak})")
        return user

    def get_stats(self, user: User) -> dict:
        """
        Counts come from the attempt log: exercises with at least one
        attempted question, and lessons of attempted questions.
        """
        attempted_questions = (
            self.db.query(Attempt.question_id)
            .filter(Attempt.user_id == user.id)
            .distinct()
            .subquery()
        )

        exercise_count = (
            self.db.query(func.count(distinct(ExerciseQuestion.exercise_id)))
            .filter(ExerciseQuestion.question_id.in_(attempted_questions.select()))
            .scalar()
        )

        lesson_count = (
            self.db.query(func.count(distinct(Question.lesson_id)))
            .filter(
                Question.id.in_(attempted_questions.select()),
                Question.lesson_id.isnot(None),
            )
            .scalar()
        )

        return {
            "streak": user.streak or 0,
            "highest_streak": user.highest_streak or 0,
            "completed_exercises": exercise_count or 0,
            "completed_lessons": lesson_count or 0,
        }
