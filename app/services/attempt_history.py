# app/services/attempt_history.py
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from app.core.config import settings
from app.models.attempt import Attempt
from app.models.exercise import ExerciseQuestion
from app.models.question import Question
from app.schemas.attempt import AttemptHistoryResponse, AttemptPagination, SessionSummary

logger = logging.getLogger(__name__)


def make_aware(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC)"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class AttemptRecord:
    question_id: int
    exercise_id: Optional[int]
    exercise_name: Optional[str]
    is_correct: bool
    created_at: datetime


@dataclass
class _SessionGroup:
    exercise_id: int
    exercise_name: str
    completed_at: datetime
    attempted: set
    correct: set


def rounded_percentage(score: int, total: int) -> int:
    """round(100 * score / total) with halves rounded up; 0 when total is 0."""
    if total <= 0:
        return 0
    return (200 * score + total) // (2 * total)


def session_key(record: AttemptRecord, window_seconds: int) -> Tuple[int, int]:
    # Truncated hour bucket, not a window anchored at the first attempt
    bucket = math.floor(make_aware(record.created_at).timestamp() / window_seconds)
    return record.exercise_id, bucket


def aggregate_sessions(
    records: Iterable[AttemptRecord],
    page: int = 1,
    page_size: int = 10,
    window_seconds: int = 3600,
) -> AttemptHistoryResponse:
    """
    Group attempts into exercise sessions, score each one and return one page
    of sessions, most recent first.

    Records without an exercise are left out. The result depends only on the
    arguments, so repeated calls give the same page.
    """
    if page < 1:
        raise ValueError("page must be >= 1")

    groups: Dict[Tuple[int, int], _SessionGroup] = {}
    dropped = 0

    for record in records:
        if record.exercise_id is None:
            dropped += 1
            continue

        key = session_key(record, window_seconds)
        created_at = make_aware(record.created_at)
        group = groups.get(key)
        if group is None:
            group = groups[key] = _SessionGroup(
                exercise_id=record.exercise_id,
                exercise_name=record.exercise_name or "",
                completed_at=created_at,
                attempted=set(),
                correct=set(),
            )

        group.attempted.add(record.question_id)
        if record.is_correct:
            group.correct.add(record.question_id)
        if created_at > group.completed_at:
            group.completed_at = created_at

    if dropped:
        logger.info(f"Excluded {dropped} attempts without an exercise from history")

    sessions = [
        SessionSummary(
            exercise_id=group.exercise_id,
            exercise_name=group.exercise_name,
            score=len(group.correct),
            total_questions=len(group.attempted),
            percentage=rounded_percentage(len(group.correct), len(group.attempted)),
            completed_at=group.completed_at,
        )
        for group in groups.values()
    ]
    sessions.sort(key=lambda s: s.completed_at, reverse=True)

    total_items = len(sessions)
    total_pages = math.ceil(total_items / page_size) if page_size > 0 else 0
    offset = (page - 1) * page_size

    return AttemptHistoryResponse(
        attempts=sessions[offset : offset + page_size],
        pagination=AttemptPagination(
            current_page=page,
            total_pages=total_pages,
            total_items=total_items,
            has_more=page < total_pages,
        ),
    )


class AttemptHistoryService:
    def __init__(self, db: Session):
        self.db = db

    def load_records(self, user_id: int) -> List[AttemptRecord]:
        """Fetch a user's attempts, newest first, each resolved to its exercise."""
        attempts = (
            self.db.query(Attempt)
            .options(
                selectinload(Attempt.question)
                .selectinload(Question.exercise_questions)
                .selectinload(ExerciseQuestion.exercise)
            )
            .filter(Attempt.user_id == user_id)
            .order_by(Attempt.created_at.desc(), Attempt.id.desc())
            .all()
        )

        records = []
        for attempt in attempts:
            links = attempt.question.exercise_questions if attempt.question else []
            link = links[0] if links else None
            records.append(
                AttemptRecord(
                    question_id=attempt.question_id,
                    exercise_id=link.exercise_id if link else None,
                    exercise_name=link.exercise.title if link else None,
                    is_correct=bool(attempt.is_correct),
                    created_at=attempt.created_at,
                )
            )
        return records

    def get_history(self, user_id: int, page: int = 1) -> AttemptHistoryResponse:
        records = self.load_records(user_id)
        return aggregate_sessions(
            records,
            page=page,
            page_size=settings.attempts_page_size,
            window_seconds=settings.session_window_seconds,
        )
