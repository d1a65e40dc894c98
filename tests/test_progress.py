from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from app.models import Attempt, Exercise, Lesson, Question, User
from app.services.progress import ProgressService, update_streak

NOW = datetime(2025, 3, 10, 20, 0, tzinfo=timezone.utc)


def learner(streak=0, highest=0, last_active=None):
    return User(
        email="streak@example.com",
        streak=streak,
        highest_streak=highest,
        last_active_date=last_active,
        completed_exercises=[],
        completed_lessons=[],
    )


def test_first_activity_starts_streak():
    user = update_streak(learner(), NOW)
    assert (user.streak, user.highest_streak) == (1, 1)
    assert user.last_active_date == NOW


def test_same_day_keeps_streak():
    user = update_streak(learner(4, 6, NOW - timedelta(hours=10)), NOW)
    assert (user.streak, user.highest_streak) == (4, 6)


def test_next_day_extends_streak():
    user = update_streak(learner(6, 6, NOW - timedelta(days=1)), NOW)
    assert (user.streak, user.highest_streak) == (7, 7)


def test_calendar_day_not_elapsed_hours():
    # 23:30 yesterday to 00:10 today is the next day
    late = datetime(2025, 3, 9, 23, 30, tzinfo=timezone.utc)
    early = datetime(2025, 3, 10, 0, 10, tzinfo=timezone.utc)
    user = update_streak(learner(2, 2, late), early)
    assert user.streak == 3


def test_gap_resets_streak_but_keeps_highest():
    user = update_streak(learner(9, 9, NOW - timedelta(days=3)), NOW)
    assert (user.streak, user.highest_streak) == (1, 9)


def test_naive_last_active_is_utc():
    user = update_streak(learner(2, 2, datetime(2025, 3, 9, 8, 0)), NOW)
    assert user.streak == 3


def test_completing_twice_is_deduplicated(db, user):
    exercise = Exercise(title="Present Simple Exercise", sort_order=1)
    db.add(exercise)
    db.commit()

    service = ProgressService(db)
    service.complete_exercise(user, exercise.id, 3, 4, now=NOW)
    service.complete_exercise(user, exercise.id, 4, 4, now=NOW + timedelta(hours=1))

    assert user.completed_exercises == [exercise.id]
    assert user.streak == 1


def test_complete_unknown_lesson_is_404(db, user):
    with pytest.raises(HTTPException) as exc:
        ProgressService(db).complete_lesson(user, 999)
    assert exc.value.status_code == 404


def test_stats_count_practised_exercises_and_lessons(db, user, exercise):
    questions = db.query(Question).order_by(Question.id).all()
    lesson = db.query(Lesson).first()
    loose = Question(type="ORDER", prompt="Loose", data={"tokens": ["a", "b"]})
    db.add(loose)
    db.flush()
    db.add_all(
        [
            Attempt(user_id=user.id, question_id=questions[0].id, answer=1, is_correct=True),
            Attempt(user_id=user.id, question_id=questions[1].id, answer=["x"], is_correct=False),
            Attempt(user_id=user.id, question_id=loose.id, answer=["b", "a"], is_correct=False),
        ]
    )
    db.commit()

    stats = ProgressService(db).get_stats(user)
    assert stats["completed_exercises"] == 1
    assert stats["completed_lessons"] == 1
    assert questions[0].lesson_id == lesson.id


def test_stats_for_new_user(db, user):
    assert ProgressService(db).get_stats(user) == {
        "streak": 0,
        "highest_streak": 0,
        "completed_exercises": 0,
        "completed_lessons": 0,
    }
