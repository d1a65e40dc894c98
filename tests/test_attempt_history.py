from datetime import datetime, timedelta, timezone

import pytest

from app.models import Attempt, Exercise, ExerciseQuestion, Question
from app.services.attempt_history import (
    AttemptHistoryService,
    AttemptRecord,
    aggregate_sessions,
    rounded_percentage,
)

BASE = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


def record(question_id, is_correct, minutes=0, exercise_id=1, name="Present Simple"):
    return AttemptRecord(
        question_id=question_id,
        exercise_id=exercise_id,
        exercise_name=name if exercise_id is not None else None,
        is_correct=is_correct,
        created_at=BASE + timedelta(minutes=minutes),
    )


def test_empty_history():
    result = aggregate_sessions([])
    assert result.attempts == []
    assert result.pagination.total_items == 0
    assert result.pagination.total_pages == 0
    assert result.pagination.has_more is False


def test_same_exercise_same_hour_is_one_session():
    result = aggregate_sessions(
        [record(1, True, 0), record(2, False, 20), record(3, True, 59)]
    )
    assert len(result.attempts) == 1

    session = result.attempts[0]
    assert session.exercise_id == 1
    assert session.exercise_name == "Present Simple"
    assert (session.score, session.total_questions, session.percentage) == (2, 3, 67)
    assert session.completed_at == BASE + timedelta(minutes=59)


def test_hour_boundary_splits_sessions():
    # 09:59 and 10:01 are two minutes apart but in different clock hours
    result = aggregate_sessions([record(1, True, 59), record(2, True, 61)])
    assert len(result.attempts) == 2
    assert [s.total_questions for s in result.attempts] == [1, 1]


def test_different_exercises_are_separate_sessions():
    result = aggregate_sessions(
        [record(1, True, 5, exercise_id=1), record(9, False, 6, exercise_id=2, name="Past Simple")]
    )
    assert {s.exercise_id for s in result.attempts} == {1, 2}


def test_questions_count_once_per_session():
    result = aggregate_sessions(
        [
            record(1, False, 0),
            record(1, True, 1),
            record(2, True, 2),
            record(2, True, 3),
            record(3, False, 4),
        ]
    )
    session = result.attempts[0]
    assert session.score == 2
    assert session.total_questions == 3
    assert session.score <= session.total_questions


@pytest.mark.parametrize(
    "score, total, expected",
    [(0, 0, 0), (0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 2, 50), (3, 3, 100)],
)
def test_rounded_percentage(score, total, expected):
    assert rounded_percentage(score, total) == expected


def test_records_without_exercise_are_dropped(caplog):
    with caplog.at_level("INFO"):
        result = aggregate_sessions(
            [record(1, True, 0), record(5, True, 1, exercise_id=None)]
        )

    assert result.pagination.total_items == 1
    assert result.attempts[0].total_questions == 1
    assert "Excluded 1 attempts" in caplog.text


def test_sorted_most_recent_first_and_paginated():
    # One session per hour, 25 hours
    records = [record(1, h % 2 == 0, minutes=60 * h) for h in range(25)]

    first = aggregate_sessions(records, page=1)
    assert first.pagination.total_items == 25
    assert first.pagination.total_pages == 3
    assert first.pagination.has_more is True
    assert len(first.attempts) == 10
    assert first.attempts[0].completed_at == BASE + timedelta(hours=24)
    completed = [s.completed_at for s in first.attempts]
    assert completed == sorted(completed, reverse=True)

    last = aggregate_sessions(records, page=3)
    assert len(last.attempts) == 5
    assert last.pagination.has_more is False
    assert last.attempts[-1].completed_at == BASE

    beyond = aggregate_sessions(records, page=4)
    assert beyond.attempts == []
    assert beyond.pagination.current_page == 4
    assert beyond.pagination.has_more is False

    joined = [
        session
        for page in range(1, first.pagination.total_pages + 1)
        for session in aggregate_sessions(records, page=page).attempts
    ]
    assert [s.completed_at for s in joined] == [
        BASE + timedelta(hours=h) for h in range(24, -1, -1)
    ]


def test_aggregation_is_repeatable():
    records = [record(q, q % 2 == 0, minutes=q * 17) for q in range(1, 12)]
    assert aggregate_sessions(records, page=1) == aggregate_sessions(records, page=1)


def test_page_must_be_positive():
    with pytest.raises(ValueError):
        aggregate_sessions([], page=0)


def test_naive_timestamps_are_treated_as_utc():
    naive = AttemptRecord(
        question_id=1,
        exercise_id=1,
        exercise_name="Present Simple",
        is_correct=True,
        created_at=datetime(2025, 3, 10, 9, 30),
    )
    result = aggregate_sessions([naive, record(2, False, 45)])
    assert len(result.attempts) == 1
    assert result.attempts[0].total_questions == 2


def test_service_resolves_first_exercise_link(db, user):
    first = Exercise(title="First", sort_order=1)
    second = Exercise(title="Second", sort_order=2)
    unlinked = Question(type="MCQ", prompt="Orphan", data={"choices": ["a", "b"], "answerIndex": 0})
    shared = Question(type="MCQ", prompt="Shared", data={"choices": ["a", "b"], "answerIndex": 0})
    db.add_all([first, second, unlinked, shared])
    db.flush()
    db.add_all(
        [
            ExerciseQuestion(exercise_id=second.id, question_id=shared.id, sort_order=1),
            ExerciseQuestion(exercise_id=first.id, question_id=shared.id, sort_order=1),
        ]
    )
    db.add_all(
        [
            Attempt(user_id=user.id, question_id=shared.id, answer=0, is_correct=True, created_at=BASE),
            Attempt(user_id=user.id, question_id=unlinked.id, answer=1, is_correct=False, created_at=BASE),
        ]
    )
    db.commit()

    service = AttemptHistoryService(db)
    records = service.load_records(user.id)
    assert {(r.question_id, r.exercise_id) for r in records} == {
        (shared.id, second.id),
        (unlinked.id, None),
    }

    history = service.get_history(user.id, page=1)
    assert history.pagination.total_items == 1
    assert history.attempts[0].exercise_name == "Second"
    assert history.attempts[0].percentage == 100
