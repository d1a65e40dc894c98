from fastapi import HTTPException

from app.models import Attempt, ExerciseQuestion, User
from app.utils.ai_component.service import ai_service
from tests.conftest import bearer, make_user


def question_ids(db, exercise):
    links = (
        db.query(ExerciseQuestion)
        .filter(ExerciseQuestion.exercise_id == exercise.id)
        .order_by(ExerciseQuestion.sort_order)
        .all()
    )
    return [link.question_id for link in links]


def answer(client, headers, exercise_id, question_id, value, **extra):
    return client.post(
        f"/exercises/{exercise_id}/questions/{question_id}/answer",
        json={"answer": value, **extra},
        headers=headers,
    )


# ==================== Auth & user ====================


def test_sync_user_creates_then_updates(client, db):
    headers = bearer("new@example.com", subject="idp-42")

    created = client.post("/auth/sync-user", json={"username": "newbie"}, headers=headers)
    assert created.status_code == 200
    assert created.json()["created"] is True
    assert created.json()["user"]["role"] == "USER"

    updated = client.post(
        "/auth/sync-user", json={"avatar": "https://cdn.example.com/a.png"}, headers=headers
    )
    assert updated.json()["created"] is False
    assert updated.json()["user"]["username"] == "newbie"
    assert updated.json()["user"]["avatar"] == "https://cdn.example.com/a.png"

    user = db.query(User).filter(User.email == "new@example.com").one()
    assert user.external_id == "idp-42"


def test_protected_routes_need_a_valid_token(client, user):
    assert client.get("/user/me").status_code == 401
    assert client.get("/user/me", headers={"Authorization": "Bearer garbage"}).status_code == 401
    assert client.get("/user/me", headers=bearer("nobody@example.com")).status_code == 404


def test_me_returns_profile(client, user, auth_headers):
    response = client.get("/user/me", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == user.email
    assert body["streak"] == 0
    assert body["completed_lessons"] == []


# ==================== Lessons & exercises ====================


def test_lessons_are_listed_and_fetched(client, exercise):
    listing = client.get("/lessons").json()["lessons"]
    assert [lesson["slug"] for lesson in listing] == ["present-simple"]
    assert listing[0]["unit_title"] == "Grammar Basics"
    assert listing[0]["block_count"] == 5
    assert listing[0]["question_count"] == 4

    detail = client.get("/lessons/present-simple")
    assert detail.status_code == 200
    assert detail.json()["blocks"][0]["type"] == "INTRO"
    assert client.get("/lessons/unknown").status_code == 404


def test_exercise_detail_hides_answers(client, exercise):
    listing = client.get("/exercises").json()["exercises"]
    assert listing[0]["question_count"] == 4

    body = client.get(f"/exercises/{exercise.id}").json()
    mcq, cloze, order, translate = body["questions"]

    assert mcq["choices"] == ["go", "goes", "is going", "went"]
    assert cloze["template"] == "She {{1}} in Hanoi."
    assert cloze["blank_count"] == 1
    assert sorted(order["tokens"]) == sorted(["She", "goes", "to", "school", "every", "day"])
    assert translate["vietnamese_text"] == "Cô ấy đi làm mỗi ngày."

    text = str(body)
    assert "answerIndex" not in text
    assert "lives" not in text
    assert "She goes to work every day." not in text


def test_answers_are_checked_and_recorded(client, db, user, auth_headers, exercise, fake_ai):
    mcq, cloze, order, translate = question_ids(db, exercise)

    right = answer(client, auth_headers, exercise.id, mcq, 1, time_spent=4).json()
    assert right["is_correct"] is True
    assert right["correct_answer"] == 1
    assert right["feedback_requested"] is False

    wrong = answer(client, auth_headers, exercise.id, cloze, ["live"]).json()
    assert wrong["is_correct"] is False
    assert wrong["correct_answer"] == ["lives"]
    assert wrong["feedback_requested"] is True

    reordered = answer(
        client, auth_headers, exercise.id, order, ["She", "goes", "to", "school", "every", "day"]
    ).json()
    assert reordered["is_correct"] is True

    translated = answer(client, auth_headers, exercise.id, translate, "She goes to work every day").json()
    assert translated["is_correct"] is True
    assert fake_ai["check_translation"] == [
        ("Cô ấy đi làm mỗi ngày.", "She goes to work every day", "She goes to work every day.")
    ]

    attempts = db.query(Attempt).filter(Attempt.user_id == user.id).all()
    assert len(attempts) == 4
    assert {a.question_id: a.is_correct for a in attempts}[cloze] is False


def test_translation_check_failure_is_scored_incorrect(
    client, db, auth_headers, exercise, monkeypatch
):
    async def unavailable(*args, **kwargs):
        raise HTTPException(status_code=504, detail="AI service request timed out")

    monkeypatch.setattr(ai_service, "check_translation", unavailable)
    translate = question_ids(db, exercise)[3]

    response = answer(client, auth_headers, exercise.id, translate, "She goes to work every day.")
    assert response.status_code == 200
    assert response.json()["is_correct"] is False


def test_incomplete_answer_is_400_and_not_recorded(client, db, auth_headers, exercise):
    mcq, cloze, order, _ = question_ids(db, exercise)

    assert answer(client, auth_headers, exercise.id, cloze, ["  "]).status_code == 400
    assert answer(client, auth_headers, exercise.id, order, ["She", "goes"]).status_code == 400
    assert answer(client, auth_headers, exercise.id, mcq, 7).status_code == 400
    assert db.query(Attempt).count() == 0


def test_boolean_or_text_choice_is_400(client, db, auth_headers, exercise):
    mcq = question_ids(db, exercise)[0]

    assert answer(client, auth_headers, exercise.id, mcq, True).status_code == 400
    assert answer(client, auth_headers, exercise.id, mcq, "1").status_code == 400
    assert db.query(Attempt).count() == 0


def test_skip_records_nothing(client, db, auth_headers, exercise):
    mcq = question_ids(db, exercise)[0]

    response = client.post(
        f"/exercises/{exercise.id}/questions/{mcq}/skip", headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json() == {"question_id": mcq, "skipped": True}
    assert db.query(Attempt).count() == 0


def test_question_outside_exercise_is_404(client, auth_headers, exercise):
    assert answer(client, auth_headers, exercise.id, 9999, 1).status_code == 404


# ==================== Progress ====================


def test_history_and_stats_follow_answers(client, db, auth_headers, exercise, fake_ai):
    mcq, cloze, _, _ = question_ids(db, exercise)
    answer(client, auth_headers, exercise.id, mcq, 0)
    answer(client, auth_headers, exercise.id, mcq, 1)
    answer(client, auth_headers, exercise.id, cloze, ["went"])

    history = client.get("/user/attempts", headers=auth_headers).json()
    assert history["pagination"]["total_items"] >= 1
    assert history["pagination"]["current_page"] == 1
    totals = sum(s["total_questions"] for s in history["attempts"])
    assert totals >= 2
    for session in history["attempts"]:
        assert session["exercise_name"] == "Present Simple Exercise"
        assert 0 <= session["score"] <= session["total_questions"]

    stats = client.get("/user/stats", headers=auth_headers).json()
    assert stats["completed_exercises"] == 1
    assert stats["completed_lessons"] == 1

    assert client.get("/user/attempts?page=0", headers=auth_headers).status_code == 422


def test_completing_updates_streak(client, db, auth_headers, exercise):
    done = client.post(
        f"/exercises/{exercise.id}/complete",
        json={"score": 3, "total_questions": 4},
        headers=auth_headers,
    )
    assert done.status_code == 200
    assert done.json() == {
        "success": True,
        "streak": 1,
        "highest_streak": 1,
        "completed_exercises": [exercise.id],
    }

    lesson_id = exercise.lesson_id
    lesson_done = client.post(f"/lessons/{lesson_id}/complete", headers=auth_headers).json()
    assert lesson_done["streak"] == 1
    assert lesson_done["completed_lessons"] == [lesson_id]

    invalid = client.post(
        f"/exercises/{exercise.id}/complete",
        json={"score": 5, "total_questions": 4},
        headers=auth_headers,
    )
    assert invalid.status_code == 422


# ==================== AI ====================


def test_check_translation_endpoint(client, fake_ai):
    ok = client.post(
        "/ai/check-translation",
        json={"vietnamese_text": "Cô ấy đi làm mỗi ngày.", "user_answer": "She goes to work every day."},
    )
    assert ok.status_code == 200
    assert ok.json() == {"is_correct": True}

    missing = client.post("/ai/check-translation", json={"vietnamese_text": "Cô ấy đi làm."})
    assert missing.status_code == 400


def test_check_translation_failure_reports_incorrect(client, monkeypatch):
    async def broken(**kwargs):
        raise RuntimeError("upstream exploded")

    monkeypatch.setattr(ai_service, "check_translation", broken)
    response = client.post(
        "/ai/check-translation",
        json={"vietnamese_text": "Tôi thích trà.", "user_answer": "I like tea."},
    )
    assert response.status_code == 500
    assert response.json()["is_correct"] is False
    assert "error" in response.json()


def test_tutor_is_limited_per_user(client, db, fake_ai, auth_headers):
    payload = {
        "question": "He ___ to school every day.",
        "user_answer": "go",
        "correct_answer": "goes",
        "question_type": "MCQ",
    }

    assert client.post("/ai/tutor", json=payload, headers=auth_headers).status_code == 200
    assert client.post("/ai/tutor-translate", json=payload, headers=auth_headers).status_code == 200
    third = client.post("/ai/tutor", json=payload, headers=auth_headers)
    assert third.status_code == 200
    assert third.json()["feedback"]

    blocked = client.post("/ai/tutor", json=payload, headers=auth_headers)
    assert blocked.status_code == 429
    assert "message" in blocked.json()

    other = make_user(db, email="other@example.com", username="other")
    assert client.post("/ai/tutor", json=payload, headers=bearer(other.email)).status_code == 200
    assert len(fake_ai["tutor"]) == 3
    assert len(fake_ai["tutor_translate"]) == 1


def test_generate_lesson_endpoint(client, auth_headers, monkeypatch):
    async def blocks(**kwargs):
        return [
            {"type": t, "order": i, "data": {"title": t}}
            for i, t in enumerate(["INTRO", "WHAT", "HOW", "REMIND", "MINIQUIZ", "MINIQUIZ"], start=1)
        ]

    monkeypatch.setattr(ai_service, "generate_lesson_blocks", blocks)
    response = client.post(
        "/lessons",
        json={"lesson_name": "Past Simple", "lesson_description": "Thì quá khứ đơn", "block_count": 6},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["blocks_created"] == 6
    assert body["message"] == "Lesson created successfully"
    assert body["lesson"]["unit_title"] == "Generated Lessons"
    assert body["lesson"]["slug"] == "past-simple"

    invalid = client.post(
        "/lessons",
        json={"lesson_name": "Past Simple", "lesson_description": "x", "block_count": 3},
        headers=auth_headers,
    )
    assert invalid.status_code == 422


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["database"] == "healthy"
