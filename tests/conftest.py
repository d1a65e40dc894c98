import os

# Must be set before the app modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")
os.environ.setdefault("AI_API_KEY", "test-key")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DEBUG", "false")

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, SessionLocal, engine, get_db
from app.core.init import seed_demo_content
from app.core.limiter import limiter
from app.core.security import jwt_manager
from app.models import Exercise, User
from app.utils.ai_component.service import ai_service
from main import app


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.reset()


def make_user(db, email="learner@example.com", username="learner"):
    user = User(
        email=email,
        username=username,
        external_id=f"sub-{email}",
        completed_exercises=[],
        completed_lessons=[],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(email, subject=None):
    token = jwt_manager.create_access_token(subject=subject or f"sub-{email}", email=email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def auth_headers(user):
    return bearer(user.email)


@pytest.fixture
def exercise(db):
    """The seeded demo exercise: MCQ, CLOZE, ORDER and TRANSLATE in that order."""
    seed_demo_content(db)
    return db.query(Exercise).first()


@pytest.fixture
def fake_ai(monkeypatch):
    """Replace every LLM call with canned answers and record what was asked."""
    calls = {"check_translation": [], "tutor": [], "tutor_translate": []}

    async def check_translation(vietnamese_text, user_answer, suggested_answer=None):
        calls["check_translation"].append((vietnamese_text, user_answer, suggested_answer))
        return user_answer.strip().rstrip(".").lower() == "she goes to work every day"

    async def tutor_feedback(question, user_answer, correct_answer, question_type):
        calls["tutor"].append(question)
        return "Chủ ngữ He cần động từ thêm -s."

    async def tutor_translate_feedback(question, user_answer, correct_answer, question_type):
        calls["tutor_translate"].append(question)
        return "Bạn dịch đúng ý rồi, chỉ sai thì của động từ."

    monkeypatch.setattr(ai_service, "check_translation", check_translation)
    monkeypatch.setattr(ai_service, "tutor_feedback", tutor_feedback)
    monkeypatch.setattr(ai_service, "tutor_translate_feedback", tutor_translate_feedback)
    return calls
