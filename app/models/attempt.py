# app/models/attempt.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer
from sqlalchemy.sql import func

from app.core.database import Base, JSONType


class Attempt(Base):
    """One answer submission by one user to one question. Never updated."""

    __tablename__ = "attempts"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    question_id = Column(
        Integer, ForeignKey("questions.id"), nullable=False, index=True
    )

    answer = Column(JSONType, nullable=True)  # raw candidate answer
    is_correct = Column(Boolean, nullable=False)
    time_spent = Column(Integer, nullable=True)  # seconds

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    def __repr__(self):
        return f"<Attempt(id={self.id}, user_id={self.user_id}, question_id={self.question_id}, is_correct={self.is_correct})>"
