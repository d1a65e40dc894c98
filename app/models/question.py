# app/models/question.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from app.core.database import Base, JSONType

QUESTION_TYPES = ("MCQ", "CLOZE", "ORDER", "TRANSLATE")


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id"), nullable=True, index=True)

    type = Column(String(20), nullable=False, index=True)
    prompt = Column(Text, nullable=False)
    concept = Column(String(120), nullable=True)
    level = Column(String(2), nullable=True)  # A1 .. C2

    # Type specific payload, parsed into app.schemas.question.QuestionSpec
    data = Column(JSONType, nullable=False)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<Question(id={self.id}, type='{self.type}')>"
