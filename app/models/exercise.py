# app/models/exercise.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.sql import func

from app.core.database import Base


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id"), nullable=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<Exercise(id={self.id}, title='{self.title}')>"


class ExerciseQuestion(Base):
    __tablename__ = "exercise_questions"
    __table_args__ = (
        UniqueConstraint("exercise_id", "question_id", name="uq_exercise_question"),
    )

    id = Column(Integer, primary_key=True, index=True)
    exercise_id = Column(
        Integer, ForeignKey("exercises.id"), nullable=False, index=True
    )
    question_id = Column(
        Integer, ForeignKey("questions.id"), nullable=False, index=True
    )
    sort_order = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<ExerciseQuestion(exercise_id={self.exercise_id}, question_id={self.question_id})>"
