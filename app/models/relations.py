# app/models/relations.py

from sqlalchemy.orm import relationship

from .attempt import Attempt
from .exercise import Exercise, ExerciseQuestion
from .lesson import Lesson
from .lesson_block import LessonBlock
from .question import Question
from .unit import Unit
from .user import User


def setup_relationships():
    """
    Configure all SQLAlchemy relationships between models.
    """

    # --- Content Relationships ---

    # 1. Unit to Lessons (One-to-Many)
    Unit.lessons = relationship(
        "Lesson", back_populates="unit", order_by="Lesson.sort_order"
    )
    Lesson.unit = relationship("Unit", back_populates="lessons")

    # 2. Lesson to Blocks (One-to-Many)
    Lesson.blocks = relationship(
        "LessonBlock",
        back_populates="lesson",
        cascade="all, delete-orphan",
        order_by="LessonBlock.order",
    )
    LessonBlock.lesson = relationship("Lesson", back_populates="blocks")

    # 3. Lesson to Questions / Exercises (One-to-Many)
    Lesson.questions = relationship("Question", back_populates="lesson")
    Question.lesson = relationship("Lesson", back_populates="questions")

    Lesson.exercises = relationship("Exercise", back_populates="lesson")
    Exercise.lesson = relationship("Lesson", back_populates="exercises")

    # --- Exercise <-> Question link table ---

    Exercise.exercise_questions = relationship(
        "ExerciseQuestion",
        back_populates="exercise",
        cascade="all, delete-orphan",
        order_by="ExerciseQuestion.sort_order",
    )
    ExerciseQuestion.exercise = relationship(
        "Exercise", back_populates="exercise_questions"
    )

    Question.exercise_questions = relationship(
        "ExerciseQuestion",
        back_populates="question",
        order_by=[ExerciseQuestion.sort_order, ExerciseQuestion.id],
    )
    ExerciseQuestion.question = relationship(
        "Question", back_populates="exercise_questions"
    )

    # --- Progress Relationships ---

    User.attempts = relationship(
        "Attempt", back_populates="user", cascade="all, delete-orphan"
    )
    Attempt.user = relationship("User", back_populates="attempts")

    Question.attempts = relationship("Attempt", back_populates="question")
    Attempt.question = relationship("Question", back_populates="attempts")
