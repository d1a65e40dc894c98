# app/services/exercise.py
import logging
import random
from typing import Any, List, Optional

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session, selectinload

from app.core.config import settings
from app.core.decorator import db_exception
from app.models.attempt import Attempt
from app.models.exercise import Exercise, ExerciseQuestion
from app.models.question import Question
from app.models.user import User
from app.schemas.exercise import ExerciseDetail, ExerciseSummary
from app.schemas.question import (
    AnswerResult,
    AnswerSubmit,
    ChoiceSpec,
    ClozeSpec,
    QuestionOut,
    ReorderSpec,
    SkipResult,
    TranslateSpec,
    parse_question_spec,
)
from app.services.grading import correct_answer_of
from app.services.interaction import QuestionContext, QuestionInteraction
from app.utils.ai_component.service import ai_service

logger = logging.getLogger(__name__)


async def check_translation_with_ai(spec: TranslateSpec, text: str) -> bool:
    return await ai_service.check_translation(
        spec.vietnamese_text, text, spec.correct_answer
    )


def question_context(question: Question) -> QuestionContext:
    """Parse a stored question into the typed context the state machine runs on."""
    try:
        spec = parse_question_spec(question.type, question.data)
    except ValidationError as e:
        logger.error(f"Question {question.id} has an invalid payload: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Question {question.id} is malformed",
        )
    return QuestionContext(
        question_id=question.id,
        question_type=question.type,
        prompt=question.prompt,
        spec=spec,
    )


def render_question(context: QuestionContext, rng: Optional[random.Random] = None) -> QuestionOut:
    """Learner view of a question: what the renderer needs, never the answer."""
    rng = rng or random
    spec = context.spec
    out = QuestionOut(
        id=context.question_id,
        type=context.question_type,
        prompt=context.prompt,
    )

    if isinstance(spec, ChoiceSpec):
        out.choices = list(spec.choices)
    elif isinstance(spec, ClozeSpec):
        out.template = spec.template
        out.blank_count = spec.blank_count
    elif isinstance(spec, ReorderSpec):
        out.tokens = rng.sample(list(spec.tokens), len(spec.tokens))
    elif isinstance(spec, TranslateSpec):
        out.vietnamese_text = spec.vietnamese_text

    return out


class ExerciseService:
    def __init__(self, db: Session):
        self.db = db

    def list_exercises(self) -> List[ExerciseSummary]:
        exercises = (
            self.db.query(Exercise)
            .options(
                selectinload(Exercise.lesson),
                selectinload(Exercise.exercise_questions),
            )
            .order_by(Exercise.sort_order, Exercise.id)
            .all()
        )

        return [
            ExerciseSummary(
                id=exercise.id,
                title=exercise.title,
                description=exercise.description,
                sort_order=exercise.sort_order,
                lesson_id=exercise.lesson_id,
                lesson_title=exercise.lesson.title if exercise.lesson else None,
                question_count=len(exercise.exercise_questions),
            )
            for exercise in exercises
        ]

    def get_exercise_or_404(self, exercise_id: int) -> Exercise:
        exercise = (
            self.db.query(Exercise)
            .options(
                selectinload(Exercise.exercise_questions).selectinload(
                    ExerciseQuestion.question
                )
            )
            .filter(Exercise.id == exercise_id)
            .first()
        )
        if not exercise:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found"
            )
        return exercise

    def get_exercise(self, exercise_id: int) -> ExerciseDetail:
        exercise = self.get_exercise_or_404(exercise_id)
        questions = [
            render_question(question_context(link.question))
            for link in exercise.exercise_questions
        ]
        return ExerciseDetail(
            id=exercise.id,
            title=exercise.title,
            description=exercise.description,
            lesson_id=exercise.lesson_id,
            questions=questions,
        )

    def get_exercise_question(self, exercise_id: int, question_id: int) -> Question:
        link = (
            self.db.query(ExerciseQuestion)
            .options(selectinload(ExerciseQuestion.question))
            .filter(
                ExerciseQuestion.exercise_id == exercise_id,
                ExerciseQuestion.question_id == question_id,
            )
            .first()
        )
        if not link:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Question not found in this exercise",
            )
        return link.question

    async def answer_question(
        self, user: User, exercise_id: int, question_id: int, data: AnswerSubmit
    ) -> AnswerResult:
        """
        Check one answer, confirm it and record the attempt.
        Raises IncompleteAnswerError when the answer is not fully specified.
        """
        question = self.get_exercise_question(exercise_id, question_id)
        feedback = {"requested": False}

        def request_feedback(context: QuestionContext, candidate: Any) -> None:
            # The client fetches the explanation from /ai/tutor
            feedback["requested"] = True

        interaction = QuestionInteraction(
            question_context(question),
            translation_checker=check_translation_with_ai,
            request_feedback=request_feedback,
            check_timeout=settings.translation_check_timeout,
        )

        await interaction.submit(data.answer)
        is_correct = interaction.confirm()

        attempt = self.record_attempt(
            user_id=user.id,
            question_id=question.id,
            answer=data.answer,
            is_correct=is_correct,
            time_spent=data.time_spent,
        )

        logger.info(
            f"User {user.id} answered question {question.id} of exercise {exercise_id}: "
            f"{'correct' if is_correct else 'incorrect'}"
        )

        return AnswerResult(
            question_id=question.id,
            is_correct=is_correct,
            correct_answer=correct_answer_of(interaction.question.spec),
            attempt_id=attempt.id,
            feedback_requested=feedback["requested"],
        )

    def skip_question(self, user: User, exercise_id: int, question_id: int) -> SkipResult:
        """Skipping leaves no attempt behind, so it never counts toward a score."""
        question = self.get_exercise_question(exercise_id, question_id)
        interaction = QuestionInteraction(question_context(question))
        interaction.skip()
        logger.info(f"User {user.id} skipped question {question.id} of exercise {exercise_id}")
        return SkipResult(question_id=question.id)

    @db_exception
    def record_attempt(
        self,
        user_id: int,
        question_id: int,
        answer: Any,
        is_correct: bool,
        time_spent: Optional[int] = None,
    ) -> Attempt:
        attempt = Attempt(
            user_id=user_id,
            question_id=question_id,
            answer=answer,
            is_correct=is_correct,
            time_spent=time_spent,
        )
        self.db.add(attempt)
        self.db.commit()
        self.db.refresh(attempt)
        return attempt
