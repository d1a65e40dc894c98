# app/routers/exercise.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.exercise import (
    ExerciseCompleteRequest,
    ExerciseCompleteResponse,
    ExerciseDetail,
    ExerciseListResponse,
)
from app.schemas.question import AnswerResult, AnswerSubmit, SkipResult
from app.services.exercise import ExerciseService
from app.services.interaction import IncompleteAnswerError
from app.services.progress import ProgressService

router = APIRouter(prefix="/exercises", tags=["Exercises"])


@router.get("", response_model=ExerciseListResponse)
def list_exercises(db: Session = Depends(get_db)):
    return ExerciseListResponse(exercises=ExerciseService(db).list_exercises())


@router.get("/{exercise_id}", response_model=ExerciseDetail)
def get_exercise(exercise_id: int, db: Session = Depends(get_db)):
    """Exercise with its questions in order. Answers are not included."""
    return ExerciseService(db).get_exercise(exercise_id)


@router.post(
    "/{exercise_id}/questions/{question_id}/answer", response_model=AnswerResult
)
async def answer_question(
    exercise_id: int,
    question_id: int,
    data: AnswerSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Check an answer and record the attempt

    Args:
        exercise_id: Exercise the question is played in
        question_id: Question being answered
        data: The answer (choice index, list of blanks/tokens, or free text)

    Returns:
        Verdict, the correct answer, and whether tutor feedback should be shown
    """
    try:
        return await ExerciseService(db).answer_question(
            current_user, exercise_id, question_id, data
        )
    except IncompleteAnswerError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/{exercise_id}/questions/{question_id}/skip", response_model=SkipResult
)
def skip_question(
    exercise_id: int,
    question_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Skip a question without recording an attempt."""
    return ExerciseService(db).skip_question(current_user, exercise_id, question_id)


@router.post("/{exercise_id}/complete", response_model=ExerciseCompleteResponse)
def complete_exercise(
    exercise_id: int,
    data: ExerciseCompleteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Mark an exercise as completed and update the streak."""
    user = ProgressService(db).complete_exercise(
        current_user, exercise_id, data.score, data.total_questions
    )
    return ExerciseCompleteResponse(
        streak=user.streak,
        highest_streak=user.highest_streak,
        completed_exercises=user.completed_exercises or [],
    )
