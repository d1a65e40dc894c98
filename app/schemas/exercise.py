# app/schemas/exercise.py
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.question import QuestionOut


class ExerciseSummary(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    sort_order: int
    lesson_id: Optional[int] = None
    lesson_title: Optional[str] = None
    question_count: int = 0


class ExerciseListResponse(BaseModel):
    exercises: List[ExerciseSummary]


class ExerciseDetail(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    lesson_id: Optional[int] = None
    questions: List[QuestionOut] = []


class ExerciseCompleteRequest(BaseModel):
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=1)

    @model_validator(mode="after")
    def score_within_total(self):
        if self.score > self.total_questions:
            raise ValueError("score cannot exceed total_questions")
        return self


class ExerciseCompleteResponse(BaseModel):
    success: bool = True
    streak: int
    highest_streak: int
    completed_exercises: List[int]
