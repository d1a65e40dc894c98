# app/schemas/ai.py
from typing import Optional

from pydantic import BaseModel, Field


class TranslationCheckRequest(BaseModel):
    # Optional here so a missing field can be answered with 400 by the router
    vietnamese_text: Optional[str] = None
    user_answer: Optional[str] = None
    suggested_answer: Optional[str] = None


class TranslationCheckResponse(BaseModel):
    is_correct: bool


class TutorRequest(BaseModel):
    question: str = Field(..., min_length=1)
    user_answer: str
    correct_answer: str
    question_type: str = Field(default="MCQ")


class TutorResponse(BaseModel):
    feedback: str
