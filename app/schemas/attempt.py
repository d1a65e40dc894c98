from datetime import datetime
from typing import List

from pydantic import BaseModel


class SessionSummary(BaseModel):
    """One learner pass through one exercise, scored."""

    exercise_id: int
    exercise_name: str
    score: int
    total_questions: int
    percentage: int
    completed_at: datetime


class AttemptPagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    has_more: bool


class AttemptHistoryResponse(BaseModel):
    attempts: List[SessionSummary]
    pagination: AttemptPagination
