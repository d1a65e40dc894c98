# app/schemas/lesson.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ==================== Lesson Block Schemas ====================


class LessonBlockOut(BaseModel):
    id: int
    type: str
    order: int
    data: Dict[str, Any]

    model_config = ConfigDict(from_attributes=True)


# ==================== Lesson Schemas ====================


class LessonSummary(BaseModel):
    """Lesson as listed in the catalogue"""

    id: int
    slug: str
    title: str
    description: Optional[str] = None
    sort_order: int
    unit_id: int
    unit_title: Optional[str] = None
    block_count: int = 0
    question_count: int = 0


class LessonDetail(BaseModel):
    id: int
    slug: str
    title: str
    description: Optional[str] = None
    sort_order: int
    unit_id: int
    unit_title: Optional[str] = None
    created_at: Optional[datetime] = None
    blocks: List[LessonBlockOut] = []


class LessonListResponse(BaseModel):
    lessons: List[LessonSummary]


class LessonGenerateRequest(BaseModel):
    lesson_name: str = Field(..., max_length=255)
    lesson_description: str
    additional_requirements: Optional[str] = None
    difficulty: str = Field(default="beginner", max_length=50)
    block_count: int = Field(default=8, ge=5, le=20)

    @field_validator("lesson_name", "lesson_description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class LessonGenerateResponse(BaseModel):
    lesson: LessonDetail
    message: str
    blocks_created: int


class LessonCompleteResponse(BaseModel):
    streak: int
    highest_streak: int
    completed_lessons: List[int]
