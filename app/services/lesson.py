# app/services/lesson.py
import logging
import re
import unicodedata
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.decorator import db_exception
from app.models.lesson import Lesson
from app.models.lesson_block import LESSON_BLOCK_TYPES, LessonBlock
from app.models.unit import Unit
from app.schemas.lesson import (
    LessonBlockOut,
    LessonDetail,
    LessonGenerateRequest,
    LessonSummary,
)
from app.utils.ai_component.service import ai_service

logger = logging.getLogger(__name__)

GENERATED_UNIT_TITLE = "Generated Lessons"
GENERATED_UNIT_SORT_ORDER = 999


def slugify(value: str) -> str:
    # "Thì hiện tại đơn" -> "thi-hien-tai-don"
    value = value.replace("đ", "d").replace("Đ", "D")
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^a-zA-Z0-9]+", "-", value).strip("-").lower()
    return value or "lesson"


def lesson_detail(lesson: Lesson) -> LessonDetail:
    return LessonDetail(
        id=lesson.id,
        slug=lesson.slug,
        title=lesson.title,
        description=lesson.description,
        sort_order=lesson.sort_order,
        unit_id=lesson.unit_id,
        unit_title=lesson.unit.title if lesson.unit else None,
        created_at=lesson.created_at,
        blocks=[LessonBlockOut.model_validate(block) for block in lesson.blocks],
    )


class LessonService:
    def __init__(self, db: Session):
        self.db = db

    def list_lessons(self) -> List[LessonSummary]:
        lessons = (
            self.db.query(Lesson)
            .join(Unit, Lesson.unit_id == Unit.id)
            .options(
                joinedload(Lesson.unit),
                selectinload(Lesson.blocks),
                selectinload(Lesson.questions),
            )
            .order_by(Unit.sort_order, Lesson.sort_order, Lesson.id)
            .all()
        )

        return [
            LessonSummary(
                id=lesson.id,
                slug=lesson.slug,
                title=lesson.title,
                description=lesson.description,
                sort_order=lesson.sort_order,
                unit_id=lesson.unit_id,
                unit_title=lesson.unit.title if lesson.unit else None,
                block_count=len(lesson.blocks),
                question_count=len(lesson.questions),
            )
            for lesson in lessons
        ]

    def get_lesson(self, lesson_id_or_slug: str) -> LessonDetail:
        """Look a lesson up by numeric id first, then by slug."""
        query = self.db.query(Lesson).options(
            joinedload(Lesson.unit), selectinload(Lesson.blocks)
        )

        lesson = None
        if lesson_id_or_slug.isdigit():
            lesson = query.filter(Lesson.id == int(lesson_id_or_slug)).first()
        if lesson is None:
            lesson = query.filter(Lesson.slug == lesson_id_or_slug).first()

        if not lesson:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found"
            )
        return lesson_detail(lesson)

    async def generate_lesson(self, data: LessonGenerateRequest) -> LessonDetail:
        logger.info(
            f"Generating lesson '{data.lesson_name}' with {data.block_count} blocks"
        )
        blocks = await ai_service.generate_lesson_blocks(
            lesson_name=data.lesson_name,
            lesson_description=data.lesson_description,
            difficulty=data.difficulty,
            block_count=data.block_count,
            additional_requirements=data.additional_requirements,
        )
        lesson = self.create_lesson_with_blocks(
            data.lesson_name, data.lesson_description, blocks
        )
        logger.info(f"Lesson created successfully: {lesson.id}")
        return lesson_detail(lesson)

    def _unique_slug(self, title: str) -> str:
        base = slugify(title)
        slug = base
        suffix = 2
        while self.db.query(Lesson.id).filter(Lesson.slug == slug).first():
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    def _generated_unit(self) -> Unit:
        unit = self.db.query(Unit).filter(Unit.title == GENERATED_UNIT_TITLE).first()
        if not unit:
            unit = Unit(
                title=GENERATED_UNIT_TITLE,
                description="AI-generated lesson content",
                sort_order=GENERATED_UNIT_SORT_ORDER,
            )
            self.db.add(unit)
            self.db.flush()
        return unit

    @db_exception
    def create_lesson_with_blocks(
        self,
        title: str,
        description: Optional[str],
        blocks: List[Dict[str, Any]],
    ) -> Lesson:
        """Persist a lesson and all of its blocks in one transaction."""
        unit = self._generated_unit()

        lesson = Lesson(
            unit_id=unit.id,
            slug=self._unique_slug(title),
            title=title.strip(),
            description=description.strip() if description else None,
            sort_order=0,
        )
        self.db.add(lesson)
        self.db.flush()

        for index, block in enumerate(blocks, start=1):
            block_type = str(block.get("type", "")).upper()
            if block_type not in LESSON_BLOCK_TYPES:
                logger.warning(f"Skipping block with unknown type '{block_type}'")
                continue
            self.db.add(
                LessonBlock(
                    lesson_id=lesson.id,
                    type=block_type,
                    order=block.get("order") or index,
                    data=block.get("data") or {},
                )
            )

        self.db.commit()
        self.db.refresh(lesson)
        return lesson
