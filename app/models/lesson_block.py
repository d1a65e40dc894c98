# app/models/lesson_block.py
from sqlalchemy import Column, ForeignKey, Integer, String

from app.core.database import Base, JSONType

LESSON_BLOCK_TYPES = ("INTRO", "WHAT", "HOW", "REMIND", "MINIQUIZ")


class LessonBlock(Base):
    __tablename__ = "lesson_blocks"

    id = Column(Integer, primary_key=True, index=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id"), nullable=False, index=True)

    # INTRO, WHAT, HOW, REMIND, MINIQUIZ
    type = Column(String(20), nullable=False)
    order = Column(Integer, nullable=False)

    # Block content, shape depends on type:
    # INTRO: {"title", "subtitle", "kahootHint", "cta"}
    # WHAT/HOW: {"heading", "content", "examples": [{"en", "vi"}], "notes": [...]}
    # REMIND/MINIQUIZ: {"question", "options": [...], "answerIndex", "explain"}
    data = Column(JSONType, nullable=False)

    def __repr__(self):
        return f"<LessonBlock(id={self.id}, type='{self.type}', order={self.order})>"
