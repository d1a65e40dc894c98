"""
Application initialization module
Seeds the demo unit, lesson and exercise used in development
"""

import logging

from sqlalchemy.orm import Session

from app.models.exercise import Exercise, ExerciseQuestion
from app.models.lesson import Lesson
from app.models.lesson_block import LessonBlock
from app.models.question import Question
from app.models.unit import Unit
from app.schemas.question import parse_question_spec

logger = logging.getLogger(__name__)

DEMO_LESSON_SLUG = "present-simple"

DEMO_BLOCKS = [
    {
        "type": "INTRO",
        "order": 1,
        "data": {
            "title": "Thì hiện tại đơn (Present Simple)",
            "subtitle": "Dùng cho thói quen, sự thật, lịch trình",
            "kahootHint": "Warm-up: 3 câu đúng/sai về thói quen hằng ngày",
            "cta": "Bắt đầu học",
        },
    },
    {
        "type": "WHAT",
        "order": 2,
        "data": {
            "heading": "Dùng để làm gì?",
            "content": "Present Simple diễn tả thói quen, sự thật hiển nhiên và lịch trình cố định.",
            "examples": [
                {"en": "I drink tea every morning.", "vi": "Tôi uống trà mỗi sáng."},
                {"en": "Water boils at 100°C.", "vi": "Nước sôi ở 100°C."},
            ],
        },
    },
    {
        "type": "HOW",
        "order": 3,
        "data": {
            "heading": "Cấu trúc",
            "content": "Khẳng định: S + V(s/es)\nPhủ định: S + do/does + not + V\nNghi vấn: Do/Does + S + V?",
            "notes": [
                "He/She/It: thêm -s hoặc -es vào động từ",
                "Sau does/doesn't động từ trở về nguyên mẫu",
            ],
            "examples": [
                {"en": "She goes to school.", "vi": "Cô ấy đi học."},
                {"en": "They don't like coffee.", "vi": "Họ không thích cà phê."},
            ],
        },
    },
    {
        "type": "REMIND",
        "order": 4,
        "data": {
            "question": "He ___ football every Sunday.",
            "options": ["play", "plays", "playing", "played"],
            "answerIndex": 1,
            "explain": "Chủ ngữ He là ngôi thứ ba số ít nên động từ thêm -s.",
        },
    },
    {
        "type": "MINIQUIZ",
        "order": 5,
        "data": {
            "question": "___ she live in Hanoi?",
            "options": ["Do", "Does", "Is", "Are"],
            "answerIndex": 1,
            "explain": "Câu hỏi với She dùng trợ động từ Does.",
        },
    },
]

DEMO_QUESTIONS = [
    {
        "type": "MCQ",
        "prompt": "He ___ to school every day.",
        "concept": "present_simple_verb",
        "level": "A1",
        "data": {"choices": ["go", "goes", "is going", "went"], "answerIndex": 1},
    },
    {
        "type": "CLOZE",
        "prompt": "Complete: She ___ (to live) in Hanoi.",
        "concept": "present_simple_fact",
        "level": "A1",
        "data": {"template": "She {{1}} in Hanoi.", "answers": ["lives"]},
    },
    {
        "type": "ORDER",
        "prompt": "Arrange the words in correct order:",
        "concept": "present_simple_word_order",
        "level": "A1",
        "data": {"tokens": ["She", "goes", "to", "school", "every", "day"]},
    },
    {
        "type": "TRANSLATE",
        "prompt": "Dịch câu sau sang tiếng Anh:",
        "concept": "present_simple_translation",
        "level": "A1",
        "data": {
            "vietnameseText": "Cô ấy đi làm mỗi ngày.",
            "correctAnswer": "She goes to work every day.",
        },
    },
]


def seed_demo_content(db: Session) -> bool:
    """
    Create the Present Simple demo lesson and its exercise.

    Args:
        db: Database session

    Returns:
        False when the demo content already exists
    """
    try:
        if db.query(Lesson).filter(Lesson.slug == DEMO_LESSON_SLUG).first():
            logger.info("Demo content already exists, skipping seed")
            return False

        unit = Unit(title="Grammar Basics", description="Các thì cơ bản", sort_order=1)
        db.add(unit)
        db.flush()

        lesson = Lesson(
            unit_id=unit.id,
            slug=DEMO_LESSON_SLUG,
            title="Present Simple",
            description="Thì hiện tại đơn",
            sort_order=1,
        )
        db.add(lesson)
        db.flush()

        for block in DEMO_BLOCKS:
            db.add(LessonBlock(lesson_id=lesson.id, **block))

        exercise = Exercise(
            lesson_id=lesson.id,
            title="Present Simple Exercise",
            description="Bài tập thì hiện tại đơn",
            sort_order=1,
        )
        db.add(exercise)
        db.flush()

        for index, item in enumerate(DEMO_QUESTIONS, start=1):
            # Reject malformed payloads before they are stored
            parse_question_spec(item["type"], item["data"])
            question = Question(lesson_id=lesson.id, **item)
            db.add(question)
            db.flush()
            db.add(
                ExerciseQuestion(
                    exercise_id=exercise.id, question_id=question.id, sort_order=index
                )
            )

        db.commit()
        logger.info(
            f"✅ Seeded lesson {lesson.id} and exercise {exercise.id} "
            f"with {len(DEMO_QUESTIONS)} questions"
        )
        return True

    except Exception as e:
        logger.error(f"❌ Failed to seed demo content: {e}")
        db.rollback()
        raise
