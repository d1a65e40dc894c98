import asyncio
import json

import pytest
from fastapi import HTTPException

from app.models import Lesson, LessonBlock, Unit
from app.schemas.lesson import LessonGenerateRequest
from app.services.lesson import LessonService, slugify
from app.utils.ai_component.service import ai_service


def generated_blocks(types=("INTRO", "WHAT", "HOW", "REMIND", "MINIQUIZ")):
    return [
        {"type": block_type, "order": order, "data": {"heading": block_type.title()}}
        for order, block_type in enumerate(types, start=1)
    ]


@pytest.fixture
def llm_reply(monkeypatch):
    """Make generate_completion return whatever the test puts in reply["text"]."""
    reply = {"text": "", "kwargs": None}

    async def generate_completion(prompt, system_message=None, **kwargs):
        reply["kwargs"] = kwargs
        return reply["text"]

    monkeypatch.setattr(ai_service, "generate_completion", generate_completion)
    return reply


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Present Perfect", "present-perfect"),
        ("Thì hiện tại đơn", "thi-hien-tai-don"),
        ("  Đại từ / Pronouns!  ", "dai-tu-pronouns"),
        ("???", "lesson"),
    ],
)
def test_slugify(title, expected):
    assert slugify(title) == expected


def test_generated_blocks_are_parsed_from_fenced_json(llm_reply):
    llm_reply["text"] = "```json\n" + json.dumps({"blocks": generated_blocks()}) + "\n```"

    blocks = asyncio.run(ai_service.generate_lesson_blocks("Present Perfect", "Thì hiện tại hoàn thành"))

    assert [b["type"] for b in blocks] == ["INTRO", "WHAT", "HOW", "REMIND", "MINIQUIZ"]
    assert llm_reply["kwargs"]["json_response"] is True
    assert llm_reply["kwargs"]["temperature"] == 0.7


def test_missing_required_block_is_rejected(llm_reply):
    llm_reply["text"] = json.dumps({"blocks": generated_blocks(("INTRO", "WHAT", "HOW", "MINIQUIZ"))})

    with pytest.raises(HTTPException) as exc:
        asyncio.run(ai_service.generate_lesson_blocks("Present Perfect", "desc"))
    assert exc.value.status_code == 500
    assert "REMIND" in exc.value.detail


def test_empty_generation_is_rejected(llm_reply):
    llm_reply["text"] = json.dumps({"blocks": []})

    with pytest.raises(HTTPException):
        asyncio.run(ai_service.generate_lesson_blocks("Present Perfect", "desc"))


def test_generated_lesson_goes_to_generated_unit(db, llm_reply):
    llm_reply["text"] = json.dumps({"blocks": generated_blocks()})
    service = LessonService(db)
    request = LessonGenerateRequest(
        lesson_name="Present Perfect", lesson_description="Thì hiện tại hoàn thành"
    )

    first = asyncio.run(service.generate_lesson(request))
    second = asyncio.run(service.generate_lesson(request))

    unit = db.query(Unit).filter(Unit.title == "Generated Lessons").one()
    assert unit.sort_order == 999
    assert first.unit_id == second.unit_id == unit.id
    assert first.slug == "present-perfect"
    assert second.slug == "present-perfect-2"
    assert [b.order for b in first.blocks] == [1, 2, 3, 4, 5]
    assert db.query(LessonBlock).filter(LessonBlock.lesson_id == first.id).count() == 5


def test_failed_generation_stores_nothing(db, llm_reply):
    llm_reply["text"] = "not json at all"

    with pytest.raises(HTTPException):
        asyncio.run(
            LessonService(db).generate_lesson(
                LessonGenerateRequest(lesson_name="Broken", lesson_description="desc")
            )
        )
    assert db.query(Lesson).count() == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"lesson_name": "  ", "lesson_description": "desc"},
        {"lesson_name": "Name", "lesson_description": ""},
        {"lesson_name": "Name", "lesson_description": "desc", "block_count": 4},
        {"lesson_name": "Name", "lesson_description": "desc", "block_count": 21},
    ],
)
def test_generate_request_validation(payload):
    with pytest.raises(ValueError):
        LessonGenerateRequest(**payload)


def test_lesson_lookup_by_id_or_slug(db, exercise):
    service = LessonService(db)
    by_slug = service.get_lesson("present-simple")
    by_id = service.get_lesson(str(by_slug.id))

    assert by_id.id == by_slug.id
    assert [b.type for b in by_slug.blocks] == ["INTRO", "WHAT", "HOW", "REMIND", "MINIQUIZ"]

    with pytest.raises(HTTPException) as exc:
        service.get_lesson("no-such-lesson")
    assert exc.value.status_code == 404
