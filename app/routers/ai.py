# app/routers/ai.py
"""
AI-powered translation checking and tutor feedback endpoints
"""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.limiter import ai_tutor_key, limiter
from app.schemas.ai import (
    TranslationCheckRequest,
    TranslationCheckResponse,
    TutorRequest,
    TutorResponse,
)
from app.utils.ai_component.service import ai_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])


@router.post("/check-translation", response_model=TranslationCheckResponse)
async def check_translation(data: TranslationCheckRequest):
    """
    Check a learner's English translation of a Vietnamese sentence

    Args:
        data: vietnamese_text, user_answer and an optional suggested_answer

    Returns:
        {"is_correct": bool}; on AI failure a 500 with is_correct false
    """
    if not data.vietnamese_text or not data.user_answer:
        raise HTTPException(
            status_code=400, detail="vietnamese_text and user_answer are required"
        )

    try:
        is_correct = await ai_service.check_translation(
            vietnamese_text=data.vietnamese_text,
            user_answer=data.user_answer,
            suggested_answer=data.suggested_answer,
        )
    except Exception as e:
        detail = e.detail if isinstance(e, HTTPException) else str(e)
        logger.error(f"Translation check failed: {detail}")
        return JSONResponse(
            status_code=500,
            content={"error": f"Failed to check translation: {detail}", "is_correct": False},
        )

    return TranslationCheckResponse(is_correct=is_correct)


@router.post("/tutor", response_model=TutorResponse)
@limiter.shared_limit(
    settings.ai_tutor_rate_limit, scope="ai_tutor", key_func=ai_tutor_key
)
async def tutor(request: Request, data: TutorRequest):
    """Explain why an answer is wrong. Limited per user over a sliding window."""
    feedback = await ai_service.tutor_feedback(
        question=data.question,
        user_answer=data.user_answer,
        correct_answer=data.correct_answer,
        question_type=data.question_type,
    )
    return TutorResponse(feedback=feedback)


@router.post("/tutor-translate", response_model=TutorResponse)
@limiter.shared_limit(
    settings.ai_tutor_rate_limit, scope="ai_tutor", key_func=ai_tutor_key
)
async def tutor_translate(request: Request, data: TutorRequest):
    """Review a translation answer. Counts against the same limit as /ai/tutor."""
    feedback = await ai_service.tutor_translate_feedback(
        question=data.question,
        user_answer=data.user_answer,
        correct_answer=data.correct_answer,
        question_type=data.question_type,
    )
    return TutorResponse(feedback=feedback)
