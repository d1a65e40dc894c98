import logging

from app.utils.prompts import (
    TUTOR_SYSTEM_MESSAGE,
    get_tutor_feedback_prompt,
    get_tutor_translate_feedback_prompt,
)

logger = logging.getLogger(__name__)


class TutorFeedbackMixin:
    async def tutor_feedback(
        self, question: str, user_answer: str, correct_answer: str, question_type: str
    ) -> str:
        """Explain in Vietnamese why an answer to a grammar question is wrong."""
        return await self.generate_completion(
            prompt=get_tutor_feedback_prompt(
                question, user_answer, correct_answer, question_type
            ),
            system_message=TUTOR_SYSTEM_MESSAGE,
            temperature=0.7,
            max_tokens=300,
        )

    async def tutor_translate_feedback(
        self, question: str, user_answer: str, correct_answer: str, question_type: str
    ) -> str:
        """Review a learner translation for spelling, structure and meaning."""
        return await self.generate_completion(
            prompt=get_tutor_translate_feedback_prompt(
                question, user_answer, correct_answer, question_type
            ),
            system_message=TUTOR_SYSTEM_MESSAGE,
            temperature=0.7,
            max_tokens=300,
        )
