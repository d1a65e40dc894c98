import logging
from typing import Optional

from app.utils.prompts import (
    TRANSLATION_CHECK_SYSTEM_MESSAGE,
    get_translation_check_prompt,
)

logger = logging.getLogger(__name__)


class TranslationCheckerMixin:
    async def check_translation(
        self,
        vietnamese_text: str,
        user_answer: str,
        suggested_answer: Optional[str] = None,
    ) -> bool:
        """
        Ask the model whether an English translation of a Vietnamese sentence
        is grammatical and keeps the meaning.

        Args:
            vietnamese_text: The sentence to translate
            user_answer: The learner's translation
            suggested_answer: A reference translation, shown as one acceptable option

        Returns:
            True when the translation is accepted

        Raises:
            HTTPException: If the request fails or the reply is not valid JSON
        """
        content = await self.generate_completion(
            prompt=get_translation_check_prompt(
                vietnamese_text, user_answer, suggested_answer
            ),
            system_message=TRANSLATION_CHECK_SYSTEM_MESSAGE,
            temperature=0.1,
            max_tokens=300,
            json_response=True,
        )

        result = self._extract_json_from_response(content)
        is_correct = isinstance(result, dict) and result.get("isCorrect") is True
        logger.info(f"Translation check: {'accepted' if is_correct else 'rejected'}")
        return is_correct
