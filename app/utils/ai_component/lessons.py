import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from app.utils.prompts import LESSON_SYSTEM_MESSAGE, get_lesson_generation_prompt

logger = logging.getLogger(__name__)

REQUIRED_BLOCK_TYPES = ("INTRO", "WHAT", "HOW", "REMIND")


class LessonGeneratorMixin:
    async def generate_lesson_blocks(
        self,
        lesson_name: str,
        lesson_description: str,
        difficulty: str = "beginner",
        block_count: int = 8,
        additional_requirements: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Generate the content blocks of a grammar lesson

        Args:
            lesson_name: Title of the lesson
            lesson_description: What the lesson covers
            difficulty: Target learner level
            block_count: Total number of blocks, 4 fixed blocks plus mini quizzes
            additional_requirements: Free-form extra instructions

        Returns:
            List of {"type", "order", "data"} block dictionaries

        Raises:
            HTTPException: 500 if the model returns no blocks or misses a required block type
        """
        content = await self.generate_completion(
            prompt=get_lesson_generation_prompt(
                lesson_name,
                lesson_description,
                difficulty,
                block_count,
                additional_requirements,
            ),
            system_message=LESSON_SYSTEM_MESSAGE,
            temperature=0.7,
            json_response=True,
        )

        result = self._extract_json_from_response(content)
        blocks = result.get("blocks") if isinstance(result, dict) else None

        if not blocks or not isinstance(blocks, list):
            raise HTTPException(
                status_code=500, detail="AI did not generate any lesson blocks"
            )

        found_types = {block.get("type") for block in blocks if isinstance(block, dict)}
        missing = [t for t in REQUIRED_BLOCK_TYPES if t not in found_types]
        if missing:
            logger.error(f"Generated lesson is missing blocks: {missing}")
            raise HTTPException(
                status_code=500,
                detail=f"Generated lesson is missing required blocks: {', '.join(missing)}",
            )

        logger.info(f"Generated {len(blocks)} blocks for lesson '{lesson_name}'")
        return blocks
