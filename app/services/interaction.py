# app/services/interaction.py
"""
Per-question answer cycle shared by every question type.

The same control is pressed twice: the first press (submit) checks the
answer and reveals feedback, the second press (confirm) hands the verdict
to the exercise runner and moves on. Skip is only possible before the
question has been checked.

    UNANSWERED --submit--> CHECKED --confirm--> COMPLETED
    UNANSWERED --skip----> SKIPPED
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from app.schemas.question import TranslateSpec
from app.services.grading import check_locally, is_answer_complete

logger = logging.getLogger(__name__)


class Sound(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    FINISHED = "finished"


class InteractionState(str, Enum):
    UNANSWERED = "unanswered"
    CHECKED = "checked"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class InteractionError(Exception):
    pass


class InvalidTransitionError(InteractionError):
    pass


class IncompleteAnswerError(InteractionError):
    pass


@dataclass(frozen=True)
class QuestionContext:
    question_id: int
    question_type: str
    prompt: str
    spec: Any  # ChoiceSpec | ClozeSpec | ReorderSpec | TranslateSpec

    @property
    def prompt_identity(self):
        return (self.question_id, self.prompt)


TranslationChecker = Callable[[TranslateSpec, str], Awaitable[bool]]
Notifier = Callable[[Sound], None]
FeedbackRequester = Callable[[QuestionContext, Any], None]


class QuestionInteraction:
    """State machine for one question instance."""

    def __init__(
        self,
        question: QuestionContext,
        *,
        translation_checker: Optional[TranslationChecker] = None,
        notifier: Optional[Notifier] = None,
        request_feedback: Optional[FeedbackRequester] = None,
        check_timeout: Optional[float] = None,
    ):
        self.translation_checker = translation_checker
        self.notifier = notifier
        self.request_feedback = request_feedback
        self.check_timeout = check_timeout
        self._start(question)

    def _start(self, question: QuestionContext) -> None:
        self.question = question
        self.state = InteractionState.UNANSWERED
        self.candidate: Any = None
        self.is_correct: Optional[bool] = None

    def present(self, question: QuestionContext) -> None:
        """Show a question; a different prompt resets the cycle."""
        if question.prompt_identity != self.question.prompt_identity:
            self._start(question)

    @property
    def can_skip(self) -> bool:
        return self.state == InteractionState.UNANSWERED

    async def submit(self, candidate: Any) -> bool:
        if self.state != InteractionState.UNANSWERED:
            raise InvalidTransitionError(
                f"Question {self.question.question_id} was already {self.state.value}"
            )
        if not is_answer_complete(self.question.spec, candidate):
            raise IncompleteAnswerError(
                f"Answer for question {self.question.question_id} is not complete"
            )

        if isinstance(self.question.spec, TranslateSpec):
            is_correct = await self._check_translation(candidate.strip())
        else:
            is_correct = check_locally(self.question.spec, candidate)

        self.candidate = candidate
        self.is_correct = is_correct
        self.state = InteractionState.CHECKED
        self._notify(Sound.CORRECT if is_correct else Sound.INCORRECT)
        return is_correct

    def confirm(self) -> bool:
        if self.state != InteractionState.CHECKED:
            raise InvalidTransitionError("Only a checked question can be confirmed")

        self.state = InteractionState.COMPLETED
        if not self.is_correct and self.request_feedback is not None:
            try:
                self.request_feedback(self.question, self.candidate)
            except Exception as e:
                logger.warning(
                    f"Feedback request for question {self.question.question_id} failed: {e}"
                )
        return self.is_correct

    def skip(self) -> None:
        if not self.can_skip:
            raise InvalidTransitionError("A checked question cannot be skipped")
        self.state = InteractionState.SKIPPED

    async def _check_translation(self, text: str) -> bool:
        # Any failure is scored as incorrect so the learner is never stuck
        if self.translation_checker is None:
            logger.warning("No translation checker configured, scoring as incorrect")
            return False
        try:
            check = self.translation_checker(self.question.spec, text)
            if self.check_timeout:
                return bool(await asyncio.wait_for(check, timeout=self.check_timeout))
            return bool(await check)
        except asyncio.TimeoutError:
            logger.warning(
                f"Translation check timed out after {self.check_timeout}s "
                f"(question {self.question.question_id})"
            )
            return False
        except Exception as e:
            logger.warning(
                f"Translation check failed (question {self.question.question_id}): {e}"
            )
            return False

    def _notify(self, sound: Sound) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier(sound)
        except Exception as e:
            logger.debug(f"Notifier failed for {sound.value}: {e}")
