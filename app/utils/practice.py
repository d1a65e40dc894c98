# app/utils/practice.py
"""
Terminal exercise runner.

Plays an exercise question by question on top of QuestionInteraction:
answer (check) -> continue, or skip before checking. Tutor feedback for
wrong answers is fetched in the background and printed when it arrives.
"""

import asyncio
import logging
import random
from typing import Any, List, Optional

import click
from sqlalchemy.orm import Session

from app.core.config import settings
from app.schemas.question import ChoiceSpec, ClozeSpec, ReorderSpec, TranslateSpec
from app.services.exercise import (
    ExerciseService,
    check_translation_with_ai,
    question_context,
)
from app.services.grading import correct_answer_of
from app.services.interaction import (
    IncompleteAnswerError,
    QuestionContext,
    QuestionInteraction,
    Sound,
)
from app.utils.ai_component.service import ai_service

logger = logging.getLogger(__name__)

SOUND_LABELS = {
    Sound.CORRECT: click.style("✔ Correct!", fg="green", bold=True),
    Sound.INCORRECT: click.style("✘ Incorrect", fg="red", bold=True),
    Sound.FINISHED: click.style("🎉 Exercise finished", fg="cyan", bold=True),
}


def play_sound(sound: Sound) -> None:
    click.echo("\a" + SOUND_LABELS[sound])


async def _ask(text: str, **kwargs) -> str:
    # Prompts run in a thread so feedback tasks keep running meanwhile
    return await asyncio.to_thread(click.prompt, text, **kwargs)


def pick_numbered(options: List[str], raw: str) -> Optional[List[str]]:
    """Map 1-based numbers typed by the learner to options, None on bad input."""
    picked = []
    for part in raw.split():
        if not part.isdigit():
            return None
        n = int(part)
        if not 1 <= n <= len(options):
            return None
        picked.append(options[n - 1])
    return picked


class PracticeRunner:
    def __init__(self, db: Session, user_id: Optional[int] = None, seed: Optional[int] = None):
        self.db = db
        self.user_id = user_id
        self.rng = random.Random(seed)
        self.feedback_tasks: List[asyncio.Task] = []
        self.score = 0
        self.answered = 0
        self.skipped = 0

    def _request_feedback(self, context: QuestionContext, candidate: Any) -> None:
        if not ai_service.is_configured():
            return
        task = asyncio.get_running_loop().create_task(
            self._print_feedback(context, candidate)
        )
        self.feedback_tasks.append(task)

    async def _print_feedback(self, context: QuestionContext, candidate: Any) -> None:
        spec = context.spec
        question = spec.vietnamese_text if isinstance(spec, TranslateSpec) else context.prompt
        feedback_fn = (
            ai_service.tutor_translate_feedback
            if isinstance(spec, TranslateSpec)
            else ai_service.tutor_feedback
        )
        try:
            feedback = await feedback_fn(
                question=question,
                user_answer=str(candidate),
                correct_answer=str(correct_answer_of(spec)),
                question_type=context.question_type,
            )
            click.echo(click.style(f"\n💡 Tutor: {feedback}\n", fg="yellow"))
        except Exception as e:
            logger.warning(f"Tutor feedback failed: {e}")

    def _show(self, context: QuestionContext, number: int, total: int) -> Optional[List[str]]:
        spec = context.spec
        click.echo(click.style(f"\nQuestion {number}/{total}", bold=True))
        click.echo(context.prompt)

        if isinstance(spec, ChoiceSpec):
            for i, choice in enumerate(spec.choices, start=1):
                click.echo(f"  {i}. {choice}")
        elif isinstance(spec, ClozeSpec):
            click.echo(f"  {spec.template}")
        elif isinstance(spec, ReorderSpec):
            shuffled = self.rng.sample(list(spec.tokens), len(spec.tokens))
            for i, token in enumerate(shuffled, start=1):
                click.echo(f"  {i}. {token}")
            return shuffled
        elif isinstance(spec, TranslateSpec):
            click.echo(f"  {spec.vietnamese_text}")
        return None

    async def _read_answer(self, context: QuestionContext, shuffled: Optional[List[str]]) -> Any:
        spec = context.spec

        if isinstance(spec, ChoiceSpec):
            raw = await _ask("Your choice (number)")
            return int(raw) - 1 if raw.strip().isdigit() else None

        if isinstance(spec, ClozeSpec):
            return [
                await _ask(f"Blank {{{{{i}}}}}", default="", show_default=False)
                for i in range(1, spec.blank_count + 1)
            ]

        if isinstance(spec, ReorderSpec):
            raw = await _ask("Order (numbers separated by spaces)")
            return pick_numbered(shuffled, raw)

        return await _ask("Your translation")

    async def _play_question(self, interaction: QuestionInteraction, shuffled) -> None:
        action = await _ask(
            "[a]nswer or [s]kip", type=click.Choice(["a", "s"]), default="a"
        )
        if action == "s" and interaction.can_skip:
            interaction.skip()
            self.skipped += 1
            click.echo("Skipped.")
            return

        while True:
            candidate = await self._read_answer(interaction.question, shuffled)
            try:
                await interaction.submit(candidate)
                break
            except IncompleteAnswerError:
                click.echo("Please complete your answer first.")

        if not interaction.is_correct:
            click.echo(f"Correct answer: {correct_answer_of(interaction.question.spec)}")

        await _ask("Press Enter to continue", default="", show_default=False)
        is_correct = interaction.confirm()

        self.answered += 1
        self.score += int(is_correct)
        if self.user_id is not None:
            ExerciseService(self.db).record_attempt(
                user_id=self.user_id,
                question_id=interaction.question.question_id,
                answer=interaction.candidate,
                is_correct=is_correct,
            )

    async def run(self, exercise_id: int) -> int:
        """Play every question of the exercise and return the score."""
        exercise = ExerciseService(self.db).get_exercise_or_404(exercise_id)
        contexts = [question_context(link.question) for link in exercise.exercise_questions]
        if not contexts:
            click.echo("This exercise has no questions.")
            return 0

        click.echo(click.style(exercise.title, fg="cyan", bold=True))
        interaction = QuestionInteraction(
            contexts[0],
            translation_checker=check_translation_with_ai,
            notifier=play_sound,
            request_feedback=self._request_feedback,
            check_timeout=settings.translation_check_timeout,
        )

        for number, context in enumerate(contexts, start=1):
            interaction.present(context)
            shuffled = self._show(context, number, len(contexts))
            await self._play_question(interaction, shuffled)

        play_sound(Sound.FINISHED)
        click.echo(
            f"Score: {self.score}/{self.answered} answered, {self.skipped} skipped"
        )

        if self.feedback_tasks:
            await asyncio.gather(*self.feedback_tasks, return_exceptions=True)
        return self.score
