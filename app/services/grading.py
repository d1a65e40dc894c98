# app/services/grading.py
"""
Local correctness checks for the question types that do not need the AI
checker, plus the per-type "is this answer fully specified" guards.
"""

from collections import Counter
from typing import Any

from app.schemas.question import ChoiceSpec, ClozeSpec, ReorderSpec, TranslateSpec


def _normalize(value: str) -> str:
    return value.strip().lower()


def check_choice(spec: ChoiceSpec, candidate: int) -> bool:
    return candidate == spec.answer_index


def check_cloze(spec: ClozeSpec, candidate: list) -> bool:
    if len(candidate) != len(spec.answers):
        return False
    return all(
        _normalize(given) == _normalize(expected)
        for given, expected in zip(candidate, spec.answers)
    )


def check_reorder(spec: ReorderSpec, candidate: list) -> bool:
    return list(candidate) == list(spec.tokens)


def check_locally(spec, candidate: Any) -> bool:
    """Exact checks for choice, cloze and reorder questions."""
    if isinstance(spec, ChoiceSpec):
        return check_choice(spec, candidate)
    if isinstance(spec, ClozeSpec):
        return check_cloze(spec, candidate)
    if isinstance(spec, ReorderSpec):
        return check_reorder(spec, candidate)
    raise TypeError(f"{type(spec).__name__} cannot be checked locally")


def is_answer_complete(spec, candidate: Any) -> bool:
    """
    A choice is selected, every cloze blank is filled, every token is
    placed, or the free text is not blank.
    """
    if isinstance(spec, ChoiceSpec):
        return (
            isinstance(candidate, int)
            and not isinstance(candidate, bool)
            and 0 <= candidate < len(spec.choices)
        )

    if isinstance(spec, ClozeSpec):
        return (
            isinstance(candidate, list)
            and len(candidate) == spec.blank_count
            and all(isinstance(v, str) and v.strip() for v in candidate)
        )

    if isinstance(spec, ReorderSpec):
        return isinstance(candidate, list) and Counter(candidate) == Counter(spec.tokens)

    if isinstance(spec, TranslateSpec):
        return isinstance(candidate, str) and bool(candidate.strip())

    return False


def correct_answer_of(spec) -> Any:
    """The value revealed to the learner once a question is checked."""
    if isinstance(spec, ChoiceSpec):
        return spec.answer_index
    if isinstance(spec, ClozeSpec):
        return list(spec.answers)
    if isinstance(spec, ReorderSpec):
        return list(spec.tokens)
    if isinstance(spec, TranslateSpec):
        return spec.correct_answer
    return None
