# app/schemas/question.py
"""
Question payloads.

The `data` column of a question is parsed into exactly one of the payload
models below, selected by the question type. Stored payloads use the
camelCase keys of the authoring tools (answerIndex, vietnameseText, ...),
snake_case is accepted as well.
"""

import re
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    TypeAdapter,
    model_validator,
)

CLOZE_BLANK_PATTERN = re.compile(r"\{\{(\d+)\}\}")


class _SpecBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ChoiceSpec(_SpecBase):
    type: Literal["MCQ"] = "MCQ"
    choices: List[str] = Field(..., min_length=2)
    answer_index: int = Field(..., ge=0, alias="answerIndex")

    @model_validator(mode="after")
    def answer_in_range(self):
        if self.answer_index >= len(self.choices):
            raise ValueError("answerIndex must point at one of the choices")
        return self


class ClozeSpec(_SpecBase):
    type: Literal["CLOZE"] = "CLOZE"
    template: str = Field(..., min_length=1)
    answers: List[str] = Field(..., min_length=1)

    @model_validator(mode="after")
    def blanks_match_answers(self):
        blanks = sorted({int(n) for n in CLOZE_BLANK_PATTERN.findall(self.template)})
        if blanks != list(range(1, len(self.answers) + 1)):
            raise ValueError(
                "template blanks must be numbered {{1}}..{{n}} with one answer per blank"
            )
        return self

    @property
    def blank_count(self) -> int:
        return len(self.answers)


class ReorderSpec(_SpecBase):
    type: Literal["ORDER"] = "ORDER"
    # The tokens in their one correct order
    tokens: List[str] = Field(..., min_length=2)


class TranslateSpec(_SpecBase):
    type: Literal["TRANSLATE"] = "TRANSLATE"
    vietnamese_text: str = Field(..., min_length=1, alias="vietnameseText")
    correct_answer: str = Field(..., min_length=1, alias="correctAnswer")


QuestionSpec = Annotated[
    Union[ChoiceSpec, ClozeSpec, ReorderSpec, TranslateSpec],
    Field(discriminator="type"),
]

_question_spec_adapter = TypeAdapter(QuestionSpec)


def parse_question_spec(question_type: str, data: Dict[str, Any]):
    """Validate a stored payload against the model of its question type."""
    return _question_spec_adapter.validate_python({**(data or {}), "type": question_type})


def dump_question_spec(spec) -> Dict[str, Any]:
    """Serialize a spec back to the stored (camelCase) payload, without the tag."""
    return spec.model_dump(by_alias=True, exclude={"type"})


# Candidate answers: choice index, cloze fills / reorder tokens, or free text.
# Strict members: a JSON boolean stays a bool and is never read as index 0 or 1.
CandidateAnswer = Union[StrictBool, StrictInt, List[StrictStr], StrictStr]


class QuestionOut(BaseModel):
    """A question as shown to a learner, answers withheld."""

    id: int
    type: str
    prompt: str
    concept: Optional[str] = None
    level: Optional[str] = None
    choices: Optional[List[str]] = None
    template: Optional[str] = None
    blank_count: Optional[int] = None
    tokens: Optional[List[str]] = None
    vietnamese_text: Optional[str] = None


class AnswerSubmit(BaseModel):
    answer: CandidateAnswer
    time_spent: Optional[int] = Field(None, ge=0, description="Seconds spent")


class AnswerResult(BaseModel):
    question_id: int
    is_correct: bool
    correct_answer: Any
    attempt_id: int
    feedback_requested: bool = False


class SkipResult(BaseModel):
    question_id: int
    skipped: bool = True
