"""
Question kinds and the answer state each kind accepts.

The kind strings are the `question_type` tags used in both the inbound
survey definition and the outbound response.
"""

from enum import Enum
from typing import Dict, Type

from surveykit.answers import (
    AnswerState,
    NoAnswer,
    CategoricalAnswer,
    TextAnswer,
    AffectAnswer,
    LikertListAnswer,
    LikertEntryAnswer,
)
from surveykit.errors import TypeMismatchError


class QuestionKind(Enum):
    CATEGORICAL_SINGLE = "categorical_single_choice"
    CATEGORICAL_MULTI = "categorical_multi_choice"
    INSTRUCTION_SINGLE = "instruction_single_line"
    INSTRUCTION_MULTI = "instruction_multi_line"
    INSTRUCTION_AFFECT = "instruction_affect_grid"
    TEXT_SINGLE = "text_single_line"
    TEXT_MULTI = "text_multi_line"
    TEXT_USER_NAME = "text_user_name"
    AFFECT_GRID = "affect_grid"
    LIKERT_LIST = "likert_list"
    LIKERT_ENTRY = "likert_entry"
    # Decoded exactly like a likert list
    RANDOM_SAMPLE = "random_sample"


CATEGORICAL_KINDS = frozenset({QuestionKind.CATEGORICAL_SINGLE, QuestionKind.CATEGORICAL_MULTI})

TEXT_KINDS = frozenset({
    QuestionKind.TEXT_SINGLE,
    QuestionKind.TEXT_MULTI,
    QuestionKind.TEXT_USER_NAME,
})

INSTRUCTION_KINDS = frozenset({
    QuestionKind.INSTRUCTION_SINGLE,
    QuestionKind.INSTRUCTION_MULTI,
    QuestionKind.INSTRUCTION_AFFECT,
})

LIKERT_LIST_KINDS = frozenset({QuestionKind.LIKERT_LIST, QuestionKind.RANDOM_SAMPLE})


_ANSWER_TYPES: Dict[QuestionKind, Type[AnswerState]] = {}
for _kind in CATEGORICAL_KINDS:
    _ANSWER_TYPES[_kind] = CategoricalAnswer
for _kind in TEXT_KINDS:
    _ANSWER_TYPES[_kind] = TextAnswer
for _kind in INSTRUCTION_KINDS:
    _ANSWER_TYPES[_kind] = NoAnswer
for _kind in LIKERT_LIST_KINDS:
    _ANSWER_TYPES[_kind] = LikertListAnswer
_ANSWER_TYPES[QuestionKind.AFFECT_GRID] = AffectAnswer
_ANSWER_TYPES[QuestionKind.LIKERT_ENTRY] = LikertEntryAnswer


def answer_type_for(kind: QuestionKind) -> Type[AnswerState]:
    """Return the answer state class recorded against questions of `kind`."""
    return _ANSWER_TYPES[kind]


def check_answer(kind: QuestionKind, answer: AnswerState, allow_empty: bool = True) -> None:
    """
    Enforce that `answer` is tagged for `kind`.

    Args:
        kind: Kind of the owning question
        answer: Recorded answer state
        allow_empty: Whether NoAnswer is acceptable for this use

    Raises:
        TypeMismatchError: On any mismatch. This is a caller bug.
    """
    if isinstance(answer, NoAnswer) and allow_empty:
        return
    if not isinstance(answer, _ANSWER_TYPES[kind]):
        raise TypeMismatchError(kind, answer)
