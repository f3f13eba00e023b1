"""
Core Survey Model Objects

Defines the data structures of a survey:
    - Questions (one dataclass per kind)
    - Field groups owned by questions (affect grid labels, likert scales)
    - Survey (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about JSON (see surveykit.codec)
        - Know nothing about routing rules beyond owning a Navigator
        - Change only when an answer is recorded or a lifecycle time is set
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

from surveykit.answers import (
    AnswerState,
    TextAnswer,
    LikertEntryAnswer,
    LikertListAnswer,
    NO_ANSWER,
)
from surveykit.errors import UnresolvedQuestionError
from surveykit.kinds import (
    QuestionKind,
    CATEGORICAL_KINDS,
    TEXT_KINDS,
    INSTRUCTION_KINDS,
    check_answer,
)
from surveykit.navigator import Navigator

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Question:
    """
    Fields common to every kind of question.

    Never instantiated directly; use one of the kind-specific subclasses.

    Properties:
        id:
            Unique identifier within the survey

        prompt_text:
            Text shown to the user (may contain substitution placeholders)

        navigator:
            Routing table for leaving this question. None means the
            question has no routing rule; callers decide what that means.

        created_at / completed_at:
            Set when the question is shown / submitted. Both must be set
            for the question to appear in a response.

        answer:
            Recorded answer state, NoAnswer until the question is submitted
    """

    id: str
    prompt_text: Optional[str] = None
    navigator: Optional[Navigator] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    answer: AnswerState = NO_ANSWER

    @property
    def kind(self) -> QuestionKind:
        # Shadowed by a `kind` field on every concrete question
        raise TypeError("Question is abstract; use a kind-specific subclass")

    @property
    def is_completed(self) -> bool:
        return self.created_at is not None and self.completed_at is not None

    def mark_shown(self, at: Optional[datetime] = None) -> None:
        self.created_at = at or _now()

    def record_answer(self, answer: AnswerState, finished_at: Optional[datetime] = None) -> None:
        """
        Record the submitted answer and the completion time.

        Raises:
            TypeMismatchError: If `answer` is tagged for another kind of question
        """
        check_answer(self.kind, answer)
        self.answer = answer
        self.completed_at = finished_at or _now()

    def next_question_id(self) -> str:
        """
        Route from the recorded answer.

        Raises:
            ValueError: If the question has no navigator
        """
        if self.navigator is None:
            raise ValueError(f"Question {self.id} has no navigator")
        return self.navigator.next_question(self.answer)


def _require_kind(question: Question, allowed) -> None:
    if question.kind not in allowed:
        raise ValueError(f"{type(question).__name__} cannot have kind {question.kind.value}")


@dataclass(kw_only=True)
class CategoricalQuestion(Question):
    """
    Users pick one (single choice) or several (multi choice) of `choices`.

    `scores` is optional feedback data parallel to `choices`.
    """

    choices: List[str] = field(default_factory=list)
    scores: Optional[List[int]] = None
    kind: QuestionKind = QuestionKind.CATEGORICAL_SINGLE

    def __post_init__(self) -> None:
        _require_kind(self, CATEGORICAL_KINDS)

    @property
    def multiple_selection(self) -> bool:
        return self.kind == QuestionKind.CATEGORICAL_MULTI

    def score_for(self, choice: str) -> Optional[int]:
        if self.scores is None or choice not in self.choices:
            return None
        index = self.choices.index(choice)
        if index >= len(self.scores):
            return None
        return self.scores[index]


@dataclass(kw_only=True)
class TextQuestion(Question):
    """
    Free text entry.

    When `store_result` names a variable, the submitted text is written into
    the survey's variables map under that name. The question only holds a
    reference to that map; the Survey owns it.
    """

    store_result: Optional[str] = None
    kind: QuestionKind = QuestionKind.TEXT_SINGLE
    variables: Optional[Dict[str, str]] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        _require_kind(self, TEXT_KINDS)

    @property
    def multiline(self) -> bool:
        return self.kind == QuestionKind.TEXT_MULTI

    def record_answer(self, answer: AnswerState, finished_at: Optional[datetime] = None) -> None:
        super().record_answer(answer, finished_at)
        if self.store_result and self.variables is not None and isinstance(answer, TextAnswer):
            self.variables[self.store_result] = answer.value


@dataclass(kw_only=True)
class InstructionQuestion(Question):
    """
    Shows instructions only; never carries an answer and never appears in a
    response.
    """

    button_text: str
    instruction: str
    kind: QuestionKind = QuestionKind.INSTRUCTION_MULTI

    def __post_init__(self) -> None:
        _require_kind(self, INSTRUCTION_KINDS)


@dataclass
class AffectGridLabels:
    """Eight guide labels around an affect grid, left to right, top to bottom."""

    top_left: str
    top: str
    top_right: str
    left: str
    right: str
    bottom_left: str
    bottom: str
    bottom_right: str


@dataclass(kw_only=True)
class AffectGridQuestion(Question):
    labels: AffectGridLabels
    kind: QuestionKind = field(default=QuestionKind.AFFECT_GRID, init=False)


@dataclass
class LikertScale:
    """
    Describes a rating slider.

    Properties:
        min_value / max_value: Bounds of the scale
        init_value: Where the slider starts
        descriptions: Labels spread along the scale
    """

    min_value: int
    max_value: int
    init_value: int
    descriptions: List[str] = field(default_factory=list)


@dataclass(kw_only=True)
class LikertEntryQuestion(Question):
    """
    A single rating slider.

    `stacked` is a display hint: title above the slider when True, inline
    otherwise.
    """

    scale: LikertScale
    title: str
    stacked: bool = False
    kind: QuestionKind = field(default=QuestionKind.LIKERT_ENTRY, init=False)


@dataclass(kw_only=True)
class LikertListQuestion(Question):
    """A group of likert entries answered together."""

    entries: List[LikertEntryQuestion] = field(default_factory=list)
    kind: QuestionKind = field(default=QuestionKind.LIKERT_LIST, init=False)

    def get_entry(self, entry_id: str) -> Optional[LikertEntryQuestion]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def record_entries(self, answers: Dict[str, LikertEntryAnswer], finished_at: Optional[datetime] = None) -> None:
        """
        Record every entry's answer and derive the list answer from them.

        Nothing is recorded unless every entry's answer is present and valid.

        Args:
            answers: Entry question id -> answer. Every entry must be present.

        Raises:
            KeyError: If an entry has no answer in `answers`
            TypeMismatchError: If an entry's answer is not a LikertEntryAnswer
        """
        for entry in self.entries:
            check_answer(entry.kind, answers[entry.id], allow_empty=False)

        finished_at = finished_at or _now()
        for entry in self.entries:
            entry.record_answer(answers[entry.id], finished_at)
        ratings = {entry.id: entry.answer.rating for entry in self.entries}
        self.record_answer(LikertListAnswer(ratings), finished_at)


@dataclass
class Survey:
    """
    Root container for a survey and its runtime state.

    Properties:
        id:
            Survey identifier. A survey without one is not valid.

        first_question:
            Entry point, resolved to one of `questions`

        questions:
            All questions in declaration order; ids are unique

        variables:
            Free-text substitutions collected from text answers.
            Text questions added to the survey write into this dict.

        end_by:
            Time by which the survey should be finished (quick responses)

        end_time:
            Time the survey was finished; reported in the response

    INVARIANTS:
        - Question ids are unique (add_question refuses duplicates)
        - first_question is one of questions
    """

    id: str
    first_question: Optional[Question] = None
    questions: List[Question] = field(default_factory=list)
    variables: Dict[str, str] = field(default_factory=dict)
    end_by: Optional[datetime] = None
    end_time: Optional[datetime] = None

    def __post_init__(self) -> None:
        for question in self.questions:
            self._attach(question)

    def _attach(self, question: Question) -> None:
        if isinstance(question, TextQuestion):
            question.variables = self.variables

    @property
    def is_valid(self) -> bool:
        if not self.id or self.first_question is None:
            return False
        return any(question is self.first_question for question in self.questions)

    def add_question(self, question: Question) -> bool:
        """
        Append a question. Returns False (and adds nothing) if the id is taken.
        """
        if self.get_question(question.id) is not None:
            logger.warning("Duplicate question id %s in survey %s; keeping the first", question.id, self.id)
            return False
        self._attach(question)
        self.questions.append(question)
        return True

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def advance(self, question: Question) -> Optional[Question]:
        """
        Resolve the question to show after `question`.

        Returns:
            The next Question, or None if `question` has no navigator
            (the survey is complete)

        Raises:
            UnresolvedQuestionError: If the navigator routes to an unknown id
            TypeMismatchError: If the recorded answer does not fit the question
        """
        if question.navigator is None:
            return None
        next_id = question.navigator.next_question(question.answer)
        next_question = self.get_question(next_id)
        if next_question is None:
            raise UnresolvedQuestionError(next_id)
        return next_question

    def finish(self, at: Optional[datetime] = None) -> None:
        self.end_time = at or _now()
