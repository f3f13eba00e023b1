"""
Navigator / Routing Engine

Every question may own a Navigator: a default target plus an ordered list of
rules. Given the answer recorded on the question, the navigator returns the
id of the next question to show.

Routing semantics:
    - Rules are scanned in declared order; the FIRST matching rule wins.
    - If no rule matches, the default target is returned.
    - Text questions always route to the default target.
    - An empty answer (NoAnswer) always routes to the default target.

Matching policy per kind:
    Categorical: the rule's label set equals the selected set exactly
    Affect:      the rule's label equals the quadrant's fixed label
    LikertList:  every (entry id, rating) pair of the rule agrees exactly

ARCHITECTURAL RULE:
    Rules are flat. There is no nested boolean logic and no fallback for a
    question without a navigator; callers decide what that means.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Tuple, Type, Union
import logging

from surveykit.answers import (
    AnswerState,
    NoAnswer,
    CategoricalAnswer,
    AffectAnswer,
    LikertListAnswer,
)
from surveykit.kinds import (
    QuestionKind,
    CATEGORICAL_KINDS,
    TEXT_KINDS,
    LIKERT_LIST_KINDS,
    check_answer,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoricalRule:
    """
    Routes to `go_to` when the selected choices are exactly `required`.

    Both sides are sets: order and duplicates in the source rule are ignored.
    """

    required: FrozenSet[str]
    go_to: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "required", frozenset(self.required))

    def matches(self, answer: CategoricalAnswer) -> bool:
        return answer.selected == self.required


@dataclass(frozen=True)
class AffectRule:
    """Routes to `go_to` when the answer's quadrant label equals `label`."""

    label: str
    go_to: str

    def matches(self, answer: AffectAnswer) -> bool:
        return answer.quadrant.label == self.label


@dataclass(frozen=True)
class LikertListRule:
    """
    Routes to `go_to` when every listed entry has exactly the listed rating.

    `entry_ids` and `ratings` are parallel. A rule whose two lists differ in
    length is malformed and never matches.
    """

    entry_ids: Tuple[str, ...]
    ratings: Tuple[int, ...]
    go_to: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "entry_ids", tuple(self.entry_ids))
        object.__setattr__(self, "ratings", tuple(self.ratings))

    @property
    def is_malformed(self) -> bool:
        return len(self.entry_ids) != len(self.ratings)

    def matches(self, answer: LikertListAnswer) -> bool:
        if self.is_malformed:
            return False
        for entry_id, rating in zip(self.entry_ids, self.ratings):
            if entry_id not in answer.ratings or answer.ratings[entry_id] != rating:
                return False
        return True


Rule = Union[CategoricalRule, AffectRule, LikertListRule]


_RULE_TYPES: Dict[QuestionKind, Type] = {}
for _kind in CATEGORICAL_KINDS:
    _RULE_TYPES[_kind] = CategoricalRule
for _kind in LIKERT_LIST_KINDS:
    _RULE_TYPES[_kind] = LikertListRule
_RULE_TYPES[QuestionKind.AFFECT_GRID] = AffectRule


def rule_type_for(kind: QuestionKind):
    """Return the rule class routing questions of `kind`, or None if the kind never branches."""
    return _RULE_TYPES.get(kind)


@dataclass
class Navigator:
    """
    The routing table of a single question.

    Properties:
        question_kind:
            Kind of the owning question. Used to validate answer tags and
            to choose the matching policy.

        default:
            Question id returned when no rule matches

        rules:
            Ordered rules; the first match wins

    Example:
        Navigator(
            question_kind=QuestionKind.CATEGORICAL_SINGLE,
            default="q2",
            rules=(CategoricalRule({"A"}, go_to="q3"),),
        ).next_question(CategoricalAnswer({"A"}))   # -> "q3"
    """

    question_kind: QuestionKind
    default: str
    rules: Tuple[Rule, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        self.rules = tuple(self.rules)
        expected = rule_type_for(self.question_kind)
        for rule in self.rules:
            if expected is None or not isinstance(rule, expected):
                raise ValueError(
                    f"{type(rule).__name__} cannot route a {self.question_kind.value} question"
                )

    def next_question(self, answer: AnswerState) -> str:
        """
        Decide the next question id from the recorded answer.

        Raises:
            TypeMismatchError: If `answer` is not tagged for this navigator's kind
        """
        check_answer(self.question_kind, answer)

        if isinstance(answer, NoAnswer) or self.question_kind in TEXT_KINDS:
            return self.default

        for index, rule in enumerate(self.rules):
            if rule.matches(answer):
                logger.debug("Rule %d matched, routing to %s", index, rule.go_to)
                return rule.go_to

        return self.default

    def targets(self) -> List[str]:
        """All question ids this navigator can route to, rules first, default last."""
        ids = [rule.go_to for rule in self.rules]
        ids.append(self.default)
        return ids
