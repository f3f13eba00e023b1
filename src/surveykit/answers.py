"""
Answer-State Model

Every question carries exactly one answer state, recorded by the UI-facing
caller once the question has been completed. The states form a closed set
of tagged values:

    - NoAnswer            (nothing recorded yet)
    - CategoricalAnswer   (the full set of selected choice labels)
    - TextAnswer          (free text)
    - AffectAnswer        (grid quadrant plus raw slider position and grid size)
    - LikertListAnswer    (entry id -> rating)
    - LikertEntryAnswer   (answer label, rating, whether the slider was touched)

ARCHITECTURAL RULE:
    These are pure values. They compare by value and never change after
    construction. Whoever builds an answer guarantees its shape matches the
    question it is recorded against; the navigator and the response encoder
    check the tag and fail loudly on a mismatch.
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Mapping, Tuple


class AnswerState(ABC):
    """
    Base class for all answer states.

    Structure only. Matching against routing rules lives in the navigator,
    JSON shapes live in the codec.
    """
    pass


@dataclass(frozen=True)
class NoAnswer(AnswerState):
    """The initial state of every question."""
    pass


NO_ANSWER = NoAnswer()


@dataclass(frozen=True)
class CategoricalAnswer(AnswerState):
    """
    The choices picked on a categorical question.

    Always the FULL selected set, never a delta. Any iterable is accepted
    and normalised to a frozenset, so ordering and duplicates carry no
    meaning:

        CategoricalAnswer(["A", "B", "A"]) == CategoricalAnswer({"B", "A"})
    """

    selected: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "selected", frozenset(self.selected))


@dataclass(frozen=True)
class TextAnswer(AnswerState):
    """Free text entered on a text question."""

    value: str


class Quadrant(Enum):
    """
    The four zones of an affect grid.

    Horizontal axis is valence (negative -> positive), vertical axis is
    arousal (unaroused -> aroused). Each zone has a fixed label used both
    by routing rules and in responses.
    """

    TOP_LEFT = "negative_aroused"
    TOP_RIGHT = "positive_aroused"
    BOTTOM_LEFT = "negative_unaroused"
    BOTTOM_RIGHT = "positive_unaroused"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "Quadrant":
        """Inverse of `label`. Raises ValueError for unknown labels."""
        return cls(label)


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Size:
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class AffectAnswer(AnswerState):
    """
    Where the slider was released on an affect grid.

    Properties:
        quadrant: The zone the slider ended in
        position: Raw slider position in grid coordinates
        size: Size of the grid the position was measured against
    """

    quadrant: Quadrant
    position: Point = field(default_factory=Point)
    size: Size = field(default_factory=Size)


@dataclass(frozen=True)
class LikertListAnswer(AnswerState):
    """
    Ratings given on each entry of a likert list, keyed by entry question id.

    The mapping is copied on construction; later changes to the caller's
    dict do not leak into the recorded answer.
    """

    ratings: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "ratings", dict(self.ratings))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, int]]) -> "LikertListAnswer":
        ratings: Dict[str, int] = {}
        for entry_id, rating in pairs:
            ratings[entry_id] = rating
        return cls(ratings)


@dataclass(frozen=True)
class LikertEntryAnswer(AnswerState):
    """
    The rating given on a single likert entry.

    Properties:
        answer_label: Scale description shown at the chosen rating
        rating: Chosen value on the scale
        touched: False if the user submitted the initial value untouched
    """

    answer_label: str
    rating: int
    touched: bool = True
