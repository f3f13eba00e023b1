"""
Tests for the Answer-State Model.

These tests verify:
    - Value equality and immutability
    - Normalisation of categorical selections
    - Quadrant labels
    - Tag checks against question kinds
"""

import dataclasses

import pytest

from surveykit.answers import (
    NoAnswer,
    NO_ANSWER,
    CategoricalAnswer,
    TextAnswer,
    AffectAnswer,
    LikertListAnswer,
    LikertEntryAnswer,
    Quadrant,
    Point,
    Size,
)
from surveykit.errors import TypeMismatchError
from surveykit.kinds import QuestionKind, answer_type_for, check_answer


class TestCategoricalAnswer:

    def test_selection_is_a_frozenset(self):
        answer = CategoricalAnswer(["A", "B"])
        assert answer.selected == frozenset({"A", "B"})

    def test_order_and_duplicates_ignored(self):
        assert CategoricalAnswer(["A", "B", "A"]) == CategoricalAnswer(["B", "A"])

    def test_default_is_empty(self):
        assert CategoricalAnswer().selected == frozenset()

    def test_immutable(self):
        answer = CategoricalAnswer({"A"})
        with pytest.raises(dataclasses.FrozenInstanceError):
            answer.selected = frozenset({"B"})


class TestQuadrant:

    def test_labels(self):
        assert Quadrant.TOP_LEFT.label == "negative_aroused"
        assert Quadrant.TOP_RIGHT.label == "positive_aroused"
        assert Quadrant.BOTTOM_LEFT.label == "negative_unaroused"
        assert Quadrant.BOTTOM_RIGHT.label == "positive_unaroused"

    def test_from_label(self):
        assert Quadrant.from_label("positive_unaroused") is Quadrant.BOTTOM_RIGHT

    def test_unknown_label(self):
        with pytest.raises(ValueError):
            Quadrant.from_label("neutral")


class TestOtherAnswers:

    def test_no_answer_singleton_equality(self):
        assert NoAnswer() == NO_ANSWER

    def test_affect_defaults(self):
        answer = AffectAnswer(Quadrant.TOP_LEFT)
        assert answer.position == Point(0.0, 0.0)
        assert answer.size == Size(0.0, 0.0)

    def test_likert_list_copies_ratings(self):
        ratings = {"e1": 3}
        answer = LikertListAnswer(ratings)
        ratings["e1"] = 5
        assert answer.ratings == {"e1": 3}

    def test_likert_list_from_pairs(self):
        assert LikertListAnswer.from_pairs([("e1", 3), ("e2", 5)]) == LikertListAnswer({"e1": 3, "e2": 5})

    def test_likert_entry_touched_by_default(self):
        assert LikertEntryAnswer("A little", 2).touched is True

    def test_text_equality(self):
        assert TextAnswer("hi") == TextAnswer("hi")
        assert TextAnswer("hi") != TextAnswer("ho")


class TestCheckAnswer:

    @pytest.mark.parametrize("kind,answer", [
        (QuestionKind.CATEGORICAL_SINGLE, CategoricalAnswer({"A"})),
        (QuestionKind.CATEGORICAL_MULTI, CategoricalAnswer({"A", "B"})),
        (QuestionKind.TEXT_USER_NAME, TextAnswer("Sam")),
        (QuestionKind.AFFECT_GRID, AffectAnswer(Quadrant.TOP_RIGHT)),
        (QuestionKind.LIKERT_LIST, LikertListAnswer({"e1": 1})),
        (QuestionKind.RANDOM_SAMPLE, LikertListAnswer({"e1": 1})),
        (QuestionKind.LIKERT_ENTRY, LikertEntryAnswer("OK", 3)),
        (QuestionKind.INSTRUCTION_AFFECT, NO_ANSWER),
    ])
    def test_matching_tags_pass(self, kind, answer):
        check_answer(kind, answer)
        assert isinstance(answer, answer_type_for(kind))

    def test_empty_answer_allowed_by_default(self):
        check_answer(QuestionKind.AFFECT_GRID, NO_ANSWER)

    def test_empty_answer_rejected_when_required(self):
        with pytest.raises(TypeMismatchError):
            check_answer(QuestionKind.AFFECT_GRID, NO_ANSWER, allow_empty=False)

    def test_mismatch_message_names_kind(self):
        with pytest.raises(TypeMismatchError) as excinfo:
            check_answer(QuestionKind.AFFECT_GRID, TextAnswer("x"))
        assert "affect_grid" in str(excinfo.value)
        assert excinfo.value.question_kind is QuestionKind.AFFECT_GRID
