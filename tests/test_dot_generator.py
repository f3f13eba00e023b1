"""
Tests for DOT diagram generator.

These tests verify that surveys are correctly converted to Graphviz DOT format.

Tests cover:
    - Question nodes and navigator edges
    - Rule labels on edges
    - Node styling
    - Special character escaping
    - Simple vs. detailed modes
"""

from surveykit.backends import DotMode, generate_dot, save_dot_file
from surveykit.examples import build_example_survey
from surveykit.kinds import QuestionKind
from surveykit.model import (
    CategoricalQuestion,
    TextQuestion,
    LikertScale,
    LikertEntryQuestion,
    LikertListQuestion,
    Survey,
)
from surveykit.navigator import Navigator, CategoricalRule, LikertListRule


def two_question_survey():
    q1 = CategoricalQuestion(
        "q1",
        prompt_text="Pick one",
        choices=["A", "B"],
        navigator=Navigator(
            question_kind=QuestionKind.CATEGORICAL_SINGLE,
            default="q2",
            rules=(CategoricalRule({"A"}, "q3"),),
        ),
    )
    survey = Survey(id="s1", questions=[q1, TextQuestion("q2", prompt_text="Why?"), TextQuestion("q3")])
    survey.first_question = q1
    return survey


class TestDotBasicStructure:
    """Test basic DOT graph structure."""

    def test_empty_survey_generates_valid_dot(self):
        dot = generate_dot(Survey(id="empty"))
        assert dot.startswith("digraph survey {")
        assert dot.endswith("}")
        assert "START" in dot

    def test_question_becomes_node(self):
        dot = generate_dot(two_question_survey())
        assert 'q1 [label="Pick one"' in dot
        assert 'q3 [label="q3"' in dot

    def test_entry_edge(self):
        assert "START -> q1;" in generate_dot(two_question_survey())

    def test_rule_and_default_edges(self):
        dot = generate_dot(two_question_survey(), mode=DotMode.SIMPLE)
        assert "q1 -> q3;" in dot
        assert "q1 -> q2;" in dot

    def test_terminal_questions_are_grey(self):
        dot = generate_dot(two_question_survey())
        assert 'q2 [label="Why?", fillcolor=lightgrey];' in dot
        assert 'q1 [label="Pick one"];' in dot


class TestDotDetailedMode:

    def test_rule_label_on_edge(self):
        dot = generate_dot(two_question_survey(), mode=DotMode.DETAILED)
        assert 'q1 -> q3 [label="{A}"];' in dot

    def test_default_edge_is_dashed(self):
        dot = generate_dot(two_question_survey(), mode=DotMode.DETAILED)
        assert 'q1 -> q2 [label="default", style=dashed];' in dot

    def test_node_label_includes_kind(self):
        dot = generate_dot(two_question_survey(), mode=DotMode.DETAILED)
        assert "(categorical_single_choice)" in dot

    def test_likert_rule_label(self):
        scale = LikertScale(min_value=1, max_value=5, init_value=3)
        likert = LikertListQuestion(
            "l",
            entries=[LikertEntryQuestion("e1", scale=scale, title="E1")],
            navigator=Navigator(
                question_kind=QuestionKind.LIKERT_LIST,
                default="end",
                rules=(LikertListRule(["e1"], [5], "end"), LikertListRule(["e1", "e2"], [5], "end")),
            ),
        )
        survey = Survey(id="s1", questions=[likert, TextQuestion("end")])
        survey.first_question = likert
        dot = generate_dot(survey, mode=DotMode.DETAILED)
        assert 'l -> end [label="e1=5"];' in dot
        assert 'l -> end [label="malformed"];' in dot

    def test_long_labels_truncated(self):
        choices = [f"choice_number_{i}" for i in range(5)]
        q1 = CategoricalQuestion(
            "q1",
            choices=choices,
            kind=QuestionKind.CATEGORICAL_MULTI,
            navigator=Navigator(
                question_kind=QuestionKind.CATEGORICAL_MULTI,
                default="q2",
                rules=(CategoricalRule(choices, "q2"),),
            ),
        )
        survey = Survey(id="s1", questions=[q1, TextQuestion("q2")])
        dot = generate_dot(survey, mode=DotMode.DETAILED)
        edge = [line for line in dot.splitlines() if "q1 -> q2 [label=" in line and "default" not in line][0]
        assert '..."' in edge


class TestDotEscaping:

    def test_quotes_in_prompt_escaped(self):
        survey = Survey(id="s1", questions=[TextQuestion("q1", prompt_text='Say "hi"')])
        assert 'label="Say \\"hi\\""' in generate_dot(survey)

    def test_odd_ids_are_quoted(self):
        q1 = TextQuestion(
            "first-question",
            navigator=Navigator(question_kind=QuestionKind.TEXT_SINGLE, default="2nd"),
        )
        survey = Survey(id="s1", questions=[q1])
        survey.first_question = q1
        dot = generate_dot(survey)
        assert 'START -> "first-question";' in dot
        assert '"first-question" -> "2nd";' in dot


def test_example_survey_diagram():
    dot = generate_dot(build_example_survey(), mode=DotMode.DETAILED)
    assert "START -> welcome;" in dot
    assert 'mood -> stress [label="negative_aroused"];' in dot
    assert 'stress -> sleep [label="worried=5 AND tense=5"];' in dot
    assert 'activity -> sleep [label="{Resting}"];' in dot


def test_save_dot_file(tmp_path):
    path = tmp_path / "survey.dot"
    save_dot_file(two_question_survey(), path, mode=DotMode.DETAILED)
    assert path.read_text(encoding="utf-8") == generate_dot(two_question_survey(), mode=DotMode.DETAILED)


def test_question_named_start_keeps_its_own_node():
    q1 = TextQuestion("START", navigator=Navigator(question_kind=QuestionKind.TEXT_SINGLE, default="q2"))
    survey = Survey(id="s1", questions=[q1, TextQuestion("q2")])
    survey.first_question = q1
    dot = generate_dot(survey)
    assert '_START [shape=ellipse, fillcolor=lightgreen, label="START"];' in dot
    assert "_START -> START;" in dot
    assert "START -> q2;" in dot
