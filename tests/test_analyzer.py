"""
Tests for the Survey Analyzer.

Tests verify that the analyzer correctly:
    - Counts questions and rules
    - Reports unresolved navigation targets
    - Finds reachability, terminals and cycles
    - Flags rules that can never fire
"""

from surveykit.analyzer import analyze_survey
from surveykit.examples import build_example_survey
from surveykit.kinds import QuestionKind
from surveykit.model import (
    CategoricalQuestion,
    TextQuestion,
    AffectGridLabels,
    AffectGridQuestion,
    LikertScale,
    LikertEntryQuestion,
    LikertListQuestion,
    Survey,
)
from surveykit.navigator import Navigator, CategoricalRule, AffectRule, LikertListRule


def text(question_id, default=None):
    nav = None
    if default is not None:
        nav = Navigator(question_kind=QuestionKind.TEXT_SINGLE, default=default)
    return TextQuestion(question_id, navigator=nav)


def survey_of(*questions):
    survey = Survey(id="s1", questions=list(questions))
    survey.first_question = questions[0]
    return survey


def test_example_survey_is_clean():
    """The bundled example survey should produce no warnings."""
    report = analyze_survey(build_example_survey())

    assert report.total_questions == 8
    assert report.entry_point == "welcome"
    assert report.terminal_questions == ["end"]
    assert report.unreachable_questions == set()
    assert report.unresolved_targets == {}
    assert not report.has_cycles
    assert report.warnings == []


def test_rule_counts():
    q1 = CategoricalQuestion(
        "q1",
        choices=["A", "B"],
        navigator=Navigator(
            question_kind=QuestionKind.CATEGORICAL_SINGLE,
            default="q2",
            rules=(CategoricalRule({"A"}, "q2"), CategoricalRule({"B"}, "q2")),
        ),
    )
    report = analyze_survey(survey_of(q1, text("q2")))

    assert report.total_rules == 2
    assert report.questions_with_navigator == 1
    assert report.max_rules_per_question == 2
    assert report.avg_rules_per_question == 2.0


def test_unresolved_targets():
    """Targets that name no question are reported per source question."""
    report = analyze_survey(survey_of(text("q1", default="ghost")))

    assert report.unresolved_targets == {"q1": ["ghost"]}
    assert any("ghost" in w for w in report.warnings)


def test_unreachable_questions():
    report = analyze_survey(survey_of(text("q1"), text("orphan")))

    assert report.unreachable_questions == {"orphan"}
    assert report.terminal_questions == ["q1", "orphan"]


def test_cycle_detection():
    report = analyze_survey(survey_of(text("q1", default="q2"), text("q2", default="q1")))

    assert report.has_cycles
    assert report.cycle_example[0] == report.cycle_example[-1]
    assert "No terminal question: every question has a navigator" in report.warnings


def test_unknown_choice_is_dead():
    q1 = CategoricalQuestion(
        "q1",
        choices=["A", "B"],
        navigator=Navigator(
            question_kind=QuestionKind.CATEGORICAL_SINGLE,
            default="q2",
            rules=(CategoricalRule({"Z"}, "q2"),),
        ),
    )
    report = analyze_survey(survey_of(q1, text("q2")))

    assert len(report.dead_rules) == 1
    assert "unknown choices Z" in report.dead_rules[0]


def test_single_choice_rule_with_two_labels_is_dead():
    q1 = CategoricalQuestion(
        "q1",
        choices=["A", "B"],
        navigator=Navigator(
            question_kind=QuestionKind.CATEGORICAL_SINGLE,
            default="q2",
            rules=(CategoricalRule({"A", "B"}, "q2"),),
        ),
    )
    report = analyze_survey(survey_of(q1, text("q2")))

    assert report.dead_rules == ["q1 rule 0: single choice rule requires 2 labels"]


def test_unknown_quadrant_label_is_dead():
    grid = AffectGridQuestion(
        "mood",
        labels=AffectGridLabels("a", "b", "c", "d", "e", "f", "g", "h"),
        navigator=Navigator(
            question_kind=QuestionKind.AFFECT_GRID,
            default="q2",
            rules=(AffectRule("neutral", "q2"),),
        ),
    )
    report = analyze_survey(survey_of(grid, text("q2")))

    assert report.dead_rules == ["mood rule 0: unknown quadrant label neutral"]


def test_shadowed_rule_is_dead():
    grid = AffectGridQuestion(
        "mood",
        labels=AffectGridLabels("a", "b", "c", "d", "e", "f", "g", "h"),
        navigator=Navigator(
            question_kind=QuestionKind.AFFECT_GRID,
            default="q2",
            rules=(AffectRule("positive_aroused", "q2"), AffectRule("positive_aroused", "q3")),
        ),
    )
    report = analyze_survey(survey_of(grid, text("q2"), text("q3")))

    assert report.dead_rules == ["mood rule 1: shadowed by an earlier rule"]


def test_likert_rules():
    scale = LikertScale(min_value=1, max_value=5, init_value=3)
    entries = [LikertEntryQuestion("e1", scale=scale, title="E1")]
    likert = LikertListQuestion(
        "l",
        entries=entries,
        navigator=Navigator(
            question_kind=QuestionKind.LIKERT_LIST,
            default="q2",
            rules=(
                LikertListRule(["e1", "e2"], [3], "q2"),
                LikertListRule(["e9"], [1], "q2"),
            ),
        ),
    )
    report = analyze_survey(survey_of(likert, text("q2")))

    assert report.malformed_rules == ["l rule 0: 2 entries, 1 ratings"]
    assert report.dead_rules == ["l rule 1: unknown likert entries e9"]
    assert "Malformed rule l rule 0: 2 entries, 1 ratings" in report.warnings


def test_analyzer_does_not_modify_survey():
    survey = build_example_survey()
    before = [q.id for q in survey.questions]
    analyze_survey(survey)
    assert [q.id for q in survey.questions] == before
    assert survey.first_question.id == "welcome"
