#!/usr/bin/env python3
"""
Demo: Walk the example mood survey and print the response document.

Answers every question along one path, then shows the routing report,
the response JSON and a DOT diagram of the survey.
"""

import json
import logging

from surveykit.analyzer import analyze_survey
from surveykit.answers import NO_ANSWER, TextAnswer, AffectAnswer, CategoricalAnswer, LikertEntryAnswer, Quadrant
from surveykit.backends import generate_dot, save_dot_file, DotMode
from surveykit.codec import response_to_dict
from surveykit.examples import build_example_survey
from surveykit.logging_setup import configure_logging
from surveykit.model import LikertListQuestion

logger = logging.getLogger("surveykit.demo")

ANSWERS = {
    "welcome": NO_ANSWER,
    "name": TextAnswer("Sam"),
    "mood": AffectAnswer(Quadrant.TOP_LEFT),
    "activity": CategoricalAnswer({"Working", "Exercising"}),
    "sleep": CategoricalAnswer({"OK"}),
    "notes": TextAnswer("Long day."),
    "end": NO_ANSWER,
}

STRESS = {
    "worried": LikertEntryAnswer("Extremely", 5),
    "tense": LikertEntryAnswer("Quite a bit", 4),
}


def main():
    configure_logging("DEBUG")
    survey = build_example_survey()

    print("=" * 80)
    print("SURVEY WALKTHROUGH DEMO")
    print("=" * 80)

    question = survey.first_question
    while question is not None:
        question.mark_shown()
        if isinstance(question, LikertListQuestion):
            question.record_entries(STRESS)
        else:
            question.record_answer(ANSWERS[question.id])
        print(f"  {question.id:<10} {question.kind.value}")
        question = survey.advance(question)
    survey.finish()

    report = analyze_survey(survey)
    print(f"\nQuestions: {report.total_questions}, rules: {report.total_rules}")
    for warning in report.warnings:
        logger.warning(warning)

    print("\nRESPONSE:")
    print("-" * 80)
    print(json.dumps(response_to_dict(survey, account_name="sam@example.org"), indent=2))

    print("\nDOT (detailed):")
    print("-" * 80)
    print(generate_dot(survey, mode=DotMode.DETAILED))
    save_dot_file(survey, "survey_detailed.dot", mode=DotMode.DETAILED)

    print("\n" + "=" * 80)
    print("To visualize the diagram:")
    print("  dot -Tpng survey_detailed.dot -o survey_detailed.png")
    print("=" * 80)


if __name__ == "__main__":
    main()
