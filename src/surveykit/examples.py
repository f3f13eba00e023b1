"""
Example mood survey used by the demo and the tests.

Covers every question kind and every rule shape:
    welcome (instruction) -> name (text, stored as "name")
    -> mood (affect grid, branches on quadrant)
    -> stress (likert list, branches on ratings) / activity (multi choice)
    -> sleep (single choice) -> notes (multi-line text) -> end (instruction)
"""
from typing import Any, Dict

from surveykit.codec import load_survey
from surveykit.model import Survey

_SCALE = ["Not at all", "A little", "Moderately", "Quite a bit", "Extremely"]


def _likert_entry(entry_id: str, title: str) -> Dict[str, Any]:
    return {
        "question_id": entry_id,
        "question_type": "likert_entry",
        "title": title,
        "scale_min_value": 1,
        "scale_max_value": 5,
        "scale_init_value": 3,
        "scale_descriptions": list(_SCALE),
    }


def build_example_survey_document(survey_id: str = "mood-daily") -> Dict[str, Any]:
    return {
        "survey_id": survey_id,
        "first_question_id": "welcome",
        "questions": [
            {
                "question_id": "welcome",
                "question_type": "instruction_single_line",
                "question_text": "Daily check-in",
                "instruction": "This takes about a minute.",
                "button_text": "Start",
                "next_question": {"default": "name"},
            },
            {
                "question_id": "name",
                "question_type": "text_user_name",
                "question_text": "What should we call you?",
                "store_result": "name",
                "next_question": {"default": "mood"},
            },
            {
                "question_id": "mood",
                "question_type": "affect_grid",
                "question_text": "How are you feeling right now?",
                "top_left_label": "Stressed",
                "top_label": "High energy",
                "top_right_label": "Excited",
                "left_label": "Unpleasant",
                "right_label": "Pleasant",
                "bottom_left_label": "Depressed",
                "bottom_label": "Low energy",
                "bottom_right_label": "Relaxed",
                "next_question": {
                    "default": "activity",
                    "conditions": [
                        {"if_answer": "negative_aroused", "go_to": "stress"},
                        {"if_answer": "negative_unaroused", "go_to": "stress"},
                    ],
                },
            },
            {
                "question_id": "stress",
                "question_type": "likert_list",
                "question_text": "Over the last hour, how much were you...",
                "rating_questions": [
                    _likert_entry("worried", "Worried"),
                    _likert_entry("tense", "Tense"),
                ],
                "next_question": {
                    "default": "activity",
                    "conditions": [
                        {"likert_entries": ["worried", "tense"], "if_answer": [5, 5], "go_to": "sleep"},
                    ],
                },
            },
            {
                "question_id": "activity",
                "question_type": "categorical_multi_choice",
                "question_text": "What have you been doing?",
                "choices": ["Working", "Exercising", "Socialising", "Resting"],
                "next_question": {
                    "default": "notes",
                    "conditions": [
                        {"if_answer": ["Resting"], "go_to": "sleep"},
                    ],
                },
            },
            {
                "question_id": "sleep",
                "question_type": "categorical_single_choice",
                "question_text": "How did you sleep last night?",
                "choices": ["Badly", "OK", "Well"],
                "feedback_scores": [0, 1, 2],
                "next_question": {"default": "notes"},
            },
            {
                "question_id": "notes",
                "question_type": "text_multi_line",
                "question_text": "Anything else, name?",
                "next_question": {"default": "end"},
            },
            {
                "question_id": "end",
                "question_type": "instruction_multi_line",
                "instruction": "Thanks, see you tomorrow.",
                "button_text": "Done",
            },
        ],
    }


def build_example_survey(survey_id: str = "mood-daily") -> Survey:
    return load_survey(build_example_survey_document(survey_id))
