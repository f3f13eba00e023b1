"""
Snapshots of in-progress surveys.

A snapshot is the survey definition plus everything recorded at runtime
(answers, lifecycle times, collected variables, end times), so a host can
save a half-finished survey and pick it up later. Where the snapshot is
stored is the host's concern.

Provides lossless JSON/YAML round-trip via an intermediate dict, in the same
explicit to_dict/from_dict style as surveykit.codec.
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Optional

import yaml

from surveykit.answers import (
    AnswerState,
    NoAnswer,
    CategoricalAnswer,
    TextAnswer,
    AffectAnswer,
    LikertListAnswer,
    LikertEntryAnswer,
    Quadrant,
    Point,
    Size,
    NO_ANSWER,
)
from surveykit.codec import survey_from_dict, survey_to_dict
from surveykit.errors import InvalidSurveyError
from surveykit.model import Question, LikertListQuestion, Survey


def answer_state_to_dict(a: AnswerState) -> Dict[str, Any]:
    if isinstance(a, NoAnswer):
        return {"type": "none"}
    if isinstance(a, CategoricalAnswer):
        return {"type": "categorical", "selected": sorted(a.selected)}
    if isinstance(a, TextAnswer):
        return {"type": "text", "value": a.value}
    if isinstance(a, AffectAnswer):
        return {
            "type": "affect",
            "quadrant": a.quadrant.label,
            "x": a.position.x,
            "y": a.position.y,
            "width": a.size.width,
            "height": a.size.height,
        }
    if isinstance(a, LikertListAnswer):
        return {"type": "likert_list", "ratings": dict(a.ratings)}
    if isinstance(a, LikertEntryAnswer):
        return {"type": "likert_entry", "answer": a.answer_label, "rating": a.rating, "touched": a.touched}
    raise TypeError(f"Unsupported AnswerState type: {type(a)}")


def answer_state_from_dict(d: Optional[Dict[str, Any]]) -> AnswerState:
    if d is None:
        return NO_ANSWER
    t = d.get("type")
    if t == "none":
        return NO_ANSWER
    if t == "categorical":
        return CategoricalAnswer(d.get("selected", []))
    if t == "text":
        return TextAnswer(d["value"])
    if t == "affect":
        return AffectAnswer(
            quadrant=Quadrant.from_label(d["quadrant"]),
            position=Point(d.get("x", 0.0), d.get("y", 0.0)),
            size=Size(d.get("width", 0.0), d.get("height", 0.0)),
        )
    if t == "likert_list":
        return LikertListAnswer(d.get("ratings", {}))
    if t == "likert_entry":
        return LikertEntryAnswer(d["answer"], d["rating"], d.get("touched", True))
    raise TypeError(f"Unsupported answer dict type: {t}")


def _time_to_str(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat()


def _time_from_str(s: Optional[str]) -> Optional[datetime]:
    if s is None:
        return None
    return datetime.fromisoformat(s)


def question_state_to_dict(q: Question) -> Dict[str, Any]:
    d = {
        "answer": answer_state_to_dict(q.answer),
        "created_at": _time_to_str(q.created_at),
        "completed_at": _time_to_str(q.completed_at),
    }
    if isinstance(q, LikertListQuestion):
        d["entries"] = {entry.id: question_state_to_dict(entry) for entry in q.entries}
    return d


def restore_question_state(q: Question, d: Dict[str, Any]) -> None:
    """Apply a saved state to `q` without re-running answer side effects."""
    q.answer = answer_state_from_dict(d.get("answer"))
    q.created_at = _time_from_str(d.get("created_at"))
    q.completed_at = _time_from_str(d.get("completed_at"))
    if isinstance(q, LikertListQuestion):
        for entry_id, entry_state in (d.get("entries") or {}).items():
            entry = q.get_entry(entry_id)
            if entry is not None:
                restore_question_state(entry, entry_state)


def survey_snapshot_to_dict(s: Survey) -> Dict[str, Any]:
    return {
        "definition": survey_to_dict(s),
        "variables": dict(s.variables),
        "end_by": _time_to_str(s.end_by),
        "end_time": _time_to_str(s.end_time),
        "states": {q.id: question_state_to_dict(q) for q in s.questions},
    }


def survey_snapshot_from_dict(d: Dict[str, Any]) -> Survey:
    """
    Rebuild a survey and its runtime state from a snapshot.

    Raises:
        InvalidSurveyError: If the embedded definition is not a usable survey
    """
    survey = survey_from_dict(d.get("definition"))
    if survey is None:
        raise InvalidSurveyError("Snapshot does not contain a usable survey definition")
    # Update in place: text questions hold a reference to this dict
    survey.variables.update(d.get("variables") or {})
    survey.end_by = _time_from_str(d.get("end_by"))
    survey.end_time = _time_from_str(d.get("end_time"))
    for question_id, state in (d.get("states") or {}).items():
        question = survey.get_question(question_id)
        if question is not None:
            restore_question_state(question, state)
    return survey


def survey_snapshot_to_json(s: Survey) -> str:
    return json.dumps(survey_snapshot_to_dict(s), sort_keys=True)


def survey_snapshot_from_json(s: str) -> Survey:
    return survey_snapshot_from_dict(json.loads(s))


def survey_snapshot_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_snapshot_to_dict(s))


def survey_snapshot_from_yaml(s: str) -> Survey:
    return survey_snapshot_from_dict(yaml.safe_load(s))
