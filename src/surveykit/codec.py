"""
Document Codec: survey definitions in, responses out.

Inbound:
    A survey definition document (JSON, or YAML with the same shape) is
    decoded into a Survey. Each question element is dispatched on its
    `question_type` tag to one decoder per kind. A question that is malformed
    or of an unknown kind is dropped; a document without `survey_id` or with
    an unresolvable `first_question_id` yields no Survey at all.

Outbound:
    A completed Survey is encoded into a response document: one answer
    fragment per completed question, in declaration order.

The definition schema and the response schema differ, so decode/encode is
not a round trip. `survey_to_dict` re-encodes a Survey into the definition
schema when the definition itself is needed (see surveykit.snapshot).
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml

from surveykit.answers import (
    CategoricalAnswer,
    AffectAnswer,
    LikertEntryAnswer,
)
from surveykit.config import ResponseSettings, load_settings
from surveykit.errors import InvalidSurveyError, MalformedQuestionError
from surveykit.kinds import (
    QuestionKind,
    CATEGORICAL_KINDS,
    TEXT_KINDS,
    INSTRUCTION_KINDS,
    LIKERT_LIST_KINDS,
    check_answer,
)
from surveykit.model import (
    Question,
    CategoricalQuestion,
    TextQuestion,
    InstructionQuestion,
    AffectGridLabels,
    AffectGridQuestion,
    LikertScale,
    LikertEntryQuestion,
    LikertListQuestion,
    Survey,
)
from surveykit.navigator import (
    Navigator,
    CategoricalRule,
    AffectRule,
    LikertListRule,
    rule_type_for,
)

logger = logging.getLogger(__name__)

AFFECT_LABEL_FIELDS = (
    ("top_left", "top_left_label"),
    ("top", "top_label"),
    ("top_right", "top_right_label"),
    ("left", "left_label"),
    ("right", "right_label"),
    ("bottom_left", "bottom_left_label"),
    ("bottom", "bottom_label"),
    ("bottom_right", "bottom_right_label"),
)


# =============================================================================
# FIELD EXTRACTION
# =============================================================================

def _require_str(d: Dict[str, Any], key: str) -> str:
    value = d.get(key)
    if not isinstance(value, str):
        raise MalformedQuestionError(f"'{key}' must be a string, got {value!r}")
    return value


def _optional_str(d: Dict[str, Any], key: str) -> Optional[str]:
    value = d.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedQuestionError(f"'{key}' must be a string, got {value!r}")
    return value


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise MalformedQuestionError(f"'{key}' must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise MalformedQuestionError(f"'{key}' must be an integer, got {value!r}")


def _require_int(d: Dict[str, Any], key: str) -> int:
    return _as_int(d.get(key), key)


def _require_list(d: Dict[str, Any], key: str) -> List[Any]:
    value = d.get(key)
    if not isinstance(value, list):
        raise MalformedQuestionError(f"'{key}' must be an array, got {value!r}")
    return value


def _require_str_list(d: Dict[str, Any], key: str) -> List[str]:
    items = _require_list(d, key)
    for item in items:
        if not isinstance(item, str):
            raise MalformedQuestionError(f"'{key}' must contain only strings, got {item!r}")
    return list(items)


def _require_int_list(d: Dict[str, Any], key: str) -> List[int]:
    return [_as_int(item, key) for item in _require_list(d, key)]


# =============================================================================
# NAVIGATORS
# =============================================================================

def _categorical_rule_from_dict(d: Dict[str, Any]) -> CategoricalRule:
    labels = d.get("if_answer")
    if isinstance(labels, str):
        labels = [labels]
    if not isinstance(labels, list) or not all(isinstance(label, str) for label in labels):
        raise MalformedQuestionError(f"categorical 'if_answer' must be an array of strings, got {labels!r}")
    return CategoricalRule(required=frozenset(labels), go_to=_require_str(d, "go_to"))


def _affect_rule_from_dict(d: Dict[str, Any]) -> AffectRule:
    label = d.get("if_answer")
    if isinstance(label, list) and len(label) == 1:
        label = label[0]
    if not isinstance(label, str):
        raise MalformedQuestionError(f"affect 'if_answer' must be a string, got {label!r}")
    return AffectRule(label=label, go_to=_require_str(d, "go_to"))


def _likert_rule_from_dict(d: Dict[str, Any]) -> LikertListRule:
    rule = LikertListRule(
        entry_ids=tuple(_require_str_list(d, "likert_entries")),
        ratings=tuple(_require_int_list(d, "if_answer")),
        go_to=_require_str(d, "go_to"),
    )
    if rule.is_malformed:
        logger.warning(
            "Likert rule to %s pairs %d entries with %d ratings; it will never match",
            rule.go_to, len(rule.entry_ids), len(rule.ratings),
        )
    return rule


_RULE_DECODERS: Dict[type, Callable[[Dict[str, Any]], Any]] = {
    CategoricalRule: _categorical_rule_from_dict,
    AffectRule: _affect_rule_from_dict,
    LikertListRule: _likert_rule_from_dict,
}


def navigator_from_dict(d: Dict[str, Any], kind: QuestionKind) -> Navigator:
    """
    Decode a `next_question` object for a question of `kind`.

    `default` is required. Individual rules with a bad shape are dropped
    with a warning; the rest of the table survives. Conditions on kinds
    that never branch (text, instruction, likert entry) are ignored.

    Raises:
        MalformedQuestionError: If `default` is missing or `conditions` is not an array
    """
    if not isinstance(d, dict):
        raise MalformedQuestionError(f"'next_question' must be an object, got {d!r}")
    default = _require_str(d, "default")
    conditions = d.get("conditions") or []
    if not isinstance(conditions, list):
        raise MalformedQuestionError(f"'conditions' must be an array, got {conditions!r}")

    rule_type = rule_type_for(kind)
    if rule_type is None:
        if conditions:
            logger.debug("Ignoring %d conditions on a %s question", len(conditions), kind.value)
        return Navigator(question_kind=kind, default=default)

    decode_rule = _RULE_DECODERS[rule_type]
    rules = []
    for index, condition in enumerate(conditions):
        if not isinstance(condition, dict):
            logger.warning("Dropping condition %d: not an object", index)
            continue
        try:
            rules.append(decode_rule(condition))
        except MalformedQuestionError as e:
            logger.warning("Dropping condition %d: %s", index, e)
    return Navigator(question_kind=kind, default=default, rules=tuple(rules))


def navigator_to_dict(nav: Navigator) -> Dict[str, Any]:
    conditions = []
    for rule in nav.rules:
        if isinstance(rule, CategoricalRule):
            conditions.append({"if_answer": sorted(rule.required), "go_to": rule.go_to})
        elif isinstance(rule, AffectRule):
            conditions.append({"if_answer": rule.label, "go_to": rule.go_to})
        elif isinstance(rule, LikertListRule):
            conditions.append({
                "likert_entries": list(rule.entry_ids),
                "if_answer": list(rule.ratings),
                "go_to": rule.go_to,
            })
        else:
            raise TypeError(f"Unsupported rule type: {type(rule)}")
    return {"default": nav.default, "conditions": conditions}


# =============================================================================
# QUESTIONS (definition schema)
# =============================================================================

def _common_fields(d: Dict[str, Any], kind: QuestionKind) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "id": _require_str(d, "question_id"),
        "prompt_text": _optional_str(d, "question_text"),
    }
    if d.get("next_question") is not None:
        fields["navigator"] = navigator_from_dict(d["next_question"], kind)
    return fields


def _categorical_from_dict(d: Dict[str, Any], kind: QuestionKind) -> CategoricalQuestion:
    scores = None
    if d.get("feedback_scores") is not None:
        scores = _require_int_list(d, "feedback_scores")
    return CategoricalQuestion(
        choices=_require_str_list(d, "choices"),
        scores=scores,
        kind=kind,
        **_common_fields(d, kind),
    )


def _text_from_dict(d: Dict[str, Any], kind: QuestionKind) -> TextQuestion:
    return TextQuestion(store_result=_optional_str(d, "store_result"), kind=kind, **_common_fields(d, kind))


def _instruction_from_dict(d: Dict[str, Any], kind: QuestionKind) -> InstructionQuestion:
    return InstructionQuestion(
        button_text=_require_str(d, "button_text"),
        instruction=_require_str(d, "instruction"),
        kind=kind,
        **_common_fields(d, kind),
    )


def _affect_grid_from_dict(d: Dict[str, Any], kind: QuestionKind) -> AffectGridQuestion:
    labels = AffectGridLabels(**{attr: _require_str(d, key) for attr, key in AFFECT_LABEL_FIELDS})
    return AffectGridQuestion(labels=labels, **_common_fields(d, kind))


def _likert_entry_from_dict(d: Dict[str, Any], kind: QuestionKind = QuestionKind.LIKERT_ENTRY) -> LikertEntryQuestion:
    stacked = d.get("display_stacked", False)
    if not isinstance(stacked, bool):
        raise MalformedQuestionError(f"'display_stacked' must be a boolean, got {stacked!r}")
    scale = LikertScale(
        min_value=_require_int(d, "scale_min_value"),
        max_value=_require_int(d, "scale_max_value"),
        init_value=_require_int(d, "scale_init_value"),
        descriptions=_require_str_list(d, "scale_descriptions"),
    )
    return LikertEntryQuestion(
        scale=scale,
        title=_require_str(d, "title"),
        stacked=stacked,
        **_common_fields(d, QuestionKind.LIKERT_ENTRY),
    )


def _likert_list_from_dict(d: Dict[str, Any], kind: QuestionKind) -> LikertListQuestion:
    entries = []
    for item in _require_list(d, "rating_questions"):
        if not isinstance(item, dict):
            raise MalformedQuestionError(f"'rating_questions' must contain objects, got {item!r}")
        entries.append(_likert_entry_from_dict(item))
    # random_sample routes and reports exactly like likert_list
    return LikertListQuestion(entries=entries, **_common_fields(d, QuestionKind.LIKERT_LIST))


_QUESTION_DECODERS: Dict[QuestionKind, Callable[[Dict[str, Any], QuestionKind], Question]] = {}
for _kind in CATEGORICAL_KINDS:
    _QUESTION_DECODERS[_kind] = _categorical_from_dict
for _kind in TEXT_KINDS:
    _QUESTION_DECODERS[_kind] = _text_from_dict
for _kind in INSTRUCTION_KINDS:
    _QUESTION_DECODERS[_kind] = _instruction_from_dict
for _kind in LIKERT_LIST_KINDS:
    _QUESTION_DECODERS[_kind] = _likert_list_from_dict
_QUESTION_DECODERS[QuestionKind.AFFECT_GRID] = _affect_grid_from_dict
_QUESTION_DECODERS[QuestionKind.LIKERT_ENTRY] = _likert_entry_from_dict


def question_from_dict(d: Dict[str, Any]) -> Question:
    """
    Decode one element of a definition's `questions` array.

    Raises:
        MalformedQuestionError: Unknown `question_type` or missing/invalid fields
    """
    if not isinstance(d, dict):
        raise MalformedQuestionError(f"question must be an object, got {d!r}")
    tag = d.get("question_type")
    try:
        kind = QuestionKind(tag)
    except ValueError:
        raise MalformedQuestionError(f"unrecognised question_type {tag!r}")
    try:
        return _QUESTION_DECODERS[kind](d, kind)
    except (TypeError, ValueError) as e:
        raise MalformedQuestionError(f"invalid {kind.value} question: {e}")


def _likert_entry_to_dict(q: LikertEntryQuestion) -> Dict[str, Any]:
    return {
        "scale_min_value": q.scale.min_value,
        "scale_max_value": q.scale.max_value,
        "scale_init_value": q.scale.init_value,
        "scale_descriptions": list(q.scale.descriptions),
        "title": q.title,
        "display_stacked": q.stacked,
    }


def question_to_dict(q: Question) -> Dict[str, Any]:
    """Encode a question back into the definition schema."""
    d: Dict[str, Any] = {"question_id": q.id, "question_type": q.kind.value}
    if q.prompt_text is not None:
        d["question_text"] = q.prompt_text
    if q.navigator is not None:
        d["next_question"] = navigator_to_dict(q.navigator)

    if isinstance(q, CategoricalQuestion):
        d["choices"] = list(q.choices)
        if q.scores is not None:
            d["feedback_scores"] = list(q.scores)
    elif isinstance(q, TextQuestion):
        if q.store_result is not None:
            d["store_result"] = q.store_result
    elif isinstance(q, InstructionQuestion):
        d["button_text"] = q.button_text
        d["instruction"] = q.instruction
    elif isinstance(q, AffectGridQuestion):
        for attr, key in AFFECT_LABEL_FIELDS:
            d[key] = getattr(q.labels, attr)
    elif isinstance(q, LikertEntryQuestion):
        d.update(_likert_entry_to_dict(q))
    elif isinstance(q, LikertListQuestion):
        d["rating_questions"] = [question_to_dict(entry) for entry in q.entries]
    else:
        raise TypeError(f"Unsupported Question type: {type(q)}")
    return d


# =============================================================================
# SURVEYS (definition schema)
# =============================================================================

def survey_from_dict(d: Any) -> Optional[Survey]:
    """
    Decode a survey definition.

    Returns:
        A valid Survey, or None when the document has no `survey_id` or its
        `first_question_id` is missing or names no decoded question.
    """
    if not isinstance(d, dict):
        logger.info("Survey document is not an object")
        return None
    survey_id = d.get("survey_id")
    if not isinstance(survey_id, str) or not survey_id:
        logger.info("Survey document has no survey_id")
        return None

    survey = Survey(id=survey_id)
    questions = d.get("questions") or []
    if not isinstance(questions, list):
        logger.info("Survey %s: 'questions' is not an array; ignoring it", survey_id)
        questions = []
    for index, item in enumerate(questions):
        try:
            question = question_from_dict(item)
        except MalformedQuestionError as e:
            logger.debug("Survey %s: skipping question %d: %s", survey_id, index, e)
            continue
        survey.add_question(question)

    first_question_id = d.get("first_question_id")
    if not isinstance(first_question_id, str):
        logger.info("Survey %s has no first_question_id", survey_id)
        return None
    survey.first_question = survey.get_question(first_question_id)
    if survey.first_question is None:
        logger.info("Survey %s: first question %s not found", survey_id, first_question_id)
        return None
    return survey


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    d: Dict[str, Any] = {"survey_id": s.id, "questions": [question_to_dict(q) for q in s.questions]}
    if s.first_question is not None:
        d["first_question_id"] = s.first_question.id
    return d


def survey_from_json(s: Union[str, bytes]) -> Optional[Survey]:
    try:
        d = json.loads(s)
    except ValueError as e:
        logger.info("Survey document is not valid JSON: %s", e)
        return None
    return survey_from_dict(d)


def survey_from_yaml(s: str) -> Optional[Survey]:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        logger.info("Survey document is not valid YAML: %s", e)
        return None
    return survey_from_dict(d)


def survey_to_json(s: Survey) -> str:
    return json.dumps(survey_to_dict(s), sort_keys=True)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s))


def survey_from_file(path: Union[str, Path]) -> Optional[Survey]:
    """
    Read a definition from disk. `.yaml`/`.yml` files are read as YAML,
    anything else as JSON. I/O errors propagate.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return survey_from_yaml(text)
    return survey_from_json(text)


def load_survey(document: Union[str, bytes, Dict[str, Any]]) -> Survey:
    """
    Strict variant of the decoders: raise instead of returning None.

    Raises:
        InvalidSurveyError: If the document cannot produce a usable survey
    """
    if isinstance(document, dict):
        survey = survey_from_dict(document)
    else:
        survey = survey_from_json(document)
    if survey is None:
        raise InvalidSurveyError("Document does not describe a usable survey")
    return survey


# =============================================================================
# RESPONSES
# =============================================================================

def _timestamp(dt: datetime) -> int:
    return int(dt.timestamp())


def _common_answer_fields(q: Question) -> Dict[str, Any]:
    d: Dict[str, Any] = {"question_id": q.id, "question_type": q.kind.value}
    if q.created_at is not None:
        d["create_time"] = _timestamp(q.created_at)
    if q.completed_at is not None:
        d["finish_time"] = _timestamp(q.completed_at)
    return d


def _entry_answer_fields(answer: LikertEntryAnswer) -> Dict[str, Any]:
    return {"answer": answer.answer_label, "rating": answer.rating, "touched": answer.touched}


def likert_entry_fragment(entry: LikertEntryQuestion) -> Dict[str, Any]:
    """
    Fragment for one entry of a likert list. The entry must hold a
    LikertEntryAnswer.

    Raises:
        TypeMismatchError: If the entry's answer is not a LikertEntryAnswer
    """
    check_answer(entry.kind, entry.answer, allow_empty=False)
    d = _common_answer_fields(entry)
    d.update(_entry_answer_fields(entry.answer))
    return d


def answer_to_dict(q: Question) -> Optional[Dict[str, Any]]:
    """
    Encode a question's answer as a response fragment.

    Returns:
        None for instructions and for questions without both lifecycle
        times; otherwise the fragment.

    Raises:
        TypeMismatchError: If the recorded answer does not fit the question
    """
    if isinstance(q, InstructionQuestion) or not q.is_completed:
        return None

    d = _common_answer_fields(q)
    if isinstance(q, CategoricalQuestion):
        check_answer(q.kind, q.answer, allow_empty=False)
        selected = q.answer.selected
        ordered = [choice for choice in q.choices if choice in selected]
        ordered.extend(sorted(selected.difference(q.choices)))
        d["answer"] = ordered
    elif isinstance(q, AffectGridQuestion):
        check_answer(q.kind, q.answer, allow_empty=False)
        answer: AffectAnswer = q.answer
        d["answer"] = answer.quadrant.label
        d["x_lim"] = answer.size.width
        d["y_lim"] = answer.size.height
        d["x_value"] = answer.position.x
        d["y_value"] = answer.position.y
    elif isinstance(q, LikertListQuestion):
        check_answer(q.kind, q.answer)
        d["answer"] = [likert_entry_fragment(entry) for entry in q.entries]
    elif isinstance(q, LikertEntryQuestion):
        check_answer(q.kind, q.answer)
        if isinstance(q.answer, LikertEntryAnswer):
            d.update(_entry_answer_fields(q.answer))
    elif isinstance(q, TextQuestion):
        check_answer(q.kind, q.answer)
    else:
        raise TypeError(f"Unsupported Question type: {type(q)}")
    return d


def response_to_dict(
    survey: Survey,
    account_name: Optional[str] = None,
    device_id: Optional[str] = None,
    settings: Optional[ResponseSettings] = None,
) -> Dict[str, Any]:
    """
    Build the response document for a survey.

    Args:
        survey: Survey whose completed questions are reported
        account_name: Account (e-mail) of the respondent, if known
        device_id: Device UUID that completed the survey, if known
        settings: Response settings; read from the environment when omitted
    """
    settings = settings or load_settings()
    d: Dict[str, Any] = {
        "operating_system": settings.operating_system,
        "survey_id": survey.id,
    }
    if account_name is not None:
        d["account_name"] = account_name
    if device_id is not None:
        d["uuid"] = device_id
    if survey.end_time is not None:
        d["finish_time"] = _timestamp(survey.end_time)

    answers = []
    for question in survey.questions:
        fragment = answer_to_dict(question)
        if fragment is not None:
            answers.append(fragment)
    d["answers"] = answers
    return d


def response_to_json(
    survey: Survey,
    account_name: Optional[str] = None,
    device_id: Optional[str] = None,
    settings: Optional[ResponseSettings] = None,
) -> str:
    return json.dumps(response_to_dict(survey, account_name, device_id, settings), sort_keys=True)
