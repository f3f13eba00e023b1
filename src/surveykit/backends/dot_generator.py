"""
Graphviz DOT diagram generator for survey routing.

Converts a Survey into Graphviz DOT format for visualization. Every question
becomes a node and every navigator target an edge.

Supports two modes:
    - SIMPLE: Question flow only
    - DETAILED: Edge labels describing the rule behind each edge, and the
      question kind in each node
"""

from enum import Enum
from pathlib import Path
from typing import Union

from surveykit.model import Survey, Question
from surveykit.navigator import CategoricalRule, AffectRule, LikertListRule


class DotMode(Enum):
    """Visualization modes for DOT output."""
    SIMPLE = "simple"          # Just question flow
    DETAILED = "detailed"      # Include rule labels and kinds


def _escape_dot_string(s: str) -> str:
    """Escape special characters for DOT labels."""
    if not s:
        return '""'
    s = s.replace('\\', '\\\\')
    s = s.replace('"', '\\"')
    s = s.replace('\n', '\\n')
    return f'"{s}"'


def _escape_dot_id(identifier: str) -> str:
    """Escape/quote an identifier for DOT."""
    if not identifier:
        return '""'
    if identifier[0].isdigit() or not identifier.replace('_', '').isalnum():
        return _escape_dot_string(identifier)
    return identifier


def _rule_to_dot_label(rule) -> str:
    """Convert a rule to a readable edge label."""
    if isinstance(rule, CategoricalRule):
        return "{" + ", ".join(sorted(rule.required)) + "}"
    if isinstance(rule, AffectRule):
        return rule.label
    if isinstance(rule, LikertListRule):
        if rule.is_malformed:
            return "malformed"
        return " AND ".join(f"{e}={r}" for e, r in zip(rule.entry_ids, rule.ratings))
    return "?"


def _node_label(question: Question, mode: DotMode) -> str:
    label = question.prompt_text or question.id
    if mode == DotMode.DETAILED:
        label = f"{question.id}: {label}\n({question.kind.value})"
    return label


def generate_dot(survey: Survey, mode: DotMode = DotMode.SIMPLE) -> str:
    """
    Generate Graphviz DOT format for a survey.

    Args:
        survey: Survey object to visualize
        mode: Visualization mode (SIMPLE, DETAILED)

    Returns:
        String containing DOT graph definition
    """
    lines = []

    lines.append("digraph survey {")
    lines.append("  rankdir=LR;")
    lines.append("  node [shape=box, style=filled, fillcolor=lightblue];")

    # =========================================================================
    # NODES
    # =========================================================================

    # Entry node id must not collide with a question id
    start_id = "START"
    question_ids = {q.id for q in survey.questions}
    while start_id in question_ids:
        start_id = "_" + start_id
    lines.append(f'  {start_id} [shape=ellipse, fillcolor=lightgreen, label="START"];')

    for question in survey.questions:
        attrs = [f"label={_escape_dot_string(_node_label(question, mode))}"]
        if question.navigator is None:
            attrs.append("fillcolor=lightgrey")
        lines.append(f"  {_escape_dot_id(question.id)} [{', '.join(attrs)}];")

    # =========================================================================
    # EDGES
    # =========================================================================

    if survey.first_question is not None:
        lines.append(f"  {start_id} -> {_escape_dot_id(survey.first_question.id)};")

    for question in survey.questions:
        nav = question.navigator
        if nav is None:
            continue
        from_id = _escape_dot_id(question.id)

        for rule in nav.rules:
            edge_attr = ""
            if mode == DotMode.DETAILED:
                rule_label = _rule_to_dot_label(rule)
                if len(rule_label) > 40:
                    rule_label = rule_label[:37] + "..."
                edge_attr = f" [label={_escape_dot_string(rule_label)}]"
            lines.append(f"  {from_id} -> {_escape_dot_id(rule.go_to)}{edge_attr};")

        edge_attr = ""
        if mode == DotMode.DETAILED:
            edge_attr = ' [label="default", style=dashed]'
        lines.append(f"  {from_id} -> {_escape_dot_id(nav.default)}{edge_attr};")

    lines.append("}")

    return "\n".join(lines)


def save_dot_file(survey: Survey, filename: Union[str, Path], mode: DotMode = DotMode.SIMPLE) -> None:
    """
    Generate DOT and save to file.

    Args:
        survey: Survey to visualize
        filename: Output file path (.dot extension recommended)
        mode: Visualization mode
    """
    dot = generate_dot(survey, mode=mode)
    Path(filename).write_text(dot, encoding="utf-8")


__all__ = ["DotMode", "generate_dot", "save_dot_file"]
