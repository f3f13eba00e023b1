"""
Survey Analyzer: routing diagnostics for decoded surveys.

The navigator never checks that its targets exist; keeping every `go_to` and
`default` resolvable is the survey author's job. This module checks it, along
with the rest of the routing graph:
    - Unresolved navigation targets
    - Reachability from the entry question, and cycles
    - Terminal questions (no navigator)
    - Rules that can never fire (unknown labels, malformed or shadowed rules)

IMPORTANT: This is read-only. It never modifies the survey.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from surveykit.answers import Quadrant
from surveykit.kinds import QuestionKind
from surveykit.model import Survey, Question, CategoricalQuestion, LikertListQuestion
from surveykit.navigator import CategoricalRule, AffectRule, LikertListRule

_QUADRANT_LABELS = {q.label for q in Quadrant}


def _find_cycles_dfs(graph: Dict[str, List[str]], start: str, visited: Set[str],
                     rec_stack: Set[str], path: List[str]) -> Optional[List[str]]:
    """DFS to find a cycle starting from a node."""
    visited.add(start)
    rec_stack.add(start)
    path.append(start)

    for neighbor in graph.get(start, []):
        if neighbor not in visited:
            cycle = _find_cycles_dfs(graph, neighbor, visited, rec_stack, path[:])
            if cycle:
                return cycle
        elif neighbor in rec_stack:
            cycle_start_idx = path.index(neighbor)
            return path[cycle_start_idx:] + [neighbor]

    rec_stack.remove(start)
    return None


@dataclass
class RoutingReport:
    """Analysis report for a survey's routing graph."""

    survey_id: str
    total_questions: int = 0
    total_rules: int = 0
    questions_with_navigator: int = 0

    # Graph properties
    entry_point: Optional[str] = None
    terminal_questions: List[str] = field(default_factory=list)
    unreachable_questions: Set[str] = field(default_factory=set)
    unresolved_targets: Dict[str, List[str]] = field(default_factory=dict)
    has_cycles: bool = False
    cycle_example: Optional[List[str]] = None

    # Rule health
    dead_rules: List[str] = field(default_factory=list)
    malformed_rules: List[str] = field(default_factory=list)
    max_rules_per_question: int = 0
    avg_rules_per_question: float = 0.0

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def _rule_problems(question: Question, index: int, rule) -> List[str]:
    """Reasons a rule can never fire, judged from the question alone."""
    where = f"{question.id} rule {index}"
    problems = []
    if isinstance(rule, CategoricalRule) and isinstance(question, CategoricalQuestion):
        unknown = rule.required.difference(question.choices)
        if unknown:
            problems.append(f"{where}: unknown choices {', '.join(sorted(unknown))}")
        if question.kind == QuestionKind.CATEGORICAL_SINGLE and len(rule.required) != 1:
            problems.append(f"{where}: single choice rule requires {len(rule.required)} labels")
    elif isinstance(rule, AffectRule):
        if rule.label not in _QUADRANT_LABELS:
            problems.append(f"{where}: unknown quadrant label {rule.label}")
    elif isinstance(rule, LikertListRule) and isinstance(question, LikertListQuestion):
        entry_ids = {entry.id for entry in question.entries}
        unknown = set(rule.entry_ids).difference(entry_ids)
        if unknown:
            problems.append(f"{where}: unknown likert entries {', '.join(sorted(unknown))}")
    return problems


def _rule_key(rule):
    if isinstance(rule, CategoricalRule):
        return rule.required
    if isinstance(rule, AffectRule):
        return rule.label
    return tuple(sorted(zip(rule.entry_ids, rule.ratings)))


def analyze_survey(survey: Survey) -> RoutingReport:
    """
    Analyze the routing graph of a Survey.

    Returns a RoutingReport with metrics and warnings.
    """
    report = RoutingReport(survey_id=survey.id)
    report.total_questions = len(survey.questions)
    if survey.first_question is not None:
        report.entry_point = survey.first_question.id

    known_ids = {q.id for q in survey.questions}
    outgoing: Dict[str, List[str]] = defaultdict(list)
    rules_per_question: List[int] = []

    # =========================================================================
    # 1. TARGETS AND RULES
    # =========================================================================

    for question in survey.questions:
        nav = question.navigator
        if nav is None:
            report.terminal_questions.append(question.id)
            continue

        report.questions_with_navigator += 1
        report.total_rules += len(nav.rules)
        rules_per_question.append(len(nav.rules))

        for target in nav.targets():
            if target not in outgoing[question.id]:
                outgoing[question.id].append(target)
            if target not in known_ids:
                missing = report.unresolved_targets.setdefault(question.id, [])
                if target not in missing:
                    missing.append(target)

        seen = set()
        for index, rule in enumerate(nav.rules):
            if isinstance(rule, LikertListRule) and rule.is_malformed:
                report.malformed_rules.append(
                    f"{question.id} rule {index}: {len(rule.entry_ids)} entries, {len(rule.ratings)} ratings"
                )
                continue
            report.dead_rules.extend(_rule_problems(question, index, rule))
            key = _rule_key(rule)
            if key in seen:
                report.dead_rules.append(f"{question.id} rule {index}: shadowed by an earlier rule")
            seen.add(key)

    if rules_per_question:
        report.max_rules_per_question = max(rules_per_question)
        report.avg_rules_per_question = sum(rules_per_question) / len(rules_per_question)

    # =========================================================================
    # 2. GRAPH STRUCTURE
    # =========================================================================

    reachable: Set[str] = set()
    stack = [report.entry_point] if report.entry_point else []
    while stack:
        node = stack.pop()
        if node in reachable:
            continue
        reachable.add(node)
        for neighbor in outgoing.get(node, []):
            if neighbor not in reachable:
                stack.append(neighbor)

    for question in survey.questions:
        if question.id not in reachable:
            report.unreachable_questions.add(question.id)

    visited: Set[str] = set()
    for question_id in list(outgoing.keys()):
        if question_id not in visited:
            cycle = _find_cycles_dfs(outgoing, question_id, visited, set(), [])
            if cycle:
                report.has_cycles = True
                report.cycle_example = cycle
                break

    # =========================================================================
    # 3. WARNING FLAGS
    # =========================================================================

    for question_id, missing in report.unresolved_targets.items():
        report.add_warning(f"Unresolved targets from {question_id}: {', '.join(missing)}")

    if report.unreachable_questions:
        report.add_warning(
            f"Unreachable questions: {', '.join(sorted(report.unreachable_questions))}"
        )

    if report.has_cycles:
        report.add_warning(f"Cycle detected: {' -> '.join(report.cycle_example)}")

    for problem in report.malformed_rules:
        report.add_warning(f"Malformed rule {problem}")

    for problem in report.dead_rules:
        report.add_warning(f"Rule never fires: {problem}")

    if not report.terminal_questions and survey.questions:
        report.add_warning("No terminal question: every question has a navigator")

    return report
