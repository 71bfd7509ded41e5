"""
Questionnaire Analyzer: authoring-time diagnostics.

The runtime engine tolerates authoring mistakes silently (a malformed
response spec renders as TEXT, a backward or unknown jump target simply
does not skip). This module surfaces those same mistakes as a read-only
report so they can be fixed at import time:
    - Duplicate and out-of-order question ids
    - Response specs that fell back to TEXT
    - Skip logic with unknown or backward jump targets
    - Half-configured skip logic (trigger without jump or vice versa)
    - Code triggers that name no option of the question

IMPORTANT: This module does NOT modify the questionnaire.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Set

from qrre.expressions import TriggerKind
from qrre.model import CommentType, Qid, Questionnaire


@dataclass
class QuestionnaireReport:
    """Analysis report for a questionnaire."""

    questionnaire_name: str
    total_questions: int = 0
    required_questions: int = 0
    questions_with_skip_logic: int = 0
    questions_with_comment_type: int = 0
    pages: Set[int] = field(default_factory=set)
    surveysets: List[str] = field(default_factory=list)

    # Identity and ordering
    duplicate_qids: Set[Qid] = field(default_factory=set)
    out_of_order_qids: List[Qid] = field(default_factory=list)

    # Response specs
    parse_fallbacks: Dict[Qid, str] = field(default_factory=dict)

    # Skip logic (source qid -> offending targets)
    unresolved_skip_targets: Dict[Qid, List[Qid]] = field(default_factory=dict)
    backward_skip_targets: Dict[Qid, List[Qid]] = field(default_factory=dict)
    incomplete_skip_logic: List[Qid] = field(default_factory=list)
    unknown_trigger_codes: Dict[Qid, str] = field(default_factory=dict)

    # Warnings and flags
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def _join(values) -> str:
    return ', '.join(str(v) for v in values)


def analyze_questionnaire(questionnaire: Questionnaire) -> QuestionnaireReport:
    """
    Perform authoring-time analysis of a Questionnaire.

    Returns a QuestionnaireReport with counts, findings and warnings.
    """
    questions = questionnaire.questions
    report = QuestionnaireReport(questionnaire_name=questionnaire.name)

    # =========================================================================
    # 1. COUNTS
    # =========================================================================

    report.total_questions = len(questions)
    for question in questions:
        if question.required:
            report.required_questions += 1
        if question.comment_type is not CommentType.NONE:
            report.questions_with_comment_type += 1
        if question.page is not None:
            report.pages.add(question.page)
        if question.surveyset and question.surveyset not in report.surveysets:
            report.surveysets.append(question.surveyset)

    # =========================================================================
    # 2. IDENTITY AND ORDERING
    # =========================================================================

    counts = Counter(q.qid for q in questions)
    report.duplicate_qids = {qid for qid, n in counts.items() if n > 1}

    highest = None
    for question in questions:
        if highest is not None and question.qid <= highest:
            report.out_of_order_qids.append(question.qid)
        else:
            highest = question.qid

    positions: Dict[Qid, int] = {}
    for index, question in enumerate(questions):
        positions.setdefault(question.qid, index)

    # =========================================================================
    # 3. RESPONSE SPECS
    # =========================================================================

    for question in questions:
        if question.spec.fallback:
            report.parse_fallbacks[question.qid] = str(question.response)

    # =========================================================================
    # 4. SKIP LOGIC
    # =========================================================================

    for index, question in enumerate(questions):
        trigger = question.trigger
        rule = question.jump
        if trigger is None and rule is None:
            continue
        if trigger is None or rule is None:
            report.incomplete_skip_logic.append(question.qid)
            continue

        report.questions_with_skip_logic += 1

        if trigger.kind is TriggerKind.CODE:
            codes = {opt.code for opt in question.choices}
            if codes and trigger.code not in codes:
                report.unknown_trigger_codes[question.qid] = trigger.code

        if not rule.targets:
            report.unresolved_skip_targets.setdefault(question.qid, [])
        for target in rule.targets:
            target_index = positions.get(target)
            if target_index is None:
                report.unresolved_skip_targets.setdefault(question.qid, []).append(target)
            elif target_index <= index:
                report.backward_skip_targets.setdefault(question.qid, []).append(target)

    # =========================================================================
    # 5. WARNING FLAGS
    # =========================================================================

    if report.duplicate_qids:
        report.add_warning(f"Duplicate question ids: {_join(sorted(report.duplicate_qids))}")

    if report.out_of_order_qids:
        report.add_warning(f"Question ids out of ascending order: {_join(report.out_of_order_qids)}")

    for qid, response in report.parse_fallbacks.items():
        report.add_warning(f"Question {qid}: unrecognized response spec {response!r} (treated as TEXT)")

    for qid, targets in report.unresolved_skip_targets.items():
        if targets:
            report.add_warning(f"Question {qid}: skip target(s) not in questionnaire: {_join(targets)}")
        else:
            report.add_warning(f"Question {qid}: skip jump has no usable target")

    for qid, targets in report.backward_skip_targets.items():
        report.add_warning(f"Question {qid}: backward skip target(s) ignored: {_join(targets)}")

    for qid in report.incomplete_skip_logic:
        report.add_warning(f"Question {qid}: skip logic needs both an answer trigger and a jump")

    for qid, code in report.unknown_trigger_codes.items():
        report.add_warning(f"Question {qid}: skip trigger code {code!r} is not an option")

    return report
