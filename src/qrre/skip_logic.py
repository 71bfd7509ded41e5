"""
Skip-Logic Evaluator.

Given the ordered question sequence and the live answer map, work out which
questions are unreachable because a triggered skip jumps over them.

Algorithm:
    For every question with skip logic:
        1. Test its trigger against its own current answer
        2. Resolve the jump target (direct, or first matching clause)
        3. Everything strictly between source and target becomes unreachable
    Unreachable ranges from several skips are unioned.

Rules:
    - Forward only: a target at or before the source is ignored
    - A target missing from the sequence is SKIP_TARGET_UNRESOLVED: no skip
    - Every trigger is evaluated, including triggers of questions that are
      themselves unreachable (answers persist while a question is hidden)
    - No state is carried between calls; recompute on every answer change
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from .answers import answer_text, answers_match, is_empty, is_no, is_yes, normalize_answers
from .expressions import AnswerTerm, JumpClause, JumpRule, Trigger, TriggerKind
from .model import Qid, Question, SkipEvent, coerce_qid

logger = logging.getLogger(__name__)

_KEYWORD_TRIGGERS = {
    "0": TriggerKind.NO,
    "1": TriggerKind.YES,
    "D": TriggerKind.DROPDOWN_SELECTED,
    "M": TriggerKind.MULTI_SELECTED,
    "A": TriggerKind.ANSWERED,
}

_WILDCARD = "*"


@lru_cache(maxsize=None)
def _parse_trigger(token: str) -> Optional[Trigger]:
    if not token:
        return None
    kind = _KEYWORD_TRIGGERS.get(token)
    if kind is not None:
        return Trigger(kind=kind)
    return Trigger(kind=TriggerKind.CODE, code=token)


def parse_trigger(skip_logic_answer: Any) -> Optional[Trigger]:
    """
    Parse a skipLogicAnswer value.

    Numeric storage (0 / 1) is accepted as well as text.

    Returns:
        Trigger, or None when no skip logic is configured
    """
    if skip_logic_answer is None or isinstance(skip_logic_answer, bool):
        return None
    if isinstance(skip_logic_answer, float) and skip_logic_answer.is_integer():
        skip_logic_answer = int(skip_logic_answer)
    return _parse_trigger(str(skip_logic_answer).strip())


def _parse_term(text: str) -> Optional[AnswerTerm]:
    left, sep, right = text.partition("=")
    if not sep:
        return AnswerTerm(qid=None, value=text.strip())
    qid = coerce_qid(left)
    if qid is None or not right.strip():
        return None
    return AnswerTerm(qid=qid, value=right.strip())


def _parse_clause(text: str) -> Optional[JumpClause]:
    predicate, _, target_text = text.rpartition(":")
    target = coerce_qid(target_text)
    if target is None:
        logger.debug("Dropping jump clause %r: target is not a question id", text)
        return None

    predicate = predicate.strip()
    if not predicate or predicate == _WILDCARD:
        return JumpClause(terms=(), target=target)

    terms = []
    for part in predicate.split("&"):
        if not part.strip():
            continue
        term = _parse_term(part)
        if term is None:
            logger.debug("Dropping jump clause %r: bad term %r", text, part)
            return None
        terms.append(term)
    return JumpClause(terms=tuple(terms), target=target)


@lru_cache(maxsize=None)
def _parse_jump(text: str) -> Optional[JumpRule]:
    if not text:
        return None
    if ":" not in text:
        target = coerce_qid(text)
        if target is None:
            logger.debug("Jump %r is not a question id", text)
        return JumpRule(target=target)

    clauses = []
    for segment in text.split(";"):
        if segment.strip():
            clause = _parse_clause(segment.strip())
            if clause is not None:
                clauses.append(clause)
    return JumpRule(clauses=tuple(clauses))


def parse_jump(skip_logic_jump: Any) -> Optional[JumpRule]:
    """
    Parse a skipLogicJump value.

    Forms:
        "1011"                     direct target
        "AA:5020;AB:5021"          bare terms test the source answer
        "1003=1&1004=AA:5021"      qid=value terms test other answers
        "...;*:5030"               `*` or empty predicate always matches

    Returns:
        JumpRule, or None when the value is blank
    """
    if skip_logic_jump is None or isinstance(skip_logic_jump, bool):
        return None
    if isinstance(skip_logic_jump, float) and skip_logic_jump.is_integer():
        skip_logic_jump = int(skip_logic_jump)
    return _parse_jump(str(skip_logic_jump).strip())


def is_triggered(trigger: Optional[Trigger], answer: Any, bitmask: bool = False) -> bool:
    """
    Test a trigger against the source question's current answer.

    Pass `bitmask=True` for multi-select questions: a mask of 0 then counts
    as no answer, as it does for validation and progress.
    """
    if trigger is None:
        return False
    kind = trigger.kind
    if kind is TriggerKind.NO:
        return is_no(answer)
    if kind is TriggerKind.YES:
        return is_yes(answer)
    if kind is TriggerKind.DROPDOWN_SELECTED:
        return not is_empty(answer, bitmask)
    if kind is TriggerKind.MULTI_SELECTED:
        mask = coerce_qid(answer) if isinstance(answer, str) else answer
        return isinstance(mask, int) and not isinstance(mask, bool) and mask > 0
    if kind is TriggerKind.ANSWERED:
        return not is_empty(answer, bitmask)
    return not is_empty(answer, bitmask) and answer_text(answer) == trigger.code


def _term_matches(term: AnswerTerm, source_answer: Any, answers: Mapping[Qid, Any]) -> bool:
    actual = source_answer if term.qid is None else answers.get(term.qid)
    return answers_match(actual, term.value)


def resolve_target(rule: Optional[JumpRule], source_answer: Any,
                   answers: Mapping[Qid, Any]) -> Optional[Qid]:
    """
    Resolve the jump target of a triggered skip.

    Clauses are tried left to right; the first one whose terms all match
    wins. Returns None when nothing matches.
    """
    if rule is None:
        return None
    if rule.target is not None:
        return rule.target
    for clause in rule.clauses:
        if all(_term_matches(term, source_answer, answers) for term in clause.terms):
            return clause.target
    return None


@dataclass
class Reachability:
    """Result of compute_reachable."""
    reachable: Set[Qid] = field(default_factory=set)
    unreachable: Set[Qid] = field(default_factory=set)
    skip_events: List[SkipEvent] = field(default_factory=list)

    def is_reachable(self, qid: Any) -> bool:
        return coerce_qid(qid) not in self.unreachable


def compute_reachable(questions: Sequence[Question],
                      answers: Optional[Mapping[Any, Any]]) -> Reachability:
    """
    Determine reachable questions for the current answers.

    Args:
        questions: Ordered question sequence
        answers: Answer map keyed by qid (string keys are accepted)

    Returns:
        Reachability with reachable/unreachable qids and the skip events
    """
    live = normalize_answers(answers)

    positions: Dict[Qid, int] = {}
    for index, question in enumerate(questions):
        positions.setdefault(question.qid, index)

    result = Reachability()
    for index, question in enumerate(questions):
        trigger = question.trigger
        rule = question.jump
        if trigger is None or rule is None:
            continue

        answer = live.get(question.qid)
        if not is_triggered(trigger, answer, question.spec.is_bitmask):
            continue

        target = resolve_target(rule, answer, live)
        if target is None:
            continue

        target_index = positions.get(target)
        if target_index is None:
            logger.debug("SKIP_TARGET_UNRESOLVED: question %s jumps to unknown %s",
                         question.qid, target)
            continue
        if target_index <= index:
            logger.debug("Ignoring backward skip from %s to %s", question.qid, target)
            continue

        skipped = tuple(q.qid for q in questions[index + 1:target_index])
        result.skip_events.append(SkipEvent(
            from_qid=question.qid,
            trigger=trigger,
            target_qid=target,
            skipped=skipped,
        ))
        result.unreachable.update(skipped)

    result.reachable = {q.qid for q in questions if q.qid not in result.unreachable}
    return result
