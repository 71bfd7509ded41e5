"""
Skip-Logic Expression System

Skip logic is authored as two short strings per question:

    skipLogicAnswer  "0" | "1" | "D" | "M" | "A" | <option code>
    skipLogicJump    "1011"  or  "AA:5020;AB&1003=1:5021;*:5030"

Both are parsed once into the Abstract Syntax Trees defined here and never
re-parsed at call sites.

ARCHITECTURAL RULE:
    This module is structure only.
    Parsing lives in qrre.skip_logic (parse_trigger, parse_jump).
    Evaluation lives in qrre.skip_logic (is_triggered, resolve_target).
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .model import Qid


class SkipNode(ABC):
    """
    Base class for all skip-logic AST nodes.

    Exists to give the node hierarchy a common type.
    """
    pass


class TriggerKind(Enum):
    """
    What a skip trigger tests on the source question's own answer.

        NO                 Yes/No-normalized answer is No       ("0")
        YES                Yes/No-normalized answer is Yes      ("1")
        DROPDOWN_SELECTED  any non-empty selection              ("D")
        MULTI_SELECTED     bitmask value greater than zero      ("M")
        ANSWERED           any answer at all                    ("A")
        CODE               answer equals an exact option code   ("AA")
    """

    NO = "0"
    YES = "1"
    DROPDOWN_SELECTED = "D"
    MULTI_SELECTED = "M"
    ANSWERED = "A"
    CODE = "CODE"


@dataclass(frozen=True)
class Trigger(SkipNode):
    """
    Parsed skipLogicAnswer.

    Properties:
        kind: TriggerKind
        code: Option code for TriggerKind.CODE, None otherwise

    Example:
        "AA" -> Trigger(kind=TriggerKind.CODE, code="AA")
        "0"  -> Trigger(kind=TriggerKind.NO)
    """

    kind: TriggerKind
    code: Optional[str] = None

    def encode(self) -> str:
        return self.code if self.kind is TriggerKind.CODE else self.kind.value


@dataclass(frozen=True)
class AnswerTerm(SkipNode):
    """
    One `qid=value` test inside a jump clause predicate.

    Properties:
        qid: Question whose live answer is checked.
             None means the source question's own answer (bare `value` term).
        value: Expected answer token (Yes/No tokens compare normalized)
    """

    qid: Optional[Qid]
    value: str


@dataclass(frozen=True)
class JumpClause(SkipNode):
    """
    `predicate:target`, where predicate is `&`-joined AnswerTerms.

    All terms must match. A clause without terms (empty predicate or `*`)
    always matches.

    Example:
        "1003=1&1004=AA:5021"
        ->
        JumpClause(
            terms=(AnswerTerm(1003, "1"), AnswerTerm(1004, "AA")),
            target=5021,
        )
    """

    terms: Tuple[AnswerTerm, ...]
    target: Qid


@dataclass(frozen=True)
class JumpRule(SkipNode):
    """
    Parsed skipLogicJump.

    Exactly one of the two shapes is used:
        target:  direct jump (e.g. "1011")
        clauses: conditional jumps, first fully matching clause wins

    IMPORTANT:
        A rule whose clauses all failed to parse has no target and no
        clauses; it never skips.
    """

    target: Optional[Qid] = None
    clauses: Tuple[JumpClause, ...] = ()

    @property
    def targets(self) -> Tuple[Qid, ...]:
        if self.target is not None:
            return (self.target,)
        return tuple(clause.target for clause in self.clauses)
