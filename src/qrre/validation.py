"""
Validation & Progress Engine.

Validation rules, in order, stopping at the first failure:
    1. required and empty                -> REQUIRED_MISSING
    2. TEXT_NUMBER_<N> with wrong length -> LENGTH_MISMATCH
    3. answer not valid for its kind     -> TEXT_TOO_LONG, NUMBER_INVALID,
                                            DOLLAR_INVALID, DATE_INVALID,
                                            YES_NO_INVALID, OPTION_INVALID,
                                            DIGITS_INVALID

Empty optional answers are never checked against their kind.

Questions made unreachable by a triggered skip are not validated and do not
count towards progress.

Progress = round(100 * answered / total) over required, reachable questions,
rounding halves up; 0 when there is nothing required and reachable.
"""

import math
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Collection, Dict, Mapping, Optional, Sequence, Tuple

from .answers import YesNo, answer_text, is_empty, normalize_answers, normalize_yes_no
from .model import Qid, Question, coerce_qid
from .response_spec import ResponseKind, ResponseSpec
from .skip_logic import compute_reachable

MAX_TEXT_LENGTH = 4000

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ErrorKind(Enum):
    """
    Error taxonomy of the engine.

    PARSE_FALLBACK and SKIP_TARGET_UNRESOLVED are recovered locally and only
    show up in logs and analyzer reports. The others are surfaced next to
    the question.
    """
    PARSE_FALLBACK = "PARSE_FALLBACK"
    REQUIRED_MISSING = "REQUIRED_MISSING"
    LENGTH_MISMATCH = "LENGTH_MISMATCH"
    SKIP_TARGET_UNRESOLVED = "SKIP_TARGET_UNRESOLVED"
    TEXT_TOO_LONG = "TEXT_TOO_LONG"
    NUMBER_INVALID = "NUMBER_INVALID"
    DOLLAR_INVALID = "DOLLAR_INVALID"
    DATE_INVALID = "DATE_INVALID"
    YES_NO_INVALID = "YES_NO_INVALID"
    OPTION_INVALID = "OPTION_INVALID"
    DIGITS_INVALID = "DIGITS_INVALID"


@dataclass(frozen=True)
class ValidationIssue:
    qid: Qid
    kind: ErrorKind
    message: str


def is_answered(question: Question, answer: Any) -> bool:
    """A bitmask of 0 on a multi-select question counts as unanswered."""
    return not is_empty(answer, bitmask=question.spec.is_bitmask)


def _as_number(answer: Any) -> Optional[float]:
    if isinstance(answer, bool):
        return None
    if isinstance(answer, (int, float)):
        value = float(answer)
    else:
        try:
            value = float(answer_text(answer))
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def _is_iso_date(answer: Any) -> bool:
    if isinstance(answer, date):
        return True
    text = answer_text(answer)
    if not _ISO_DATE_RE.match(text):
        return False
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


def _mask_is_valid(spec: ResponseSpec, answer: Any) -> bool:
    mask = coerce_qid(answer) if isinstance(answer, str) else answer
    if not isinstance(mask, int) or isinstance(mask, bool) or mask < 0:
        return False
    allowed = 0
    for opt in spec.options:
        if opt.weight is not None:
            allowed |= opt.weight
    return mask & ~allowed == 0


def _check_value(question: Question, answer: Any) -> Optional[Tuple[ErrorKind, str]]:
    """Kind-specific check of a present answer."""
    spec = question.spec
    kind = spec.kind

    if kind is ResponseKind.TEXT:
        length = len(str(answer))
        if length > MAX_TEXT_LENGTH:
            return (ErrorKind.TEXT_TOO_LONG,
                    f"Must be at most {MAX_TEXT_LENGTH} characters (got {length})")

    elif kind is ResponseKind.FIXED_LENGTH_DIGITS:
        if not answer_text(answer).isdigit():
            return ErrorKind.DIGITS_INVALID, "Must contain digits only"

    elif kind in (ResponseKind.NUMBER, ResponseKind.DOLLAR):
        value = _as_number(answer)
        if value is None or value < 0:
            if kind is ResponseKind.NUMBER:
                return ErrorKind.NUMBER_INVALID, "Must be a number, 0 or greater"
            return ErrorKind.DOLLAR_INVALID, "Must be a dollar amount, 0 or greater"

    elif kind is ResponseKind.DATE:
        if not _is_iso_date(answer):
            return ErrorKind.DATE_INVALID, "Must be a date in YYYY-MM-DD format"

    elif kind is ResponseKind.YES_NO:
        if normalize_yes_no(answer) not in (YesNo.YES, YesNo.NO):
            return ErrorKind.YES_NO_INVALID, "Must be Yes or No"

    elif kind is ResponseKind.YES_NO_NA:
        if normalize_yes_no(answer) is None:
            return ErrorKind.YES_NO_INVALID, "Must be Yes, No or N/A"

    elif kind in (ResponseKind.DROPDOWN, ResponseKind.SINGLE_SELECT_LIST):
        codes = [choice.code for choice in question.choices]
        if answer_text(answer) not in codes:
            return ErrorKind.OPTION_INVALID, f"Must be one of: {', '.join(codes)}"

    elif kind is ResponseKind.MULTI_SELECT_BITMASK:
        if not _mask_is_valid(spec, answer):
            return ErrorKind.OPTION_INVALID, "Selection contains an unknown option"

    return None


def validate(question: Question, answer: Any,
             unreachable: Collection[Qid] = ()) -> Optional[ValidationIssue]:
    """
    Validate one answer.

    Args:
        question: Question definition
        answer: Current answer (None when unanswered)
        unreachable: Qids excluded by triggered skips

    Returns:
        ValidationIssue, or None when the answer is acceptable
    """
    if question.qid in unreachable:
        return None

    answered = is_answered(question, answer)
    if not answered:
        if question.required:
            return ValidationIssue(
                qid=question.qid,
                kind=ErrorKind.REQUIRED_MISSING,
                message="This question is required",
            )
        return None

    spec = question.spec
    if spec.kind is ResponseKind.FIXED_LENGTH_DIGITS:
        actual = len(answer_text(answer))
        if actual != spec.length:
            return ValidationIssue(
                qid=question.qid,
                kind=ErrorKind.LENGTH_MISMATCH,
                message=f"Must be exactly {spec.length} characters (got {actual})",
            )

    problem = _check_value(question, answer)
    if problem is not None:
        kind, message = problem
        return ValidationIssue(qid=question.qid, kind=kind, message=message)
    return None


def validate_all(questions: Sequence[Question],
                 answers: Optional[Mapping[Any, Any]]) -> Dict[Qid, Optional[ValidationIssue]]:
    """Validation result for every question, honouring skip logic."""
    live = normalize_answers(answers)
    unreachable = compute_reachable(questions, live).unreachable
    return {
        question.qid: validate(question, live.get(question.qid), unreachable)
        for question in questions
    }


def progress(questions: Sequence[Question], answers: Optional[Mapping[Any, Any]]) -> int:
    """
    Completion percentage over required, reachable questions.

    Returns:
        int in [0, 100]
    """
    live = normalize_answers(answers)
    unreachable = compute_reachable(questions, live).unreachable

    total = 0
    answered = 0
    for question in questions:
        if not question.required or question.qid in unreachable:
            continue
        total += 1
        if is_answered(question, live.get(question.qid)):
            answered += 1

    if total == 0:
        return 0
    return (200 * answered + total) // (2 * total)


def next_unanswered(questions: Sequence[Question], answers: Optional[Mapping[Any, Any]],
                    current_index: int = -1) -> Optional[int]:
    """
    Index of the next reachable, unanswered question after current_index.

    Returns None when every remaining reachable question has an answer.
    """
    live = normalize_answers(answers)
    unreachable = compute_reachable(questions, live).unreachable
    for index in range(max(current_index + 1, 0), len(questions)):
        question = questions[index]
        if question.qid in unreachable:
            continue
        if not is_answered(question, live.get(question.qid)):
            return index
    return None
