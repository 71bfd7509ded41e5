"""
Answer normalization helpers.

Answers arrive as plain values (str, int, float, date, None) in whatever
encoding the caller stored them. Everything that compares answers goes
through this module so that "1", 1, "Y", "yes" and True all mean Yes.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .model import Qid, coerce_qid


class YesNo(Enum):
    """Canonical Yes/No/NA answer."""
    YES = "Y"
    NO = "N"
    NA = "NA"


_YES_TOKENS = {"1", "Y", "YES", "TRUE"}
_NO_TOKENS = {"0", "N", "NO", "FALSE"}
_NA_TOKENS = {"2", "NA", "N/A", "NOT APPLICABLE"}


def normalize_yes_no(answer: Any) -> Optional[YesNo]:
    """
    Map an answer onto YES / NO / NA.

    Recognized encodings:
        YES: True, 1, "1", "Y", "Yes", "true"
        NO:  False, 0, "0", "N", "No", "false"
        NA:  2, "2", "NA", "N/A" (numeric 2 is how Y/N/NA stores NA)

    Returns:
        YesNo member, or None when the answer is not a Yes/No value
    """
    if answer is None:
        return None
    if isinstance(answer, YesNo):
        return answer
    if isinstance(answer, bool):
        return YesNo.YES if answer else YesNo.NO
    if isinstance(answer, (int, float)):
        if answer == 1:
            return YesNo.YES
        if answer == 0:
            return YesNo.NO
        if answer == 2:
            return YesNo.NA
        return None
    if isinstance(answer, str):
        token = answer.strip().upper()
        if token in _YES_TOKENS:
            return YesNo.YES
        if token in _NO_TOKENS:
            return YesNo.NO
        if token in _NA_TOKENS:
            return YesNo.NA
    return None


def is_yes(answer: Any) -> bool:
    return normalize_yes_no(answer) is YesNo.YES


def is_no(answer: Any) -> bool:
    return normalize_yes_no(answer) is YesNo.NO


def is_empty(answer: Any, bitmask: bool = False) -> bool:
    """
    True when an answer counts as "not answered".

    None, blank strings and empty collections are empty. With
    `bitmask=True` (multi-select questions) an integer mask of 0 is empty
    too, since no option is selected. 0 and False are otherwise real
    answers (they mean No).
    """
    if answer is None:
        return True
    if isinstance(answer, str):
        return not answer.strip()
    if isinstance(answer, (list, tuple, set, frozenset, dict)):
        return len(answer) == 0
    if bitmask and isinstance(answer, int) and not isinstance(answer, bool):
        return answer == 0
    return False


def answer_text(answer: Any) -> str:
    """String form used for exact code comparisons and length checks."""
    if answer is None:
        return ""
    if isinstance(answer, float) and answer.is_integer():
        return str(int(answer))
    return str(answer).strip()


def answers_match(answer: Any, expected: Any) -> bool:
    """
    Compare a live answer with an expected token from skip-logic text.

    When both sides read as Yes/No/NA they are compared in canonical form,
    otherwise the stripped string forms must be equal. Empty answers never
    match.
    """
    if is_empty(answer):
        return False
    expected_yn = normalize_yes_no(expected)
    if expected_yn is not None:
        actual_yn = normalize_yes_no(answer)
        if actual_yn is not None:
            return actual_yn is expected_yn
    return answer_text(answer) == answer_text(expected)


def normalize_answers(answers: Optional[Mapping[Any, Any]]) -> Dict[Qid, Any]:
    """
    Re-key an answer map by Qid.

    Answer maps loaded from JSON have string keys; keys that are not
    question identifiers are dropped.
    """
    normalized: Dict[Qid, Any] = {}
    if not answers:
        return normalized
    for key, value in answers.items():
        qid = coerce_qid(key)
        if qid is not None:
            normalized[qid] = value
    return normalized
