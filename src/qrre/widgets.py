"""
Conditional Widget Policy.

Maps (CommentType, answer) to the secondary inputs that must be shown next
to a question. Pure and table-driven: the same inputs always give the same
Widgets.

Warnings are different: they are one-shot notifications, not visibility.
`warning_for_change` takes the previous and current answer and only
reports the transition edge, so a re-render with an unchanged answer never
fires again.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from .answers import is_no, is_yes
from .model import CommentType, Qid, Question


@dataclass(frozen=True)
class Widgets:
    """Which secondary inputs are active for one question."""
    comment: bool = False
    upload: bool = False
    due_date: bool = False
    warning: bool = False
    calendar: bool = False


@dataclass(frozen=True)
class WarningEvent:
    """Notification handed to the caller; displaying it is the caller's job."""
    qid: Qid
    message: str


def _always(answer: Any) -> bool:
    return True


# CommentType -> (widget field, answer predicate)
_POLICY: Dict[CommentType, Tuple[str, Callable[[Any], bool]]] = {
    CommentType.YN_COMMENT_Y: ("comment", is_yes),
    CommentType.YN_COMMENT_N: ("comment", is_no),
    CommentType.YN_UPLOAD_Y: ("upload", is_yes),
    CommentType.YN_UPLOAD_N: ("upload", is_no),
    CommentType.YN_DUEDATE_Y: ("due_date", is_yes),
    CommentType.COMMENTONLY: ("comment", _always),
    CommentType.UPLOADONLY: ("upload", _always),
    CommentType.YN_WARNING_Y: ("warning", is_yes),
    CommentType.YN_WARNING_N: ("warning", is_no),
    CommentType.CALENDARONLY: ("calendar", _always),
}

DEFAULT_WARNING_MESSAGE = "Your answer to question {qid} requires review before you continue."


def widgets_for(comment_type: Any, answer: Any) -> Widgets:
    """
    Decide the active secondary widgets.

    Args:
        comment_type: CommentType, its name ("YN_UPLOAD_Y") or numeric id
        answer: Current answer in any Yes/No encoding

    Returns:
        Widgets with at most one flag set
    """
    rule = _POLICY.get(CommentType.parse(comment_type))
    if rule is None:
        return Widgets()
    name, predicate = rule
    return Widgets(**{name: predicate(answer)})


def warning_fires(comment_type: Any, previous: Any, current: Any) -> bool:
    """True only on the transition into the warning condition."""
    ctype = CommentType.parse(comment_type)
    if ctype not in (CommentType.YN_WARNING_Y, CommentType.YN_WARNING_N):
        return False
    return widgets_for(ctype, current).warning and not widgets_for(ctype, previous).warning


def warning_for_change(question: Question, previous: Any, current: Any) -> Optional[WarningEvent]:
    """
    Warning event for an answer change, or None.

    At initial load pass previous=None; a stored answer that already meets
    the condition then fires once.
    """
    if not warning_fires(question.comment_type, previous, current):
        return None
    message = question.warning_message or DEFAULT_WARNING_MESSAGE.format(qid=question.qid)
    return WarningEvent(qid=question.qid, message=message)
