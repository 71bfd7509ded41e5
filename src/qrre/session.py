"""
Answering session.

The session is the caller-side owner of the mutable answer map. It performs
exactly one write per answer change and then re-invokes the pure engine
(skip logic, validation, progress, widgets). The engine itself never keeps
state between calls.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .model import Qid, Question, Questionnaire
from .response_spec import encode_selection
from .skip_logic import Reachability, compute_reachable
from .validation import ValidationIssue, next_unanswered, progress, validate_all
from .widgets import WarningEvent, Widgets, warning_for_change, widgets_for

logger = logging.getLogger(__name__)


class UnknownQuestionError(KeyError):
    """Raised when a session is asked about a qid the questionnaire lacks."""
    pass


@dataclass(frozen=True)
class AnswerChange:
    """Outcome of one answer write."""
    qid: Qid
    previous: Any
    current: Any
    warning: Optional[WarningEvent] = None


class QuestionnaireSession:
    """
    Holds the answers of one respondent for one questionnaire.

    Example:
        session = QuestionnaireSession(questionnaire)
        change = session.set_answer(1001, "N")
        if change.warning:
            show_modal(change.warning.message)
        session.progress()
    """

    def __init__(self, questionnaire: Questionnaire,
                 answers: Optional[Mapping[Any, Any]] = None):
        self.questionnaire = questionnaire
        self._answers: Dict[Qid, Any] = {}
        for key, value in (answers or {}).items():
            self._answers[self._question(key).qid] = value

    def _question(self, qid: Any) -> Question:
        question = self.questionnaire.get_question(qid)
        if question is None:
            raise UnknownQuestionError(qid)
        return question

    @property
    def answers(self) -> Dict[Qid, Any]:
        return dict(self._answers)

    def get_answer(self, qid: Any) -> Any:
        return self._answers.get(self._question(qid).qid)

    def set_answer(self, qid: Any, value: Any) -> AnswerChange:
        """
        Record an answer and report the warning edge, if any.

        A list/tuple/set of option codes for a multi-select question is
        stored as its bitmask.
        """
        question = self._question(qid)
        if question.spec.is_bitmask and isinstance(value, (list, tuple, set, frozenset)):
            value = encode_selection(question.spec, value)

        previous = self._answers.get(question.qid)
        self._answers[question.qid] = value
        warning = warning_for_change(question, previous, value)
        if warning is not None:
            logger.debug("Warning fired for question %s", question.qid)
        return AnswerChange(qid=question.qid, previous=previous, current=value, warning=warning)

    def clear_answer(self, qid: Any) -> AnswerChange:
        question = self._question(qid)
        previous = self._answers.pop(question.qid, None)
        return AnswerChange(qid=question.qid, previous=previous, current=None)

    def reset(self) -> None:
        self._answers.clear()

    def initial_warnings(self):
        """Warnings for stored answers at load time (no transition history)."""
        events = []
        for question in self.questionnaire.questions:
            event = warning_for_change(question, None, self._answers.get(question.qid))
            if event is not None:
                events.append(event)
        return events

    def reachability(self) -> Reachability:
        return compute_reachable(self.questionnaire.questions, self._answers)

    def validation(self) -> Dict[Qid, Optional[ValidationIssue]]:
        return validate_all(self.questionnaire.questions, self._answers)

    def errors(self) -> Dict[Qid, ValidationIssue]:
        return {qid: issue for qid, issue in self.validation().items() if issue is not None}

    def progress(self) -> int:
        return progress(self.questionnaire.questions, self._answers)

    def widgets(self, qid: Any) -> Widgets:
        question = self._question(qid)
        return widgets_for(question.comment_type, self._answers.get(question.qid))

    def next_unanswered(self, current_index: int = -1) -> Optional[int]:
        return next_unanswered(self.questionnaire.questions, self._answers, current_index)

    def is_complete(self) -> bool:
        return not self.errors()
