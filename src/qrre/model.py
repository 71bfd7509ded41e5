"""
Core Questionnaire Model Objects

Defines the fundamental data structures of the Questionnaire Response Rule Engine.

These are pure data classes representing:
    - Questions (immutable definitions, authored or imported once)
    - Question options (label + stable code + weight)
    - Comment types (which secondary widget a question drives)
    - Skip events (derived facts about unreachable ranges)
    - Questionnaires (root container, ordered question sequence)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about rendering, storage or delivery
        - Are immutable once built
        - Are fully serializable
        - Carry encoded strings, but expose their parsed form
          (response spec, skip trigger, jump rule) through cached parsers
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

Qid = Union[int, float]


def coerce_qid(value: Any) -> Optional[Qid]:
    """
    Convert a raw identifier into a Qid.

    Accepts ints, floats and numeric strings ("1011", "1010.5", " 42 ").
    Integral values always come back as int so that 1011, 1011.0 and "1011"
    name the same question.

    Returns:
        int or float, or None when the value is not a question identifier
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value) if value.is_integer() else value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return coerce_qid(float(text)) if any(c in text for c in ".eE") else int(text)
        except ValueError:
            return None
    return None


class CommentType(Enum):
    """
    Secondary-input tag on a question.

    Values match the numeric ids stored by the authoring platform.
    Which widget a type activates is decided in qrre.widgets.
    """

    NONE = 0
    YN_COMMENT_Y = 1
    YN_COMMENT_N = 2
    YN_UPLOAD_Y = 3
    YN_UPLOAD_N = 4
    YN_DUEDATE_Y = 5
    COMMENTONLY = 6
    UPLOADONLY = 7
    YN_WARNING_Y = 8
    YN_WARNING_N = 9
    CALENDARONLY = 10

    @classmethod
    def parse(cls, value: Any) -> "CommentType":
        """
        Resolve a CommentType from an enum member, a name or a numeric id.

        Unknown or blank values resolve to NONE.
        """
        if isinstance(value, cls):
            return value
        if value is None or isinstance(value, bool):
            return cls.NONE
        if isinstance(value, (int, float)):
            try:
                return cls(int(value))
            except ValueError:
                return cls.NONE
        text = str(value).strip().upper()
        if not text:
            return cls.NONE
        if text.isdigit():
            return cls.parse(int(text))
        return cls.__members__.get(text, cls.NONE)

    @classmethod
    def is_known(cls, value: Any) -> bool:
        """True when value names a CommentType (blank counts as NONE)."""
        if value is None or isinstance(value, cls):
            return True
        text = str(value).strip().upper()
        if not text:
            return True
        if text.isdigit():
            return int(text) in {member.value for member in cls}
        return text in cls.__members__


@dataclass(frozen=True)
class QuestionOption:
    """
    One selectable option of a question.

    Properties:
        label: Text shown to the respondent
        code: Stable short code stored as the answer (e.g. "AA")
        weight: Numeric weight (bit weight for multi-select options)
    """

    label: str
    code: str
    weight: Optional[int] = None


@dataclass(frozen=True)
class Question:
    """
    Immutable question definition.

    Created once when a questionnaire is authored or imported.
    Never mutated at answer time; replaced only by re-import.

    Properties:
        qid:
            Numeric or fractional identifier (e.g. 1010, 1010.5).
            The declared sequence, not the numeric value, defines order.

        page:
            Page number the question is shown on

        surveyset:
            Group name (section) of the question

        prompt:
            Human-readable question text

        response:
            Encoded response specification, e.g. "Y/N",
            "DROPDOWN:Level 1(AA);Level 2(AB)", "TEXT_NUMBER_6"

        required:
            Whether an answer is required for completion

        skip_logic_answer:
            Trigger predicate ("0", "1", "D", "M", "A" or an option code)

        skip_logic_jump:
            Jump target: a qid or "predicate:target;..." clauses

        comment_type:
            Which secondary widget the answer drives

        options:
            Explicit option list; when empty, options carried by the
            encoded response spec are used (see `choices`)

    ARCHITECTURAL RULE:
        Encoded strings are parsed by memoized parsers, so reading
        `spec`, `trigger` or `jump` repeatedly never re-parses text.
    """

    qid: Qid
    prompt: str = ""
    response: str = "TEXT"
    required: bool = False
    page: Optional[int] = None
    surveyset: Optional[str] = None
    skip_logic_answer: Optional[str] = None
    skip_logic_jump: Optional[str] = None
    comment_type: CommentType = CommentType.NONE
    options: Tuple[QuestionOption, ...] = ()
    title: Optional[str] = None
    hint_text: Optional[str] = None
    comment_message: Optional[str] = None
    upload_message: Optional[str] = None
    calendar_message: Optional[str] = None
    warning_message: Optional[str] = None

    @property
    def spec(self):
        from .response_spec import parse_response_spec
        return parse_response_spec(self.response)

    @property
    def trigger(self):
        from .skip_logic import parse_trigger
        return parse_trigger(self.skip_logic_answer)

    @property
    def jump(self):
        from .skip_logic import parse_jump
        return parse_jump(self.skip_logic_jump)

    @property
    def has_skip_logic(self) -> bool:
        return self.trigger is not None and self.jump is not None

    @property
    def choices(self) -> Tuple[QuestionOption, ...]:
        """Explicit options, or the options encoded in the response spec."""
        if self.options:
            return self.options
        return tuple(
            QuestionOption(label=opt.label, code=opt.code, weight=opt.weight)
            for opt in self.spec.options
        )


@dataclass(frozen=True)
class SkipEvent:
    """
    Derived fact: a triggered skip made a contiguous run unreachable.

    Properties:
        from_qid: Question whose answer triggered the skip
        trigger: Parsed trigger predicate that fired
        target_qid: Resolved jump target (still reachable)
        skipped: Qids strictly between source and target, in sequence order

    INVARIANT:
        target_qid is positioned after from_qid in the sequence.
        Backward and self targets never produce an event.
    """

    from_qid: Qid
    trigger: Any
    target_qid: Qid
    skipped: Tuple[Qid, ...] = ()


@dataclass
class Questionnaire:
    """
    Root container: an ordered question sequence.

    Properties:
        name: Questionnaire title
        questions: Questions in intended display sequence
        metadata: Arbitrary key-value pairs (use sparingly)
            Example: {"source": "qms_template.csv"}

    INVARIANTS:
        - Qids are unique (the analyzer reports duplicates)
        - Order of `questions` is the authoritative sequence
    """

    name: str
    questions: List[Question] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def get_question(self, qid: Any) -> Optional[Question]:
        """
        Retrieve a question by id.

        Args:
            qid: Question identifier (int, float or numeric string)

        Returns:
            Question object or None if not found
        """
        wanted = coerce_qid(qid)
        if wanted is None:
            return None
        for question in self.questions:
            if question.qid == wanted:
                return question
        return None

    def position_of(self, qid: Any) -> Optional[int]:
        """Index of a question in the declared sequence, or None."""
        wanted = coerce_qid(qid)
        for index, question in enumerate(self.questions):
            if question.qid == wanted:
                return index
        return None

    def qids(self) -> List[Qid]:
        return [q.qid for q in self.questions]
