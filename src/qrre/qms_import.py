"""
QMS Template Import (authoring sheet -> Questionnaire).

Reads the CSV export of the QMS questionnaire template and builds a
Questionnaire object.

CSV Format (one row per question, extra columns are ignored):
    QID, Page, Surveyset, Survey, Question, Response, Title, Required,
    skipLogic, skipLogicAnswer, skipLogicJump, CommentType,
    CommentBoxMessageText, UploadMessageText, CalendarMessageText

Syntax Notes:
    - Required is 1/0 (Y/N and TRUE/FALSE also accepted)
    - skipLogicAnswer / skipLogicJump are only kept when skipLogic = Y
    - CommentType is a name (YN_COMMENT_Y) or numeric id (1)
    - Row order is the question sequence
"""

import csv
import os
import warnings
from dataclasses import dataclass
from io import StringIO
from typing import Dict, List, Optional

from qrre.model import CommentType, Question, Questionnaire, coerce_qid


class QMSImportError(Exception):
    """Raised when a QMS template cannot be imported."""

    def __init__(self, message: str, errors: Optional[List["QMSValidationError"]] = None):
        super().__init__(message)
        self.errors = errors or []


@dataclass
class QMSValidationError:
    """One problem found in one template row."""
    row: int
    field: str
    message: str
    code: str


REQUIRED_COLUMNS = ['QID', 'Survey', 'Question', 'Response', 'Title']

_TRUE_TOKENS = {'1', 'Y', 'YES', 'TRUE'}


def _cell(row: Dict[str, str], column: str) -> str:
    return (row.get(column) or '').strip()


def _flag(value: str) -> bool:
    return value.strip().upper() in _TRUE_TOKENS


def _int_or_none(value: str) -> Optional[int]:
    qid = coerce_qid(value)
    return qid if isinstance(qid, int) else None


def validate_qms_row(row: Dict[str, str], row_number: int) -> List[QMSValidationError]:
    """
    Validate a single template row.

    Args:
        row: Row as read by csv.DictReader
        row_number: 1-based line number in the file (header is line 1)

    Returns:
        List of QMSValidationError (empty when the row is valid)
    """
    errors = []

    if coerce_qid(_cell(row, 'QID')) is None:
        errors.append(QMSValidationError(row_number, 'QID', 'QID is required', 'ERR-QMS-001'))

    if not _cell(row, 'Survey'):
        errors.append(QMSValidationError(
            row_number, 'Survey', 'Survey (questionnaire title) is required', 'ERR-QMS-002'))

    if not _cell(row, 'Question'):
        errors.append(QMSValidationError(row_number, 'Question', 'Question text is required', 'ERR-QMS-003'))

    if not _cell(row, 'Response'):
        errors.append(QMSValidationError(row_number, 'Response', 'Response type is required', 'ERR-QMS-004'))

    if not _cell(row, 'Title'):
        errors.append(QMSValidationError(
            row_number, 'Title', 'Title (internal name) is required', 'ERR-QMS-005'))

    if _flag(_cell(row, 'skipLogic')):
        if not _cell(row, 'skipLogicAnswer'):
            errors.append(QMSValidationError(
                row_number, 'skipLogicAnswer',
                'skipLogicAnswer is required when skipLogic=Y', 'ERR-QMS-006'))
        if not _cell(row, 'skipLogicJump'):
            errors.append(QMSValidationError(
                row_number, 'skipLogicJump',
                'skipLogicJump is required when skipLogic=Y', 'ERR-QMS-007'))

    return errors


def qms_row_to_question(row: Dict[str, str]) -> Question:
    """Convert a validated template row into a Question."""
    has_skip = _flag(_cell(row, 'skipLogic'))
    return Question(
        qid=coerce_qid(_cell(row, 'QID')),
        page=_int_or_none(_cell(row, 'Page')),
        surveyset=_cell(row, 'Surveyset') or None,
        title=_cell(row, 'Title') or None,
        prompt=_cell(row, 'Question'),
        response=_cell(row, 'Response'),
        required=_flag(_cell(row, 'Required')),
        skip_logic_answer=(_cell(row, 'skipLogicAnswer') or None) if has_skip else None,
        skip_logic_jump=(_cell(row, 'skipLogicJump') or None) if has_skip else None,
        comment_type=CommentType.parse(_cell(row, 'CommentType')),
        comment_message=_cell(row, 'CommentBoxMessageText') or None,
        upload_message=_cell(row, 'UploadMessageText') or None,
        calendar_message=_cell(row, 'CalendarMessageText') or None,
    )


def parse_qms_string(csv_content: str, name: Optional[str] = None) -> Questionnaire:
    """
    Parse template CSV content into a Questionnaire.

    Args:
        csv_content: CSV as string
        name: Questionnaire name (defaults to the Survey column)

    Returns:
        Questionnaire with questions in row order

    Raises:
        QMSImportError: If columns are missing, rows fail validation,
            or QIDs are duplicated
    """
    reader = csv.DictReader(StringIO(csv_content))

    if reader.fieldnames is None:
        raise QMSImportError("CSV is empty")

    fieldnames = [f.strip() for f in reader.fieldnames]
    missing = [col for col in REQUIRED_COLUMNS if col not in fieldnames]
    if missing:
        raise QMSImportError(f"Missing required columns: {missing}")

    rows = []
    errors: List[QMSValidationError] = []
    for row_number, raw in enumerate(reader, start=2):  # header is line 1
        row = {(key or '').strip(): value for key, value in raw.items()}
        errors.extend(validate_qms_row(row, row_number))
        rows.append((row_number, row))

    if errors:
        raise QMSImportError(f"Validation failed: {len(errors)} errors found", errors)

    qids = [coerce_qid(_cell(row, 'QID')) for _, row in rows]
    if len(qids) != len(set(qids)):
        duplicates = sorted({qid for qid in qids if qids.count(qid) > 1})
        raise QMSImportError(f"Duplicate QIDs: {duplicates}")

    questions = []
    for row_number, row in rows:
        question = qms_row_to_question(row)
        if question.spec.fallback:
            warnings.warn(
                f"Unrecognized response type for QID {question.qid} (line {row_number}): "
                f"{question.response!r}, treating as TEXT",
                UserWarning,
            )
        if not CommentType.is_known(_cell(row, 'CommentType')):
            warnings.warn(
                f"Unknown CommentType for QID {question.qid} (line {row_number}): "
                f"{_cell(row, 'CommentType')!r}",
                UserWarning,
            )
        questions.append(question)

    if name is None:
        name = _cell(rows[0][1], 'Survey') if rows else "QMSQuestionnaire"

    return Questionnaire(name=name, questions=questions)


def parse_qms_file(filepath: str, name: Optional[str] = None) -> Questionnaire:
    """
    Parse a template CSV file into a Questionnaire.

    Raises:
        FileNotFoundError: If file doesn't exist
        QMSImportError: If parsing fails
    """
    try:
        with open(filepath, 'r', encoding='utf-8-sig') as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"QMS template not found: {filepath}")

    questionnaire = parse_qms_string(content, name=name)
    questionnaire.metadata.setdefault('source', os.path.basename(filepath))
    return questionnaire


__all__ = [
    "parse_qms_string",
    "parse_qms_file",
    "validate_qms_row",
    "qms_row_to_question",
    "QMSImportError",
    "QMSValidationError",
]
