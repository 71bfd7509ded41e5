"""
Tests for the QMS template import (CSV -> Questionnaire).

CSV format of the authoring sheet:
    QID, Page, Surveyset, Survey, Question, Response, Title, Required,
    skipLogic, skipLogicAnswer, skipLogicJump, CommentType, ...
"""

import warnings

import pytest
from qrre.model import CommentType, Questionnaire
from qrre.qms_import import (
    QMSImportError,
    parse_qms_file,
    parse_qms_string,
    qms_row_to_question,
    validate_qms_row,
)
from qrre.response_spec import ResponseKind

HEADER = ("QID,Page,Surveyset,Survey,Question,Response,Title,Required,"
          "skipLogic,skipLogicAnswer,skipLogicJump,CommentType,"
          "CommentBoxMessageText,UploadMessageText,CalendarMessageText\n")

VALID_ROWS = (
    "1001,1,Profile,Reps & Certs,Registered in SAM?,Y/N,registered,1,Y,0,1003,,,,\n"
    "1002,1,Profile,Reps & Certs,UEI,TEXT_NUMBER_12,uei,1,N,,,,,,\n"
    "1003,2,Compliance,Reps & Certs,ISO certificate?,Y/N,iso,0,N,,,YN_UPLOAD_Y,,Upload it,\n"
    "1003.5,2,Compliance,Reps & Certs,Size,DROPDOWN:Large(AA);Small(AB),size,1,Y,D,AA:1004;*:1004,2,Explain,,\n"
    "1004,3,Compliance,Reps & Certs,Notes,TEXT,notes,0,,,,COMMENTONLY,,,\n"
)


def row(**overrides):
    base = {
        "QID": "1001", "Survey": "S", "Question": "Q?", "Response": "Y/N", "Title": "t",
        "Required": "1", "skipLogic": "N", "skipLogicAnswer": "", "skipLogicJump": "",
    }
    base.update(overrides)
    return base


class TestRowValidation:
    def test_valid_row(self):
        assert validate_qms_row(row(), 2) == []

    @pytest.mark.parametrize("column, code", [
        ("QID", "ERR-QMS-001"),
        ("Survey", "ERR-QMS-002"),
        ("Question", "ERR-QMS-003"),
        ("Response", "ERR-QMS-004"),
        ("Title", "ERR-QMS-005"),
    ])
    def test_missing_required_cell(self, column, code):
        errors = validate_qms_row(row(**{column: "  "}), 7)
        assert [e.code for e in errors] == [code]
        assert errors[0].row == 7
        assert errors[0].field == column

    def test_non_numeric_qid(self):
        assert validate_qms_row(row(QID="abc"), 2)[0].code == "ERR-QMS-001"

    def test_skip_logic_needs_answer_and_jump(self):
        errors = validate_qms_row(row(skipLogic="Y"), 2)
        assert [e.code for e in errors] == ["ERR-QMS-006", "ERR-QMS-007"]

    def test_skip_columns_ignored_without_flag(self):
        assert validate_qms_row(row(skipLogic="", skipLogicAnswer="0"), 2) == []


class TestRowConversion:
    def test_fields(self):
        question = qms_row_to_question(row(QID="1010.5", Page="3", Surveyset="Profile",
                                           skipLogic="Y", skipLogicAnswer="0", skipLogicJump="1011",
                                           CommentType="YN_COMMENT_N"))
        assert question.qid == 1010.5
        assert question.page == 3
        assert question.surveyset == "Profile"
        assert question.required is True
        assert question.skip_logic_answer == "0"
        assert question.skip_logic_jump == "1011"
        assert question.comment_type is CommentType.YN_COMMENT_N

    def test_skip_fields_dropped_when_flag_off(self):
        question = qms_row_to_question(row(skipLogicAnswer="0", skipLogicJump="1011"))
        assert question.skip_logic_answer is None
        assert question.skip_logic_jump is None
        assert not question.has_skip_logic

    @pytest.mark.parametrize("flag, expected", [("1", True), ("Y", True), ("TRUE", True),
                                                ("0", False), ("", False), ("N", False)])
    def test_required_flag(self, flag, expected):
        assert qms_row_to_question(row(Required=flag)).required is expected


class TestParseString:
    def test_valid_template(self):
        questionnaire = parse_qms_string(HEADER + VALID_ROWS)
        assert isinstance(questionnaire, Questionnaire)
        assert questionnaire.name == "Reps & Certs"
        assert questionnaire.qids() == [1001, 1002, 1003, 1003.5, 1004]

    def test_parsed_views(self):
        questionnaire = parse_qms_string(HEADER + VALID_ROWS)
        assert questionnaire.get_question(1002).spec.kind is ResponseKind.FIXED_LENGTH_DIGITS
        size = questionnaire.get_question(1003.5)
        assert size.spec.codes == ["AA", "AB"]
        assert size.comment_type is CommentType.YN_COMMENT_N
        assert size.comment_message == "Explain"
        assert questionnaire.get_question(1003).upload_message == "Upload it"
        assert questionnaire.get_question(1001).jump.target == 1003

    def test_explicit_name(self):
        assert parse_qms_string(HEADER + VALID_ROWS, name="Custom").name == "Custom"

    def test_header_only(self):
        questionnaire = parse_qms_string(HEADER)
        assert questionnaire.questions == []

    def test_empty_content(self):
        with pytest.raises(QMSImportError, match="empty"):
            parse_qms_string("")

    def test_missing_columns(self):
        with pytest.raises(QMSImportError, match="Missing required columns"):
            parse_qms_string("QID,Question\n1,Q?\n")

    def test_row_errors_collected(self):
        content = HEADER + "1001,1,P,S,,Y/N,t,1,,,,,,,\n,1,P,S,Q,Y/N,t,1,Y,,,,,,\n"
        with pytest.raises(QMSImportError, match="Validation failed: 4 errors found") as excinfo:
            parse_qms_string(content)
        codes = [(e.row, e.code) for e in excinfo.value.errors]
        assert codes == [(2, "ERR-QMS-003"), (3, "ERR-QMS-001"), (3, "ERR-QMS-006"), (3, "ERR-QMS-007")]

    def test_duplicate_qids(self):
        content = HEADER + "1001,1,P,S,Q,Y/N,a,1,,,,,,,\n1001.0,1,P,S,Q,Y/N,b,1,,,,,,,\n"
        with pytest.raises(QMSImportError, match="Duplicate QIDs"):
            parse_qms_string(content)

    def test_unknown_response_warns(self):
        content = HEADER + "1001,1,P,S,Q,SLIDER,a,1,,,,,,,\n"
        with pytest.warns(UserWarning, match="Unrecognized response type"):
            questionnaire = parse_qms_string(content)
        assert questionnaire.questions[0].spec.kind is ResponseKind.TEXT

    def test_unknown_comment_type_warns(self):
        content = HEADER + "1001,1,P,S,Q,Y/N,a,1,,,,BOGUS,,,\n"
        with pytest.warns(UserWarning, match="Unknown CommentType"):
            questionnaire = parse_qms_string(content)
        assert questionnaire.questions[0].comment_type is CommentType.NONE

    def test_clean_template_has_no_warnings(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            parse_qms_string(HEADER + VALID_ROWS)


class TestParseFile:
    def test_parse_file(self, tmp_path):
        path = tmp_path / "qms_template.csv"
        path.write_text(HEADER + VALID_ROWS, encoding="utf-8")
        questionnaire = parse_qms_file(str(path))
        assert len(questionnaire.questions) == 5
        assert questionnaire.metadata["source"] == "qms_template.csv"

    def test_byte_order_mark(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_text(HEADER + VALID_ROWS, encoding="utf-8-sig")
        assert parse_qms_file(str(path)).qids()[0] == 1001

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_qms_file(str(tmp_path / "nope.csv"))
