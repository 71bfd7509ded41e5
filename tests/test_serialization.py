"""
Tests for serialization and deserialization of questionnaires and answers.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `qrre.serialization`.
"""

import json
from datetime import date

import pytest
from qrre.examples import build_example_reps_certs
from qrre.model import CommentType, Question, QuestionOption, Questionnaire
from qrre.serialization import (
    answers_from_dict,
    answers_from_json,
    answers_from_yaml,
    answers_to_dict,
    answers_to_json,
    question_from_dict,
    questionnaire_from_json,
    questionnaire_from_yaml,
    questionnaire_to_dict,
    questionnaire_to_json,
    questionnaire_to_yaml,
)


def build_sample_questionnaire() -> Questionnaire:
    questionnaire = build_example_reps_certs()
    questionnaire.questions.append(Question(
        qid=1011.5,
        prompt="Preferred contact",
        response="LIST:Email(EM);Phone(PH)",
        options=(QuestionOption(label="Email", code="EM", weight=1),),
        skip_logic_answer="EM",
        skip_logic_jump="1011",
    ))
    return questionnaire


def test_json_roundtrip():
    questionnaire = build_sample_questionnaire()
    before = questionnaire_to_dict(questionnaire)
    restored = questionnaire_from_json(questionnaire_to_json(questionnaire))
    after = questionnaire_to_dict(restored)
    assert before == after


def test_yaml_roundtrip():
    questionnaire = build_sample_questionnaire()
    before = questionnaire_to_dict(questionnaire)
    restored = questionnaire_from_yaml(questionnaire_to_yaml(questionnaire))
    after = questionnaire_to_dict(restored)
    assert before == after


def test_roundtrip_keeps_parsed_views():
    restored = questionnaire_from_json(questionnaire_to_json(build_example_reps_certs()))
    question = restored.get_question(1005)
    assert question.spec.codes == ["AA", "AB", "AC"]
    assert question.jump.targets == (1007, 1006)
    assert restored.get_question(1007).comment_type is CommentType.YN_WARNING_Y


def test_comment_type_written_by_name():
    data = questionnaire_to_dict(build_example_reps_certs())
    assert data["questions"][6]["comment_type"] == "YN_WARNING_Y"


def test_numeric_comment_type_accepted():
    question = question_from_dict({"qid": "7", "comment_type": 3, "skip_logic_answer": 0})
    assert question.qid == 7
    assert question.comment_type is CommentType.YN_UPLOAD_Y
    assert question.skip_logic_answer == "0"


def test_bad_qid_rejected():
    with pytest.raises(ValueError):
        question_from_dict({"qid": "abc"})


class TestAnswers:
    def test_keys_become_strings(self):
        data = answers_to_dict({1001: "Y", 1010.5: 22})
        assert data == {"1001": "Y", "1010.5": 22}

    def test_dates_are_iso(self):
        assert json.loads(answers_to_json({1004: date(2027, 3, 1)})) == {"1004": "2027-03-01"}

    def test_json_roundtrip_with_questionnaire(self):
        questionnaire = build_example_reps_certs()
        answers = {1001: "Y", 1004: date(2027, 3, 1), 1006: 22}
        assert answers_from_json(answers_to_json(answers), questionnaire) == answers

    def test_without_questionnaire_dates_stay_text(self):
        assert answers_from_dict({"1004": "2027-03-01"}) == {1004: "2027-03-01"}

    def test_unparseable_date_kept(self):
        questionnaire = build_example_reps_certs()
        assert answers_from_dict({"1004": "soon"}, questionnaire) == {1004: "soon"}

    def test_yaml(self):
        answers = answers_from_yaml("'1001': 'Y'\n'1006': 22\n")
        assert answers == {1001: "Y", 1006: 22}

    def test_empty_yaml(self):
        assert answers_from_yaml("") == {}
