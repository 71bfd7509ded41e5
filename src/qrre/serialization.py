"""
Serialization helpers for questionnaires and answer maps.

Provides lossless JSON/YAML round-trip of Questionnaire objects via an
intermediate dict representation. Answer maps are written with string keys
and ISO dates so they survive JSON.
"""
from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

import yaml

from qrre.answers import normalize_answers
from qrre.model import CommentType, Question, QuestionOption, Questionnaire, coerce_qid
from qrre.response_spec import ResponseKind


def option_to_dict(o: QuestionOption) -> Dict[str, Any]:
    return {"label": o.label, "code": o.code, "weight": o.weight}


def option_from_dict(d: Dict[str, Any]) -> QuestionOption:
    return QuestionOption(label=d["label"], code=d.get("code", d["label"]), weight=d.get("weight"))


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "qid": q.qid,
        "page": q.page,
        "surveyset": q.surveyset,
        "title": q.title,
        "prompt": q.prompt,
        "response": q.response,
        "required": q.required,
        "skip_logic_answer": q.skip_logic_answer,
        "skip_logic_jump": q.skip_logic_jump,
        "comment_type": q.comment_type.name,
        "options": [option_to_dict(o) for o in q.options],
        "hint_text": q.hint_text,
        "comment_message": q.comment_message,
        "upload_message": q.upload_message,
        "calendar_message": q.calendar_message,
        "warning_message": q.warning_message,
    }


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def question_from_dict(d: Dict[str, Any]) -> Question:
    qid = coerce_qid(d.get("qid"))
    if qid is None:
        raise ValueError(f"Invalid question id: {d.get('qid')!r}")
    return Question(
        qid=qid,
        page=d.get("page"),
        surveyset=d.get("surveyset"),
        title=d.get("title"),
        prompt=d.get("prompt", ""),
        response=d.get("response", "TEXT"),
        required=bool(d.get("required", False)),
        skip_logic_answer=_optional_text(d.get("skip_logic_answer")),
        skip_logic_jump=_optional_text(d.get("skip_logic_jump")),
        comment_type=CommentType.parse(d.get("comment_type")),
        options=tuple(option_from_dict(o) for o in d.get("options", [])),
        hint_text=d.get("hint_text"),
        comment_message=d.get("comment_message"),
        upload_message=d.get("upload_message"),
        calendar_message=d.get("calendar_message"),
        warning_message=d.get("warning_message"),
    )


def questionnaire_to_dict(q: Questionnaire) -> Dict[str, Any]:
    return {
        "name": q.name,
        "questions": [question_to_dict(question) for question in q.questions],
        "metadata": q.metadata,
    }


def questionnaire_from_dict(d: Dict[str, Any]) -> Questionnaire:
    q = Questionnaire(name=d.get("name", ""))
    q.questions = [question_from_dict(question) for question in d.get("questions", [])]
    q.metadata = d.get("metadata", {})
    return q


def questionnaire_to_json(q: Questionnaire) -> str:
    return json.dumps(questionnaire_to_dict(q), sort_keys=True)


def questionnaire_from_json(s: str) -> Questionnaire:
    d = json.loads(s)
    return questionnaire_from_dict(d)


def questionnaire_to_yaml(q: Questionnaire) -> str:
    return yaml.safe_dump(questionnaire_to_dict(q), sort_keys=False)


def questionnaire_from_yaml(s: str) -> Questionnaire:
    d = yaml.safe_load(s)
    return questionnaire_from_dict(d or {})


def _answer_value_to_plain(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def answers_to_dict(answers: Mapping[Any, Any]) -> Dict[str, Any]:
    return {str(qid): _answer_value_to_plain(value) for qid, value in normalize_answers(answers).items()}


def answers_from_dict(d: Optional[Mapping[Any, Any]],
                      questionnaire: Optional[Questionnaire] = None) -> Dict[Any, Any]:
    """
    Rebuild an answer map keyed by qid.

    With a questionnaire, ISO strings answering DATE questions become
    `datetime.date` again; strings that do not parse are kept as text.
    """
    answers = normalize_answers(d)
    if questionnaire is None:
        return answers
    for qid, value in answers.items():
        question = questionnaire.get_question(qid)
        if question is None or question.spec.kind is not ResponseKind.DATE:
            continue
        if isinstance(value, str):
            try:
                answers[qid] = date.fromisoformat(value.strip()[:10])
            except ValueError:
                pass
    return answers


def answers_to_json(answers: Mapping[Any, Any]) -> str:
    return json.dumps(answers_to_dict(answers), sort_keys=True)


def answers_from_json(s: str, questionnaire: Optional[Questionnaire] = None) -> Dict[Any, Any]:
    return answers_from_dict(json.loads(s), questionnaire)


def answers_from_yaml(s: str, questionnaire: Optional[Questionnaire] = None) -> Dict[Any, Any]:
    return answers_from_dict(yaml.safe_load(s) or {}, questionnaire)
