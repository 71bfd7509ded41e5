"""
Command-line entry point.

    qrre lint QUESTIONNAIRE             authoring report (exit 1 on warnings)
    qrre progress QUESTIONNAIRE ANSWERS progress, skipped questions, errors

Questionnaires may be YAML, JSON or a QMS template CSV. Answers are YAML or
JSON maps of qid -> value.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from qrre.analyzer import analyze_questionnaire
from qrre.model import Questionnaire
from qrre.qms_import import parse_qms_file
from qrre.serialization import answers_from_json, answers_from_yaml, questionnaire_from_json, \
    questionnaire_from_yaml
from qrre.session import QuestionnaireSession

logger = logging.getLogger(__name__)


def load_questionnaire(path: str) -> Questionnaire:
    ext = os.path.splitext(path)[1].lower()
    if ext == '.csv':
        return parse_qms_file(path)
    with open(path, 'r', encoding='utf-8') as fh:
        content = fh.read()
    if ext == '.json':
        return questionnaire_from_json(content)
    return questionnaire_from_yaml(content)


def load_answers(path: str, questionnaire: Questionnaire):
    with open(path, 'r', encoding='utf-8') as fh:
        content = fh.read()
    if path.lower().endswith('.json'):
        return answers_from_json(content, questionnaire)
    return answers_from_yaml(content, questionnaire)


def _cmd_lint(args) -> int:
    questionnaire = load_questionnaire(args.questionnaire)
    report = analyze_questionnaire(questionnaire)

    print(f'Questionnaire: {report.questionnaire_name}')
    print(f' Questions: {report.total_questions} ({report.required_questions} required)')
    print(f' Pages: {len(report.pages)}  Sections: {len(report.surveysets)}')
    print(f' With skip logic: {report.questions_with_skip_logic}')
    print(f' With comment type: {report.questions_with_comment_type}')
    if not report.warnings:
        print(' No warnings')
        return 0
    print(f' Warnings ({len(report.warnings)}):')
    for warning in report.warnings:
        print(f'  - {warning}')
    return 1


def _cmd_progress(args) -> int:
    questionnaire = load_questionnaire(args.questionnaire)
    answers = load_answers(args.answers, questionnaire)
    session = QuestionnaireSession(questionnaire, answers)

    reachability = session.reachability()
    print(f'Progress: {session.progress()}%')
    skipped = [qid for qid in questionnaire.qids() if qid in reachability.unreachable]
    print(f'Skipped: {", ".join(str(qid) for qid in skipped) if skipped else "(none)"}')

    errors = session.errors()
    if errors:
        print('Errors:')
        for qid, issue in errors.items():
            print(f'  {qid}: {issue.kind.value} - {issue.message}')
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='qrre', description='Questionnaire response rule engine')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    lint = sub.add_parser('lint', help='Report authoring problems in a questionnaire')
    lint.add_argument('questionnaire', help='Questionnaire file (.yaml, .json or QMS .csv)')
    lint.set_defaults(func=_cmd_lint)

    prog = sub.add_parser('progress', help='Evaluate answers against a questionnaire')
    prog.add_argument('questionnaire', help='Questionnaire file (.yaml, .json or QMS .csv)')
    prog.add_argument('answers', help='Answers file (.yaml or .json)')
    prog.set_defaults(func=_cmd_progress)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )
    logger.debug('Running %s', args.command)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
