#!/usr/bin/env python3
"""
Complete Pipeline Demo: Questionnaire → Analysis → Answering Session

Shows the full workflow:
1. Build (or import) a questionnaire
2. Analyze it for authoring problems
3. Answer it and watch skips, widgets and progress react
4. Save questionnaire and answers as YAML/JSON
"""

import sys

from qrre.analyzer import analyze_questionnaire
from qrre.examples import build_example_reps_certs
from qrre.qms_import import parse_qms_file
from qrre.serialization import answers_to_json, questionnaire_to_yaml
from qrre.session import QuestionnaireSession
from qrre.zcode import format_zcode_binary, zcode_labels


def main(argv):
    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Questionnaire → Analysis → Session")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Load questionnaire
    # =========================================================================
    print("\n1. LOADING QUESTIONNAIRE...")
    if len(argv) > 1:
        questionnaire = parse_qms_file(argv[1])
    else:
        questionnaire = build_example_reps_certs()
    print(f"   ✓ Loaded questionnaire: {questionnaire.name}")
    print(f"   ✓ Questions: {len(questionnaire.questions)}")

    # =========================================================================
    # STEP 2: Analyze
    # =========================================================================
    print("\n2. ANALYZING QUESTIONNAIRE...")
    report = analyze_questionnaire(questionnaire)
    print(f"   ✓ Required: {report.required_questions}")
    print(f"   ✓ With skip logic: {report.questions_with_skip_logic}")
    print(f"   ✓ Sections: {report.surveysets}")

    if report.warnings:
        print(f"\n   Warnings ({len(report.warnings)}):")
        for warning in report.warnings[:5]:
            print(f"      - {warning}")
        if len(report.warnings) > 5:
            print(f"      ... and {len(report.warnings) - 5} more")

    if len(argv) > 1:
        return 0

    # =========================================================================
    # STEP 3: Answer it
    # =========================================================================
    print("\n3. ANSWERING...")
    session = QuestionnaireSession(questionnaire)
    script = [
        (1001, "Y"),
        (1002, "N"),
        (1005, "AB"),
        (1006, ["S", "WOSB", "VOSB"]),
        (1007, "Y"),
        (1008, "Y"),
    ]
    for qid, value in script:
        change = session.set_answer(qid, value)
        print(f"   {qid} = {change.current!r:<10} progress {session.progress():>3}%")
        if change.warning:
            print(f"      ! {change.warning.message}")

    mask = session.get_answer(1006)
    print(f"\n   Z-Code {mask} ({format_zcode_binary(mask)}): {', '.join(zcode_labels(mask))}")
    print(f"   Skipped: {sorted(session.reachability().unreachable)}")
    print(f"   Widgets for 1008: {session.widgets(1008)}")
    for qid, issue in session.errors().items():
        print(f"   Error {qid}: {issue.message}")

    # =========================================================================
    # STEP 4: Save
    # =========================================================================
    print("\n4. SAVING...")
    with open("reps_certs.yaml", "w", encoding="utf-8") as fh:
        fh.write(questionnaire_to_yaml(questionnaire))
    print("   ✓ Saved reps_certs.yaml")
    with open("reps_certs_answers.json", "w", encoding="utf-8") as fh:
        fh.write(answers_to_json(session.answers))
    print("   ✓ Saved reps_certs_answers.json")

    print("\n" + "=" * 80)
    print("✓ PIPELINE COMPLETE")
    print("=" * 80)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
