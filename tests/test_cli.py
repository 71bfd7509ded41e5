"""
Tests for the command-line entry point.
"""

import json

import pytest
from qrre.cli import build_parser, load_questionnaire, main
from qrre.examples import build_example_reps_certs
from qrre.serialization import questionnaire_to_json, questionnaire_to_yaml

QMS_CSV = (
    "QID,Survey,Question,Response,Title,Required,skipLogic,skipLogicAnswer,skipLogicJump\n"
    "1,Demo,First?,Y/N,first,1,Y,0,3\n"
    "2,Demo,Second?,SLIDER,second,1,,,\n"
    "3,Demo,Third?,Y/N,third,1,,,\n"
)


@pytest.fixture
def example_yaml(tmp_path):
    path = tmp_path / "reps.yaml"
    path.write_text(questionnaire_to_yaml(build_example_reps_certs()), encoding="utf-8")
    return path


def test_load_formats(tmp_path, example_yaml):
    json_path = tmp_path / "reps.json"
    json_path.write_text(questionnaire_to_json(build_example_reps_certs()), encoding="utf-8")
    csv_path = tmp_path / "demo.csv"
    csv_path.write_text(QMS_CSV, encoding="utf-8")

    assert len(load_questionnaire(str(example_yaml)).questions) == 11
    assert len(load_questionnaire(str(json_path)).questions) == 11
    with pytest.warns(UserWarning):
        assert load_questionnaire(str(csv_path)).name == "Demo"


def test_lint_clean(example_yaml, capsys):
    assert main(["lint", str(example_yaml)]) == 0
    out = capsys.readouterr().out
    assert "Annual Reps & Certs" in out
    assert "No warnings" in out


def test_lint_reports_warnings(tmp_path, capsys):
    path = tmp_path / "demo.csv"
    path.write_text(QMS_CSV, encoding="utf-8")
    with pytest.warns(UserWarning):
        assert main(["lint", str(path)]) == 1
    assert "SLIDER" in capsys.readouterr().out


def test_progress(example_yaml, tmp_path, capsys):
    answers = tmp_path / "answers.json"
    answers.write_text(json.dumps({"1001": "Y", "1002": "N", "1005": "AA"}), encoding="utf-8")

    assert main(["progress", str(example_yaml), str(answers)]) == 0
    out = capsys.readouterr().out
    assert "Progress: 50%" in out
    assert "Skipped: 1003, 1004, 1006" in out
    assert "1007: REQUIRED_MISSING" in out


def test_progress_yaml_answers(example_yaml, tmp_path, capsys):
    answers = tmp_path / "answers.yaml"
    answers.write_text("'1004': '2027-03-01'\n", encoding="utf-8")
    assert main(["progress", str(example_yaml), str(answers)]) == 0
    assert "Skipped: (none)" in capsys.readouterr().out


def test_command_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
