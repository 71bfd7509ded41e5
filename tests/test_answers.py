"""
Tests for answer normalization.
"""

import pytest
from qrre.answers import (
    YesNo,
    answer_text,
    answers_match,
    is_empty,
    normalize_answers,
    normalize_yes_no,
)


class TestYesNo:
    @pytest.mark.parametrize("answer", [True, 1, 1.0, "1", "Y", "y", "Yes", "TRUE"])
    def test_yes(self, answer):
        assert normalize_yes_no(answer) is YesNo.YES

    @pytest.mark.parametrize("answer", [False, 0, "0", "N", "no", "false"])
    def test_no(self, answer):
        assert normalize_yes_no(answer) is YesNo.NO

    @pytest.mark.parametrize("answer", ["NA", "n/a", "Not Applicable", 2, "2", 2.0])
    def test_na(self, answer):
        assert normalize_yes_no(answer) is YesNo.NA

    @pytest.mark.parametrize("answer", [None, "", "maybe", 3, -1, "AA"])
    def test_not_yes_no(self, answer):
        assert normalize_yes_no(answer) is None


class TestEmpty:
    def test_empty_values(self):
        for answer in (None, "", "  ", [], {}, ()):
            assert is_empty(answer)

    def test_zero_is_an_answer(self):
        assert not is_empty(0)
        assert not is_empty(False)

    def test_zero_mask_is_empty(self):
        assert is_empty(0, bitmask=True)
        assert not is_empty(3, bitmask=True)


class TestMatching:
    def test_yes_no_tokens(self):
        assert answers_match(1, "Y")
        assert answers_match("no", "0")
        assert not answers_match("Y", "N")

    def test_exact_codes(self):
        assert answers_match("AA", "AA")
        assert not answers_match("AA", "AB")

    def test_empty_never_matches(self):
        assert not answers_match(None, "")
        assert not answers_match("", "")

    def test_answer_text(self):
        assert answer_text(22.0) == "22"
        assert answer_text(" x ") == "x"
        assert answer_text(None) == ""


class TestNormalizeAnswers:
    def test_rekeys_by_qid(self):
        assert normalize_answers({"1001": "Y", "1010.5": 3, 7: "N"}) == {1001: "Y", 1010.5: 3, 7: "N"}

    def test_drops_non_qid_keys(self):
        assert normalize_answers({"notes": "x", "1": "Y"}) == {1: "Y"}

    def test_none(self):
        assert normalize_answers(None) == {}
