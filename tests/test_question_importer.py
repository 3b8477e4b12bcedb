"""
Tests for core/question_importer.py and core/question_exporter.py
"""

import pytest

from conftest import make_question
from smartshoot_app.core.models import QuestionCategory, QuestionType
from smartshoot_app.core.question_exporter import serialize_questions
from smartshoot_app.core.question_importer import (
    QuestionBankImportError,
    parse_question_bank,
)

BANK = """\
CATEGORY: C1
TYPE: multiple_choice
Q: Akun mana yang termasuk ekuitas?
A: Kas
B: Modal pemilik
C: Utang usaha
D: Beban gaji
CORRECT: b
POINTS: 150
TIMELIMIT: 45

---

CATEGORY: C2
TYPE: true_false
Q: Pendapatan diakui ketika terjadi
   peningkatan manfaat ekonomi.
CORRECT: Benar

CATEGORY: c6
TYPE: MATCHING
Q: Pasangkan akun dengan kelompoknya.
PAIR: Aset | Kas
PAIR: Liabilitas | Utang usaha
PAIR: Ekuitas | Modal
CORRECT: 1A-2B-3C
IMAGE: https://example.com/akun.png
"""


def test_parses_each_block():
    mc, tf, matching = parse_question_bank(BANK)

    assert mc.type is QuestionType.MULTIPLE_CHOICE
    assert mc.options == ["Kas", "Modal pemilik", "Utang usaha", "Beban gaji"]
    assert mc.correct_answer == "B"
    assert (mc.points, mc.time_limit) == (150, 45)

    assert tf.category is QuestionCategory.C2
    assert tf.correct_answer is True
    assert tf.prompt == "Pendapatan diakui ketika terjadi\npeningkatan manfaat ekonomi."
    assert (tf.points, tf.time_limit) == (100, 30)

    assert matching.category is QuestionCategory.C6
    assert [pair.right for pair in matching.matching_pairs] == ["Kas", "Utang usaha", "Modal"]
    assert matching.matching_answer == "1A-2B-3C"
    assert matching.image_url == "https://example.com/akun.png"


def test_export_output_parses_back():
    questions = parse_question_bank(BANK)
    reparsed = parse_question_bank(serialize_questions(questions))
    assert [q.prompt for q in reparsed] == [q.prompt for q in questions]
    assert [q.type for q in reparsed] == [q.type for q in questions]


@pytest.mark.parametrize("block,message", [
    ("CATEGORY: C1\nTYPE: essay\nANSWER: Debit", "Question text missing"),
    ("CATEGORY: C9\nTYPE: essay\nQ: x\nANSWER: y", "CATEGORY"),
    ("CATEGORY: C1\nTYPE: quiz\nQ: x", "TYPE"),
    ("CATEGORY: C1\nTYPE: essay\nQ: x", "ANSWER"),
    ("CATEGORY: C1\nTYPE: true_false\nQ: x\nCORRECT: maybe", "TRUE or FALSE"),
    ("CATEGORY: C1\nTYPE: multiple_choice\nQ: x\nA: 1\nB: 2\nCORRECT: A", "options A-D"),
    ("CATEGORY: C1\nTYPE: matching\nQ: x\nPAIR: no separator\nCORRECT: 1A", "PAIR"),
    ("CATEGORY: C1\nTYPE: essay\nQ: x\nANSWER: y\nPOINTS: 0", "POINTS"),
])
def test_invalid_blocks_raise(block, message):
    with pytest.raises(QuestionBankImportError, match=message):
        parse_question_bank(block)


def test_empty_bank_is_rejected():
    with pytest.raises(QuestionBankImportError, match="did not contain any questions"):
        parse_question_bank("\n---\n\n")


def test_untimed_question_stays_untimed_after_export():
    untimed = make_question("essay_0", question_type=QuestionType.ESSAY, time_limit=0)
    text = serialize_questions([untimed])

    assert "TIMELIMIT: 0" in text
    assert parse_question_bank(text)[0].time_limit == 0


def test_negative_time_limit_is_rejected():
    with pytest.raises(QuestionBankImportError, match="TIMELIMIT"):
        parse_question_bank("CATEGORY: C1\nTYPE: essay\nQ: x\nANSWER: y\nTIMELIMIT: -5")


def test_export_of_empty_bank_is_empty():
    assert serialize_questions([]) == ""
