"""
Tests for core/question_selector.py
"""

from collections import Counter
import random

from conftest import make_question, make_round
from smartshoot_app.core.models import QuestionCategory
from smartshoot_app.core.question_selector import draw_questions


def _category_counts(questions):
    return Counter(question.category for question in questions)


def test_draw_honors_each_category_quota(sample_questions):
    round_ = make_round(C1=2, C2=1, C4=3, C6=1)
    drawn = draw_questions(round_, sample_questions, random.Random(5))

    counts = _category_counts(drawn)
    assert counts[QuestionCategory.C1] == 2
    assert counts[QuestionCategory.C2] == 1
    assert counts[QuestionCategory.C3] == 0
    assert counts[QuestionCategory.C4] == 3
    assert counts[QuestionCategory.C6] == 1
    assert len(drawn) == 7
    assert len({question.id for question in drawn}) == 7


def test_under_supply_yields_what_is_available(sample_questions, caplog):
    round_ = make_round(C1=5, C2=2)
    drawn = draw_questions(round_, sample_questions, random.Random(5))

    counts = _category_counts(drawn)
    assert counts[QuestionCategory.C1] == 3
    assert counts[QuestionCategory.C2] == 2
    assert len(drawn) == 5
    assert "only 3 are available" in caplog.text


def test_empty_catalog_draws_nothing():
    assert draw_questions(make_round(C1=2), [], random.Random(1)) == []


def test_catalog_is_not_mutated(sample_questions):
    original_order = [question.id for question in sample_questions]
    draw_questions(make_round(C1=3, C2=3, C3=3), sample_questions, random.Random(3))
    assert [question.id for question in sample_questions] == original_order


def test_same_seed_gives_same_order(sample_questions):
    round_ = make_round(C1=3, C2=3, C3=3, C4=3)
    first = draw_questions(round_, sample_questions, random.Random(42))
    second = draw_questions(round_, sample_questions, random.Random(42))
    assert [q.id for q in first] == [q.id for q in second]


def test_final_shuffle_mixes_categories():
    catalog = [make_question(f"{cat.value}_{n}", category=cat) for cat in QuestionCategory for n in range(10)]
    round_ = make_round(C1=10, C2=10, C3=10, C4=10, C5=10, C6=10)
    drawn = draw_questions(round_, catalog, random.Random(8))
    categories = [question.category for question in drawn]
    assert categories != sorted(categories, key=lambda c: c.value)
