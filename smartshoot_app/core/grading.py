"""Answer grading for the four supported question types."""

from __future__ import annotations

import re

from smartshoot_app.core.models import Question, QuestionType

_WHITESPACE = re.compile(r"\s")


def grade_answer(question: Question, answer: str | bool) -> bool:
    """Return True when ``answer`` matches the question's reference key."""

    if question.type in (QuestionType.TRUE_FALSE, QuestionType.MULTIPLE_CHOICE):
        return answer == question.correct_answer
    if question.type is QuestionType.ESSAY:
        return _normalize_essay(answer) == _normalize_essay(question.essay_answer or "")
    if question.type is QuestionType.MATCHING:
        return _normalize_matching(answer) == _normalize_matching(question.matching_answer or "")
    return False


def _normalize_essay(value: object) -> str:
    return str(value).strip().lower()


def _normalize_matching(value: object) -> str:
    # The key is compared as one token, e.g. "1A-2B-3C"; no per-pair credit.
    return _WHITESPACE.sub("", str(value).upper())
