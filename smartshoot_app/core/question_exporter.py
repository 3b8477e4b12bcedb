"""Utilities for exporting the question bank to the plain-text import format."""

from __future__ import annotations

from smartshoot_app.constants.game_constants import MULTIPLE_CHOICE_LABELS
from smartshoot_app.core.models import Question, QuestionType


def serialize_questions(questions: list[Question]) -> str:
    """Render ``questions`` in the text import format; an empty bank gives an empty string."""
    if not questions:
        return ""
    blocks = [_serialize_question(question) for question in questions]
    return "\n\n---\n\n".join(blocks) + "\n"


def _serialize_question(question: Question) -> str:
    lines = [f"CATEGORY: {question.category.value}", f"TYPE: {question.type.value}"]

    prompt_lines = question.prompt.splitlines() or [question.prompt]
    lines.append(f"Q: {prompt_lines[0]}")
    lines.extend(prompt_lines[1:])

    if question.type is QuestionType.MULTIPLE_CHOICE:
        for label, option in zip(MULTIPLE_CHOICE_LABELS, question.options or []):
            lines.append(f"{label}: {option}")
        lines.append(f"CORRECT: {question.correct_answer}")
    elif question.type is QuestionType.TRUE_FALSE:
        lines.append(f"CORRECT: {'TRUE' if question.correct_answer else 'FALSE'}")
    elif question.type is QuestionType.ESSAY:
        lines.append(f"ANSWER: {question.essay_answer or ''}")
    elif question.type is QuestionType.MATCHING:
        for pair in question.matching_pairs or []:
            lines.append(f"PAIR: {pair.left} | {pair.right}")
        lines.append(f"CORRECT: {question.matching_answer or ''}")

    lines.append(f"POINTS: {question.points}")
    lines.append(f"TIMELIMIT: {question.time_limit}")
    if question.image_url:
        lines.append(f"IMAGE: {question.image_url}")
    return "\n".join(lines)
