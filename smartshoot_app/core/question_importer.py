"""Utilities for importing a question bank from a human-friendly text file.

File format (repeat blocks separated by blank lines or '---'):

    CATEGORY: C1..C6
    TYPE: essay | multiple_choice | true_false | matching
    Q: Question text (supports markdown). Additional lines until the next
       marker are treated as part of the question.
    A: / B: / C: / D:   options (multiple_choice only)
    PAIR: left | right  one line per pair (matching only)
    CORRECT: B | TRUE | FALSE | 1A-2B-3C   (multiple_choice, true_false, matching)
    ANSWER: reference answer               (essay only)
    POINTS: integer     (optional, defaults to 100)
    TIMELIMIT: seconds  (optional, defaults to 30; 0 means untimed)
    IMAGE: url          (optional)

Example:

    CATEGORY: C2
    TYPE: essay
    Q: Which side of the journal records an increase in assets?
    ANSWER: Debit
    POINTS: 150
"""

from __future__ import annotations

from smartshoot_app.constants.game_constants import (
    DEFAULT_POINTS,
    DEFAULT_TIME_LIMIT_SECONDS,
    MULTIPLE_CHOICE_LABELS,
)
from smartshoot_app.core.models import MatchingPair, Question, QuestionCategory, QuestionType


class QuestionBankImportError(Exception):
    """Raised when a question bank definition cannot be parsed."""


_BOOLEAN_WORDS = {"TRUE": True, "BENAR": True, "FALSE": False, "SALAH": False}


def parse_question_bank(text: str) -> list[Question]:
    """Parse every block in ``text``; a bank without questions is rejected."""
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    questions = [_parse_block(block) for block in blocks if block]
    if not questions:
        raise QuestionBankImportError("Question bank did not contain any questions.")
    return questions


def _parse_block(block: str) -> Question:
    fields: dict[str, str] = {}
    question_lines: list[str] = []
    options: dict[str, str] = {}
    pairs: list[MatchingPair] = []
    in_question = False

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        upper = line.upper()

        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            in_question = True
            continue

        key, sep, value = line.partition(":")
        key_upper = key.strip().upper()
        if sep and key_upper in {"CATEGORY", "TYPE", "CORRECT", "ANSWER", "POINTS", "TIMELIMIT", "IMAGE"}:
            fields[key_upper] = value.strip()
            in_question = False
            continue
        if sep and key_upper == "PAIR":
            left, bar, right = value.partition("|")
            if not bar:
                raise QuestionBankImportError(f"PAIR must look like 'left | right': '{line}'.")
            pairs.append(MatchingPair(left=left.strip(), right=right.strip()))
            in_question = False
            continue
        if sep and key_upper in MULTIPLE_CHOICE_LABELS and len(key.strip()) == 1:
            options[key_upper] = value.strip()
            in_question = False
            continue

        if in_question:
            question_lines.append(line)
        else:
            raise QuestionBankImportError(f"Encountered text outside of a known section: '{line}'.")

    prompt = "\n".join(question_lines).strip()
    if not prompt:
        raise QuestionBankImportError("Question text missing (Q: ...)")

    category = _parse_enum(QuestionCategory, fields.get("CATEGORY", "").upper(), "CATEGORY")
    question_type = _parse_enum(QuestionType, fields.get("TYPE", "").lower(), "TYPE")

    question = Question(
        id="",
        category=category,
        type=question_type,
        prompt=prompt,
        time_limit=_parse_int(fields.get("TIMELIMIT"), "TIMELIMIT", DEFAULT_TIME_LIMIT_SECONDS, minimum=0),
        points=_parse_int(fields.get("POINTS"), "POINTS", DEFAULT_POINTS, minimum=1),
        image_url=fields.get("IMAGE") or None,
    )

    correct = fields.get("CORRECT", "")
    if question_type is QuestionType.MULTIPLE_CHOICE:
        if set(options) != set(MULTIPLE_CHOICE_LABELS):
            raise QuestionBankImportError("Multiple choice questions must define options A-D.")
        if correct.upper() not in MULTIPLE_CHOICE_LABELS:
            raise QuestionBankImportError("CORRECT must be one of A, B, C, or D.")
        question.options = [options[label] for label in MULTIPLE_CHOICE_LABELS]
        question.correct_answer = correct.upper()
    elif question_type is QuestionType.TRUE_FALSE:
        if correct.upper() not in _BOOLEAN_WORDS:
            raise QuestionBankImportError("CORRECT must be TRUE or FALSE for true/false questions.")
        question.correct_answer = _BOOLEAN_WORDS[correct.upper()]
    elif question_type is QuestionType.ESSAY:
        if not fields.get("ANSWER"):
            raise QuestionBankImportError("Essay questions need an ANSWER line.")
        question.essay_answer = fields["ANSWER"]
    elif question_type is QuestionType.MATCHING:
        if not pairs:
            raise QuestionBankImportError("Matching questions need at least one PAIR line.")
        if not correct:
            raise QuestionBankImportError("Matching questions need a CORRECT key such as 1A-2B-3C.")
        question.matching_pairs = pairs
        question.matching_answer = correct
    return question


def _parse_enum(enum_type, raw_value: str, label: str):
    try:
        return enum_type(raw_value)
    except ValueError as exc:
        raise QuestionBankImportError(f"{label} has an unsupported value: '{raw_value}'.") from exc


def _parse_int(raw_value: str | None, label: str, default: int, minimum: int) -> int:
    if raw_value is None:
        return default
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:  # pragma: no cover - conversion error details unnecessary
        raise QuestionBankImportError(f"{label} must be an integer.") from exc
    if parsed_value < minimum:
        raise QuestionBankImportError(f"{label} must be at least {minimum}.")
    return parsed_value
