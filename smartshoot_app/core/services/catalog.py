"""Service holding the round and question catalogs used by the game."""

from __future__ import annotations

from dataclasses import replace
import time

from smartshoot_app.constants.game_constants import CATEGORY_ORDER, MULTIPLE_CHOICE_LABELS
from smartshoot_app.core.models import Question, QuestionCategory, QuestionType, Round


class Catalog:
    """Local copy of the repository-backed rounds and questions."""

    def __init__(self) -> None:
        self._rounds: list[Round] = []
        self._questions: list[Question] = []
        self._id_counter: int = 0

    def load(self, rounds: list[Round], questions: list[Question]) -> None:
        """Replace both catalogs with data read from the repository or cache."""
        self._rounds = list(rounds)
        self._questions = list(questions)

    def get_rounds(self) -> list[Round]:
        return list(self._rounds)

    def get_questions(self) -> list[Question]:
        return list(self._questions)

    def find_round(self, round_id: str) -> Round | None:
        return next((r for r in self._rounds if r.id == round_id), None)

    def find_question(self, question_id: str) -> Question | None:
        return next((q for q in self._questions if q.id == question_id), None)

    def add_round(self, name: str, question_counts: dict[QuestionCategory, int]) -> Round:
        cleaned_name = name.strip()
        if not cleaned_name:
            raise ValueError("Round name must not be empty.")
        counts = self._validate_counts(question_counts)
        round_ = Round(id=self._next_local_id("round"), name=cleaned_name, question_counts=counts)
        if round_.total_questions == 0:
            raise ValueError("A round must draw at least one question.")
        self._rounds.append(round_)
        return round_

    def delete_round(self, round_id: str) -> bool:
        before = len(self._rounds)
        self._rounds = [r for r in self._rounds if r.id != round_id]
        return len(self._rounds) != before

    def add_question(self, question: Question) -> Question:
        prepared = self._prepare_question(question)
        self._questions.append(prepared)
        return prepared

    def add_questions(self, questions: list[Question]) -> list[Question]:
        """Add a batch; nothing is added unless every question validates."""
        prepared = [self._prepare_question(question) for question in questions]
        self._questions.extend(prepared)
        return prepared

    def delete_question(self, question_id: str) -> bool:
        before = len(self._questions)
        self._questions = [q for q in self._questions if q.id != question_id]
        return len(self._questions) != before

    def adopt_round_id(self, local_id: str, authoritative_id: str) -> None:
        """Swap a locally proposed round id for the one the repository assigned."""
        for index, round_ in enumerate(self._rounds):
            if round_.id == local_id:
                self._rounds[index] = replace(round_, id=authoritative_id)
                return

    def adopt_question_id(self, local_id: str, authoritative_id: str) -> None:
        for index, question in enumerate(self._questions):
            if question.id == local_id:
                self._questions[index] = replace(question, id=authoritative_id)
                return

    def _next_local_id(self, prefix: str) -> str:
        self._id_counter += 1
        return f"{prefix}_{int(time.time() * 1000)}_{self._id_counter}"

    @staticmethod
    def _validate_counts(question_counts: dict[QuestionCategory, int]) -> dict[QuestionCategory, int]:
        counts: dict[QuestionCategory, int] = {}
        for category in CATEGORY_ORDER:
            value = question_counts.get(category, 0)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"Count for {category.value} must be a non-negative integer.")
            counts[category] = value
        unknown = set(question_counts) - set(CATEGORY_ORDER)
        if unknown:
            raise ValueError(f"Unknown categories: {sorted(str(c) for c in unknown)}")
        return counts

    def _prepare_question(self, question: Question) -> Question:
        """Validate a question and keep only the answer fields of its type."""
        cleaned_prompt = question.prompt.strip()
        if not cleaned_prompt:
            raise ValueError("Question text must not be empty.")
        if question.points <= 0:
            raise ValueError("Points must be a positive integer.")
        if question.time_limit < 0:
            raise ValueError("Time limit must not be negative.")

        base = Question(
            id=question.id or self._next_local_id("q"),
            category=question.category,
            type=question.type,
            prompt=cleaned_prompt,
            time_limit=question.time_limit,
            points=question.points,
            image_url=question.image_url or None,
        )

        if question.type is QuestionType.ESSAY:
            if not (question.essay_answer or "").strip():
                raise ValueError("Essay questions need a reference answer.")
            base.essay_answer = question.essay_answer.strip()
        elif question.type is QuestionType.MULTIPLE_CHOICE:
            options = [option.strip() for option in question.options or []]
            if len(options) != len(MULTIPLE_CHOICE_LABELS) or any(not option for option in options):
                raise ValueError("Multiple choice questions need four non-empty options.")
            if question.correct_answer not in MULTIPLE_CHOICE_LABELS:
                raise ValueError("Correct option must be one of A, B, C, or D.")
            base.options = options
            base.correct_answer = question.correct_answer
        elif question.type is QuestionType.TRUE_FALSE:
            if not isinstance(question.correct_answer, bool):
                raise ValueError("True/false questions need a boolean answer.")
            base.correct_answer = question.correct_answer
        elif question.type is QuestionType.MATCHING:
            pairs = list(question.matching_pairs or [])
            if not pairs or any(not p.left.strip() or not p.right.strip() for p in pairs):
                raise ValueError("Matching questions need non-empty pairs.")
            if not (question.matching_answer or "").strip():
                raise ValueError("Matching questions need an answer key such as 1A-2B-3C.")
            base.matching_pairs = pairs
            base.matching_answer = question.matching_answer.strip()
        return base
