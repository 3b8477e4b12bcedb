"""Domain models for the accounting board game."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class QuestionCategory(str, Enum):
    """Six topic tiers, ordered from foundational to advanced."""

    C1 = "C1"
    C2 = "C2"
    C3 = "C3"
    C4 = "C4"
    C5 = "C5"
    C6 = "C6"


class QuestionType(str, Enum):
    ESSAY = "essay"
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    MATCHING = "matching"


class AnswerOutcome(str, Enum):
    CORRECT = "correct"
    WRONG = "wrong"


@dataclass(slots=True)
class MatchingPair:
    left: str
    right: str


@dataclass(slots=True)
class Question:
    """Single quiz item; only the answer fields relevant to ``type`` are set."""

    id: str
    category: QuestionCategory
    type: QuestionType
    prompt: str
    time_limit: int
    points: int
    image_url: str | None = None
    options: list[str] | None = None  # multiple choice
    correct_answer: str | bool | None = None  # multiple choice label or true/false
    essay_answer: str | None = None
    matching_pairs: list[MatchingPair] | None = None
    matching_answer: str | None = None  # e.g. "1A-2B-3C"


@dataclass(slots=True)
class Round:
    """Admin-configured bundle of per-category question counts."""

    id: str
    name: str
    question_counts: dict[QuestionCategory, int]
    total_questions: int = 0

    def __post_init__(self) -> None:
        self.total_questions = sum(self.question_counts.values())

    def count_for(self, category: QuestionCategory) -> int:
        return self.question_counts.get(category, 0)


@dataclass(slots=True)
class Player:
    """In-session player; doubles as a leaderboard entry once completed."""

    id: str
    name: str
    round_id: str = ""
    score: int = 0
    correct_answers: int = 0
    wrong_answers: int = 0
    completed_at: datetime | None = None


@dataclass(slots=True)
class LeaderboardStats:
    total_games: int
    average_score: int
    highest_score: int
    top_player: str | None


@dataclass(slots=True)
class CatalogSnapshot:
    """Repository-backed data that may be cached between runs."""

    rounds: list[Round] = field(default_factory=list)
    questions: list[Question] = field(default_factory=list)
    leaderboard: list[Player] = field(default_factory=list)
    admin_pin: str | None = None
