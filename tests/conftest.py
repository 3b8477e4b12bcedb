"""
Pytest configuration and shared fixtures for SmartShoot tests.
"""

from __future__ import annotations

import random

import pytest

from smartshoot_app.core.game_manager import GameManager
from smartshoot_app.core.models import (
    MatchingPair,
    Question,
    QuestionCategory,
    QuestionType,
    Round,
)
from smartshoot_app.core.services.background_tasks import InlineTaskRunner
from smartshoot_app.core.services.catalog import Catalog
from smartshoot_app.core.services.game_session import GameSession
from smartshoot_app.core.services.leaderboard import Leaderboard
from smartshoot_app.core.services.question_timer import QuestionTimer
from smartshoot_app.core.services.repositories import (
    InMemoryAdminSettingsRepository,
    InMemoryCatalogRepository,
    InMemoryLeaderboardRepository,
)


class FakeTimer:
    """Manually fired stand-in for threading.Timer."""

    def __init__(self, seconds: float, callback) -> None:
        self.seconds = seconds
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        # Fires even when cancelled, like a callback that was already running.
        self.callback()


class FakeTimerFactory:
    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, seconds: float, callback) -> FakeTimer:
        timer = FakeTimer(seconds, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


class FailingLeaderboardRepository(InMemoryLeaderboardRepository):
    def create_player(self, player):
        raise ConnectionError("datastore unreachable")


def make_question(
    question_id: str,
    category: QuestionCategory = QuestionCategory.C1,
    question_type: QuestionType = QuestionType.TRUE_FALSE,
    points: int = 100,
    time_limit: int = 30,
    **answer_fields,
) -> Question:
    if not answer_fields:
        if question_type is QuestionType.TRUE_FALSE:
            answer_fields = {"correct_answer": True}
        elif question_type is QuestionType.MULTIPLE_CHOICE:
            answer_fields = {"options": ["Kas", "Modal", "Utang", "Beban"], "correct_answer": "B"}
        elif question_type is QuestionType.ESSAY:
            answer_fields = {"essay_answer": "Debit"}
        else:
            answer_fields = {
                "matching_pairs": [
                    MatchingPair("Aset", "Kas"),
                    MatchingPair("Liabilitas", "Utang usaha"),
                    MatchingPair("Ekuitas", "Modal pemilik"),
                ],
                "matching_answer": "1A-2B-3C",
            }
    return Question(
        id=question_id,
        category=category,
        type=question_type,
        prompt=f"Prompt for {question_id}",
        time_limit=time_limit,
        points=points,
        **answer_fields,
    )


def make_round(round_id: str = "round1", **counts: int) -> Round:
    return Round(
        id=round_id,
        name=f"Round {round_id}",
        question_counts={QuestionCategory(key): value for key, value in counts.items()},
    )


@pytest.fixture
def sample_questions() -> list[Question]:
    """Three true/false questions in each of the six categories."""
    questions = []
    for category in QuestionCategory:
        for n in range(1, 4):
            questions.append(make_question(f"{category.value.lower()}_{n}", category=category))
    return questions


@pytest.fixture
def sample_rounds() -> list[Round]:
    return [
        make_round("round1", C1=2, C2=2, C3=2),
        make_round("round2", C3=1, C4=1, C5=2, C6=2),
    ]


@pytest.fixture
def timer_factory() -> FakeTimerFactory:
    return FakeTimerFactory()


@pytest.fixture
def leaderboard_repository() -> InMemoryLeaderboardRepository:
    return InMemoryLeaderboardRepository()


@pytest.fixture
def session(sample_questions, sample_rounds, leaderboard_repository, timer_factory) -> GameSession:
    catalog = Catalog()
    catalog.load(sample_rounds, sample_questions)
    holder: dict[str, GameSession] = {}
    timer = QuestionTimer(lambda qid: holder["session"].expire_question(qid), timer_factory=timer_factory)
    game = GameSession(
        catalog=catalog,
        leaderboard=Leaderboard(),
        leaderboard_repository=leaderboard_repository,
        task_runner=InlineTaskRunner(),
        rng=random.Random(1234),
        timer=timer,
    )
    holder["session"] = game
    return game


@pytest.fixture
def manager(sample_questions, sample_rounds, leaderboard_repository, timer_factory) -> GameManager:
    game_manager = GameManager(
        catalog_repository=InMemoryCatalogRepository(sample_rounds, sample_questions),
        leaderboard_repository=leaderboard_repository,
        settings_repository=InMemoryAdminSettingsRepository(),
        task_runner=InlineTaskRunner(),
        rng=random.Random(99),
        timer_factory=timer_factory,
    )
    game_manager.initialize_data()
    return game_manager
