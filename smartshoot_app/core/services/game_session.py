"""Service owning one player's play-through of a round."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
import logging
import random
from uuid import uuid4

from smartshoot_app.core.grading import grade_answer
from smartshoot_app.core.models import AnswerOutcome, Player, Question, Round
from smartshoot_app.core.question_selector import draw_questions
from smartshoot_app.core.services.background_tasks import BackgroundTaskRunner
from smartshoot_app.core.services.catalog import Catalog
from smartshoot_app.core.services.leaderboard import Leaderboard
from smartshoot_app.core.services.question_timer import QuestionTimer
from smartshoot_app.core.services.repositories import LeaderboardRepository

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    ROUND_SELECTED = "round_selected"
    AWAITING_SELECTION = "awaiting_selection"
    QUESTION_PRESENTED = "question_presented"
    FEEDBACK = "feedback"
    COMPLETE = "complete"


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Read-only view of the session handed to the presentation layer."""

    state: SessionState
    player: Player | None
    current_round: Round | None
    questions: tuple[Question, ...]
    current_question: Question | None
    current_question_index: int
    answered_questions: dict[str, AnswerOutcome]
    is_playing: bool
    show_feedback: bool
    last_answer_correct: bool | None
    game_complete: bool


class GameSession:
    """State machine for a single session: Idle -> RoundSelected -> Playing -> Complete.

    Operations whose preconditions are not met (no player, no round, unknown
    ids, no game in progress) are silent no-ops. A completed session only
    leaves Complete through set_player or reset_game. Leaderboard persistence
    is submitted to the task runner after the in-memory completion state is
    set, and never feeds back into the session.
    """

    def __init__(
        self,
        catalog: Catalog,
        leaderboard: Leaderboard,
        leaderboard_repository: LeaderboardRepository,
        task_runner: BackgroundTaskRunner,
        rng: random.Random | None = None,
        timer: QuestionTimer | None = None,
    ) -> None:
        self._catalog = catalog
        self._leaderboard = leaderboard
        self._leaderboard_repository = leaderboard_repository
        self._task_runner = task_runner
        self._rng = rng or random.Random()
        self._timer = timer
        self._clear_session()

    def _clear_session(self) -> None:
        self._player: Player | None = None
        self._current_round: Round | None = None
        self._questions: list[Question] = []
        self._current_question: Question | None = None
        self._current_question_index: int = 0
        self._answered: dict[str, AnswerOutcome] = {}
        self._is_playing: bool = False
        self._show_feedback: bool = False
        self._last_answer_correct: bool | None = None
        self._game_complete: bool = False

    # --- Transitions ---

    def set_player(self, name: str) -> Player:
        self._cancel_timer()
        self._clear_session()
        self._player = Player(id=f"player_{uuid4().hex}", name=name)
        return self._player

    def select_round(self, round_id: str) -> None:
        if self._player is None:
            return
        round_ = self._catalog.find_round(round_id)
        if round_ is None:
            logger.debug("Ignoring unknown round id %s", round_id)
            return
        self._current_round = round_
        self._player.round_id = round_.id

    def start_game(self) -> None:
        if self._current_round is None or self._game_complete:
            return
        self._cancel_timer()
        self._questions = draw_questions(self._current_round, self._catalog.get_questions(), self._rng)
        self._answered = {}
        self._current_question = None
        self._current_question_index = 0
        self._show_feedback = False
        self._last_answer_correct = None
        self._game_complete = False
        self._is_playing = True
        logger.info(
            "Started round %s with %d of %d configured question(s)",
            self._current_round.id,
            len(self._questions),
            self._current_round.total_questions,
        )
        if not self._questions:
            self.end_game()

    def select_question(self, question_id: str) -> None:
        if not self._is_playing:
            return
        question = next((q for q in self._questions if q.id == question_id), None)
        if question is None:
            return
        self._current_question = question
        if question.id in self._answered:
            self._cancel_timer()
        elif self._timer is not None:
            self._timer.arm(question.id, question.time_limit)

    def answer_question(self, answer: str | bool) -> bool | None:
        """Grade ``answer`` against the current question.

        Returns the grading result, or None when nothing was graded. A question
        that already has an outcome is never graded twice.
        """

        question = self._current_question
        if question is None or self._player is None or not self._is_playing:
            return None
        if question.id in self._answered:
            logger.debug("Question %s was already answered; ignoring", question.id)
            return None

        self._cancel_timer()
        is_correct = grade_answer(question, answer)
        self._answered[question.id] = AnswerOutcome.CORRECT if is_correct else AnswerOutcome.WRONG
        self._show_feedback = True
        self._last_answer_correct = is_correct
        if is_correct:
            self._player.score += question.points
            self._player.correct_answers += 1
        else:
            self._player.wrong_answers += 1
        return is_correct

    def skip_question(self) -> None:
        if self._player is None or not self._is_playing:
            return
        self._cancel_timer()
        question = self._current_question
        if question is not None and question.id not in self._answered:
            self._answered[question.id] = AnswerOutcome.WRONG
            self._player.wrong_answers += 1
        self._clear_presentation()
        if self._all_answered():
            self.end_game()

    def expire_question(self, question_id: str) -> None:
        """Timer callback; only skips if ``question_id`` is still on screen."""
        question = self._current_question
        if question is None or question.id != question_id or question_id in self._answered:
            return
        self.skip_question()

    def next_question(self) -> None:
        if not self._is_playing:
            return
        if self._all_answered():
            self.end_game()
            return
        self._clear_presentation()
        self._current_question_index += 1

    def end_game(self) -> None:
        if self._player is None or self._game_complete:
            return
        self._cancel_timer()
        self._player.completed_at = datetime.now(timezone.utc)
        completed = replace(self._player)
        self._leaderboard.add(completed)
        self._clear_presentation()
        self._game_complete = True
        self._is_playing = False
        logger.info("Player %s completed with score %d", completed.name, completed.score)
        self._task_runner.submit(
            f"save leaderboard entry for {completed.name}",
            self._leaderboard_repository.create_player,
            completed,
        )

    def reset_game(self) -> None:
        self._cancel_timer()
        self._clear_session()

    # --- Queries ---

    def get_state(self) -> SessionState:
        if self._game_complete:
            return SessionState.COMPLETE
        if self._is_playing:
            if self._show_feedback:
                return SessionState.FEEDBACK
            if self._current_question is not None:
                return SessionState.QUESTION_PRESENTED
            return SessionState.AWAITING_SELECTION
        if self._player is not None and self._current_round is not None:
            return SessionState.ROUND_SELECTED
        return SessionState.IDLE

    def get_player(self) -> Player | None:
        return replace(self._player) if self._player else None

    def get_current_question(self) -> Question | None:
        return self._current_question

    def get_questions(self) -> list[Question]:
        return list(self._questions)

    def get_answered_questions(self) -> dict[str, AnswerOutcome]:
        return dict(self._answered)

    def is_game_complete(self) -> bool:
        return self._game_complete

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.get_state(),
            player=self.get_player(),
            current_round=self._current_round,
            questions=tuple(self._questions),
            current_question=self._current_question,
            current_question_index=self._current_question_index,
            answered_questions=dict(self._answered),
            is_playing=self._is_playing,
            show_feedback=self._show_feedback,
            last_answer_correct=self._last_answer_correct,
            game_complete=self._game_complete,
        )

    # --- Helpers ---

    def _all_answered(self) -> bool:
        return self._is_playing and all(q.id in self._answered for q in self._questions)

    def _clear_presentation(self) -> None:
        self._current_question = None
        self._show_feedback = False
        self._last_answer_correct = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
