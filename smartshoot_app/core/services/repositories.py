"""Persistence collaborators for the catalog, leaderboard and admin settings.

The game engine only depends on the protocols below. The in-memory
implementations behave like the hosted datastore: created rows receive a
server-assigned UUID that replaces whatever id the client proposed, and player
rows only keep a round reference when it is a valid UUID.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
import logging
import re
from threading import Lock
from typing import Protocol
from uuid import uuid4

from smartshoot_app.constants.game_constants import DEFAULT_ADMIN_PIN
from smartshoot_app.core.models import Player, Question, Round

logger = logging.getLogger(__name__)

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value: str | None) -> bool:
    return bool(value) and _UUID_PATTERN.match(value) is not None


def normalize_round_id(round_id: str | None) -> str | None:
    """Map locally generated placeholder ids to "no round"."""
    return round_id if is_valid_uuid(round_id) else None


class QuestionRoundRepository(Protocol):
    def list_rounds(self) -> list[Round]: ...

    def list_questions(self) -> list[Question]: ...

    def create_round(self, round_: Round) -> Round | None: ...

    def delete_round(self, round_id: str) -> bool: ...

    def create_question(self, question: Question) -> Question | None: ...

    def delete_question(self, question_id: str) -> bool: ...


class LeaderboardRepository(Protocol):
    def list_players(self) -> list[Player]: ...

    def create_player(self, player: Player) -> Player | None: ...

    def clear_all(self) -> bool: ...


class AdminSettingsRepository(Protocol):
    def get_pin(self) -> str: ...

    def set_pin(self, pin: str) -> bool: ...


class InMemoryCatalogRepository:
    """Question/round store that assigns authoritative ids on create."""

    def __init__(self, rounds: list[Round] | None = None, questions: list[Question] | None = None) -> None:
        self._lock = Lock()
        self._rounds: list[Round] = list(rounds or [])
        self._questions: list[Question] = list(questions or [])

    def list_rounds(self) -> list[Round]:
        with self._lock:
            return list(self._rounds)

    def list_questions(self) -> list[Question]:
        with self._lock:
            return list(self._questions)

    def create_round(self, round_: Round) -> Round | None:
        stored = replace(round_, id=str(uuid4()), question_counts=dict(round_.question_counts))
        with self._lock:
            self._rounds.append(stored)
        logger.debug("Stored round %s as %s", round_.id, stored.id)
        return stored

    def delete_round(self, round_id: str) -> bool:
        with self._lock:
            before = len(self._rounds)
            self._rounds = [r for r in self._rounds if r.id != round_id]
            return len(self._rounds) != before

    def create_question(self, question: Question) -> Question | None:
        stored = replace(question, id=str(uuid4()))
        with self._lock:
            self._questions.append(stored)
        logger.debug("Stored question %s as %s", question.id, stored.id)
        return stored

    def delete_question(self, question_id: str) -> bool:
        with self._lock:
            before = len(self._questions)
            self._questions = [q for q in self._questions if q.id != question_id]
            return len(self._questions) != before


class InMemoryLeaderboardRepository:
    def __init__(self, players: list[Player] | None = None) -> None:
        self._lock = Lock()
        self._players: list[Player] = list(players or [])

    def list_players(self) -> list[Player]:
        with self._lock:
            return sorted(self._players, key=lambda p: p.score, reverse=True)

    def create_player(self, player: Player) -> Player | None:
        stored = replace(
            player,
            id=str(uuid4()),
            round_id=normalize_round_id(player.round_id) or "",
            completed_at=player.completed_at or datetime.now(timezone.utc),
        )
        with self._lock:
            self._players.append(stored)
        return stored

    def clear_all(self) -> bool:
        with self._lock:
            self._players.clear()
        return True


class InMemoryAdminSettingsRepository:
    def __init__(self, pin: str = DEFAULT_ADMIN_PIN) -> None:
        self._pin = pin

    def get_pin(self) -> str:
        return self._pin

    def set_pin(self, pin: str) -> bool:
        self._pin = pin
        return True
