"""Business logic shared between the player flow and the admin surface."""

from __future__ import annotations

import logging
import random
from threading import RLock

from smartshoot_app.constants.game_constants import DEFAULT_ADMIN_PIN, ROUND_LEADERBOARD_SIZE
from smartshoot_app.core.catalog_cache import CatalogCache
from smartshoot_app.core.models import (
    CatalogSnapshot,
    LeaderboardStats,
    Player,
    Question,
    QuestionCategory,
    Round,
)
from smartshoot_app.core.question_exporter import serialize_questions
from smartshoot_app.core.question_importer import parse_question_bank
from smartshoot_app.core.services.admin_gate import AdminGate
from smartshoot_app.core.services.background_tasks import BackgroundTaskRunner
from smartshoot_app.core.services.catalog import Catalog
from smartshoot_app.core.services.game_session import GameSession, SessionSnapshot
from smartshoot_app.core.services.leaderboard import Leaderboard
from smartshoot_app.core.services.question_timer import QuestionTimer, TimerFactory
from smartshoot_app.core.services.repositories import (
    AdminSettingsRepository,
    LeaderboardRepository,
    QuestionRoundRepository,
)

logger = logging.getLogger(__name__)


class GameManager:
    """Facade over Catalog, Leaderboard, AdminGate and GameSession.

    Local state is always mutated first; repository writes are handed to the
    task runner and their failures are only logged. One re-entrant lock guards
    everything because API handlers, the question timer and repository
    callbacks run on different threads.
    """

    def __init__(
        self,
        catalog_repository: QuestionRoundRepository,
        leaderboard_repository: LeaderboardRepository,
        settings_repository: AdminSettingsRepository,
        cache: CatalogCache | None = None,
        task_runner: BackgroundTaskRunner | None = None,
        rng: random.Random | None = None,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        self._lock = RLock()
        self._catalog_repository = catalog_repository
        self._leaderboard_repository = leaderboard_repository
        self._settings_repository = settings_repository
        self._cache = cache
        self._tasks = task_runner or BackgroundTaskRunner()

        # Services
        self._catalog = Catalog()
        self._leaderboard = Leaderboard()
        self._admin_gate = AdminGate(DEFAULT_ADMIN_PIN)
        self._timer = QuestionTimer(self.handle_time_expired, timer_factory=timer_factory)
        self._session = GameSession(
            catalog=self._catalog,
            leaderboard=self._leaderboard,
            leaderboard_repository=leaderboard_repository,
            task_runner=self._tasks,
            rng=rng,
            timer=self._timer,
        )
        self._initialized = False

    # --- Initialization ---

    def initialize_data(self) -> None:
        """Populate catalogs from the repositories, falling back to the cache."""
        cached = self._cache.load() if self._cache else CatalogSnapshot()
        with self._lock:
            rounds = self._read_or_fallback("rounds", self._catalog_repository.list_rounds, cached.rounds)
            questions = self._read_or_fallback("questions", self._catalog_repository.list_questions, cached.questions)
            players = self._read_or_fallback("players", self._leaderboard_repository.list_players, cached.leaderboard)
            pin = self._read_or_fallback(
                "admin PIN", self._settings_repository.get_pin, cached.admin_pin or DEFAULT_ADMIN_PIN
            )
            self._catalog.load(rounds, questions)
            self._leaderboard.load(players)
            self._admin_gate.load_pin(pin)
            self._initialized = True
            logger.info(
                "Loaded %d round(s), %d question(s), %d leaderboard entr(ies)",
                len(rounds),
                len(questions),
                len(players),
            )
            self._save_cache()

    def is_initialized(self) -> bool:
        with self._lock:
            return self._initialized

    def shutdown(self) -> None:
        with self._lock:
            self._timer.cancel()
        self._tasks.shutdown(wait=True)

    # --- Game Session Delegation ---

    def set_player(self, name: str) -> Player:
        with self._lock:
            return self._session.set_player(name)

    def select_round(self, round_id: str) -> None:
        with self._lock:
            self._session.select_round(round_id)

    def start_game(self) -> None:
        with self._lock:
            completed_before = self._session.is_game_complete()
            self._session.start_game()
            if self._session.is_game_complete() and not completed_before:
                self._save_cache()

    def select_question(self, question_id: str) -> None:
        with self._lock:
            self._session.select_question(question_id)

    def answer_question(self, answer: str | bool) -> bool | None:
        with self._lock:
            return self._session.answer_question(answer)

    def skip_question(self) -> None:
        with self._lock:
            completed_before = self._session.is_game_complete()
            self._session.skip_question()
            if self._session.is_game_complete() and not completed_before:
                self._save_cache()

    def next_question(self) -> None:
        with self._lock:
            completed_before = self._session.is_game_complete()
            self._session.next_question()
            if self._session.is_game_complete() and not completed_before:
                self._save_cache()

    def end_game(self) -> None:
        with self._lock:
            completed_before = self._session.is_game_complete()
            self._session.end_game()
            if self._session.is_game_complete() and not completed_before:
                self._save_cache()

    def reset_game(self) -> None:
        with self._lock:
            self._session.reset_game()

    def handle_time_expired(self, question_id: str) -> None:
        """Countdown expiry for ``question_id``; behaves as a skip."""
        with self._lock:
            completed_before = self._session.is_game_complete()
            self._session.expire_question(question_id)
            if self._session.is_game_complete() and not completed_before:
                self._save_cache()

    def get_session_snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._session.snapshot()

    # --- Catalog ---

    def get_rounds(self) -> list[Round]:
        with self._lock:
            return self._catalog.get_rounds()

    def get_questions(self) -> list[Question]:
        with self._lock:
            return self._catalog.get_questions()

    def add_round(self, name: str, question_counts: dict[QuestionCategory, int]) -> Round:
        with self._lock:
            local = self._catalog.add_round(name, question_counts)
            self._save_cache()
        self._tasks.submit(
            f"create round {local.name}",
            self._catalog_repository.create_round,
            local,
            on_success=lambda created: self._adopt_round(local.id, created),
        )
        return local

    def delete_round(self, round_id: str) -> bool:
        with self._lock:
            removed = self._catalog.delete_round(round_id)
            self._save_cache()
        self._tasks.submit(f"delete round {round_id}", self._catalog_repository.delete_round, round_id)
        return removed

    def add_question(self, question: Question) -> Question:
        with self._lock:
            local = self._catalog.add_question(question)
            self._save_cache()
        self._submit_question(local)
        return local

    def delete_question(self, question_id: str) -> bool:
        with self._lock:
            removed = self._catalog.delete_question(question_id)
            self._save_cache()
        self._tasks.submit(
            f"delete question {question_id}", self._catalog_repository.delete_question, question_id
        )
        return removed

    def import_question_bank(self, text: str) -> list[Question]:
        """Add every question in a text-format bank, or none if any block is invalid.

        Raises QuestionBankImportError for unparseable text and ValueError for
        questions the catalog rejects.
        """
        questions = parse_question_bank(text)
        with self._lock:
            added = self._catalog.add_questions(questions)
            self._save_cache()
        for local in added:
            self._submit_question(local)
        logger.info("Imported %d question(s)", len(added))
        return added

    def export_question_bank(self) -> str:
        return serialize_questions(self.get_questions())

    # --- Leaderboard ---

    def get_leaderboard(self) -> list[Player]:
        with self._lock:
            return self._leaderboard.entries()

    def get_round_leaderboard(self, round_id: str, limit: int = ROUND_LEADERBOARD_SIZE) -> list[Player]:
        with self._lock:
            return self._leaderboard.top_for_round(round_id, limit)

    def get_leaderboard_stats(self) -> LeaderboardStats:
        with self._lock:
            return self._leaderboard.stats()

    def clear_leaderboard(self) -> None:
        with self._lock:
            self._leaderboard.clear()
            self._save_cache()
        self._tasks.submit("clear leaderboard", self._leaderboard_repository.clear_all)

    # --- Admin gate ---

    def verify_admin_pin(self, pin: str) -> bool:
        with self._lock:
            return self._admin_gate.verify_pin(pin)

    def update_admin_pin(self, old_pin: str, new_pin: str) -> bool:
        with self._lock:
            if not self._admin_gate.update_pin(old_pin, new_pin):
                return False
            self._save_cache()
        self._tasks.submit("update admin PIN", self._settings_repository.set_pin, new_pin)
        return True

    # --- Helpers ---

    def _submit_question(self, local: Question) -> None:
        self._tasks.submit(
            f"create question {local.id}",
            self._catalog_repository.create_question,
            local,
            on_success=lambda created: self._adopt_question(local.id, created),
        )

    def _adopt_round(self, local_id: str, created: Round | None) -> None:
        if created is None:
            logger.warning("Repository did not confirm round %s; keeping local copy", local_id)
            return
        with self._lock:
            self._catalog.adopt_round_id(local_id, created.id)
            self._save_cache()

    def _adopt_question(self, local_id: str, created: Question | None) -> None:
        if created is None:
            logger.warning("Repository did not confirm question %s; keeping local copy", local_id)
            return
        with self._lock:
            self._catalog.adopt_question_id(local_id, created.id)
            self._save_cache()

    @staticmethod
    def _read_or_fallback(label: str, reader, fallback):
        try:
            return reader()
        except Exception:  # noqa: BLE001 - repository errors degrade to the cache
            logger.exception("Could not load %s from the repository; using cached data", label)
            return fallback

    def _save_cache(self) -> None:
        if self._cache is None:
            return
        snapshot = CatalogSnapshot(
            rounds=self._catalog.get_rounds(),
            questions=self._catalog.get_questions(),
            leaderboard=self._leaderboard.entries(),
            admin_pin=self._admin_gate.get_pin(),
        )
        try:
            self._cache.save(snapshot)
        except OSError:
            logger.exception("Could not write catalog cache to %s", self._cache.file_path)
