"""Per-question countdown that fires a skip when time runs out."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Lock, Timer
from typing import Protocol

logger = logging.getLogger(__name__)


class CancellableTimer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], CancellableTimer]


def _thread_timer(seconds: float, callback: Callable[[], None]) -> CancellableTimer:
    timer = Timer(seconds, callback)
    timer.daemon = True
    return timer


class QuestionTimer:
    """Arms one countdown at a time and ignores expiries from stale arms.

    Every ``arm`` or ``cancel`` bumps a generation counter. The expiry callback
    captures the generation it was armed with and only reaches ``on_expire``
    when that generation is still current, so a late callback can never skip a
    question selected after it was armed.
    """

    def __init__(
        self,
        on_expire: Callable[[str], None],
        timer_factory: TimerFactory | None = None,
    ) -> None:
        self._on_expire = on_expire
        self._timer_factory = timer_factory or _thread_timer
        self._lock = Lock()
        self._generation: int = 0
        self._pending: CancellableTimer | None = None
        self._question_id: str | None = None

    def arm(self, question_id: str, seconds: int) -> None:
        with self._lock:
            self._invalidate()
            if seconds <= 0:
                return
            generation = self._generation
            self._question_id = question_id
            self._pending = self._timer_factory(
                float(seconds), lambda: self._expire(generation, question_id)
            )
            self._pending.start()

    def cancel(self) -> None:
        with self._lock:
            self._invalidate()

    def is_armed(self) -> bool:
        with self._lock:
            return self._pending is not None

    def get_generation(self) -> int:
        with self._lock:
            return self._generation

    def _invalidate(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
        self._pending = None
        self._question_id = None

    def _expire(self, generation: int, question_id: str) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Ignoring stale timer for question %s", question_id)
                return
            self._pending = None
            self._question_id = None
        logger.info("Time expired for question %s", question_id)
        self._on_expire(question_id)
