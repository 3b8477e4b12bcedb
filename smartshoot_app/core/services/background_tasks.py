"""Fire-and-forget execution of repository calls."""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
import logging
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

FailureHook = Callable[[str, BaseException], None]


def log_failure(label: str, error: BaseException) -> None:
    logger.error("Background task '%s' failed", label, exc_info=error)


class BackgroundTaskRunner:
    """Runs repository calls off the caller's thread.

    Session state is always mutated before a task is submitted; the task's
    outcome only ever reaches ``on_success`` or the failure hook.
    """

    def __init__(self, max_workers: int = 2, on_failure: FailureHook = log_failure) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="SmartShootPersist")
        self._on_failure = on_failure

    def submit(
        self,
        label: str,
        func: Callable[..., T],
        *args: Any,
        on_success: Callable[[T], None] | None = None,
    ) -> Future[T]:
        future = self._executor.submit(func, *args)
        future.add_done_callback(lambda done: self._finish(label, done, on_success))
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _finish(self, label: str, future: Future[T], on_success: Callable[[T], None] | None) -> None:
        error = future.exception()
        if error is not None:
            self._on_failure(label, error)
            return
        if on_success is not None:
            try:
                on_success(future.result())
            except Exception as exc:  # noqa: BLE001 - reported through the hook
                self._on_failure(label, exc)


class InlineTaskRunner(BackgroundTaskRunner):
    """Runs tasks synchronously on the caller's thread."""

    def __init__(self, on_failure: FailureHook = log_failure) -> None:
        self._on_failure = on_failure

    def submit(
        self,
        label: str,
        func: Callable[..., T],
        *args: Any,
        on_success: Callable[[T], None] | None = None,
    ) -> Future[T]:
        future: Future[T] = Future()
        try:
            future.set_result(func(*args))
        except Exception as exc:  # noqa: BLE001 - reported through the hook
            future.set_exception(exc)
        self._finish(label, future, on_success)
        return future

    def shutdown(self, wait: bool = True) -> None:
        return None
