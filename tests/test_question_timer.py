"""
Tests for core/services/question_timer.py
"""

from conftest import FakeTimerFactory
from smartshoot_app.core.services.question_timer import QuestionTimer


def _timer():
    expired: list[str] = []
    factory = FakeTimerFactory()
    return QuestionTimer(expired.append, timer_factory=factory), factory, expired


def test_expiry_reports_question_id():
    timer, factory, expired = _timer()
    timer.arm("q1", 30)
    factory.last.fire()
    assert expired == ["q1"]
    assert timer.is_armed() is False


def test_rearming_cancels_previous_countdown():
    timer, factory, expired = _timer()
    timer.arm("q1", 30)
    first = factory.last
    timer.arm("q2", 15)

    assert first.cancelled is True
    first.fire()
    assert expired == []

    factory.last.fire()
    assert expired == ["q2"]


def test_cancel_invalidates_late_callback():
    timer, factory, expired = _timer()
    timer.arm("q1", 30)
    timer.cancel()
    factory.last.fire()
    assert expired == []


def test_non_positive_limit_is_not_timed():
    timer, factory, expired = _timer()
    timer.arm("q1", 0)
    assert factory.timers == []
    assert timer.is_armed() is False


def test_generation_advances_on_every_arm_and_cancel():
    timer, _, _ = _timer()
    start = timer.get_generation()
    timer.arm("q1", 10)
    timer.cancel()
    assert timer.get_generation() == start + 2
