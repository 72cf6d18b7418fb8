import pytest

from core.scheduler import ManualScheduler


def test_manual_scheduler_fires_in_due_order():
    scheduler = ManualScheduler()
    fired = []

    scheduler.call_later(300, lambda: fired.append("late"))
    scheduler.call_later(100, lambda: fired.append("early"))
    scheduler.call_later(100, lambda: fired.append("early-2"))

    scheduler.advance(99)
    assert fired == []

    scheduler.advance(1)
    assert fired == ["early", "early-2"]

    scheduler.advance(500)
    assert fired == ["early", "early-2", "late"]
    assert scheduler.now_ms == 600


def test_cancelled_timer_never_fires():
    scheduler = ManualScheduler()
    fired = []

    handle = scheduler.call_later(50, lambda: fired.append(True))
    handle.cancel()
    scheduler.advance(100)

    assert fired == []
    assert handle.active is False
    assert scheduler.pending == 0


def test_callbacks_can_schedule_follow_up_timers():
    scheduler = ManualScheduler()
    fired = []

    def first():
        fired.append(scheduler.now_ms)
        scheduler.call_later(20, lambda: fired.append(scheduler.now_ms))

    scheduler.call_later(10, first)
    scheduler.advance(30)

    assert fired == [10, 30]


def test_run_until_idle_detects_runaway_rescheduling():
    scheduler = ManualScheduler()

    def again():
        scheduler.call_later(1, again)

    scheduler.call_later(1, again)
    with pytest.raises(RuntimeError):
        scheduler.run_until_idle(limit=25)
