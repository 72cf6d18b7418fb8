import heapq
import itertools
from abc import ABC, abstractmethod


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self):
        raise NotImplementedError

    @property
    @abstractmethod
    def active(self):
        raise NotImplementedError


class Scheduler(ABC):
    """Runs callbacks later on the thread that owns the engine."""

    @abstractmethod
    def call_later(self, delay_ms, callback):
        """Schedule ``callback()`` after ``delay_ms`` and return a TimerHandle."""
        raise NotImplementedError


class _ManualTimer(TimerHandle):
    def __init__(self, due_ms, callback):
        self.due_ms = due_ms
        self.callback = callback
        self._active = True

    def cancel(self):
        self._active = False

    @property
    def active(self):
        return self._active

    def fire(self):
        if not self._active:
            return
        self._active = False
        self.callback()


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler; time only moves when ``advance`` is called."""

    def __init__(self):
        self.now_ms = 0
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay_ms, callback):
        timer = _ManualTimer(self.now_ms + max(0, int(delay_ms)), callback)
        heapq.heappush(self._queue, (timer.due_ms, next(self._seq), timer))
        return timer

    @property
    def pending(self):
        return sum(1 for _due, _seq, timer in self._queue if timer.active)

    def advance(self, ms):
        target = self.now_ms + max(0, int(ms))
        while self._queue and self._queue[0][0] <= target:
            due, _seq, timer = heapq.heappop(self._queue)
            self.now_ms = due
            timer.fire()
        self.now_ms = target

    def run_until_idle(self, limit=10000):
        fired = 0
        while self._queue:
            due, _seq, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self.now_ms = max(self.now_ms, due)
            timer.fire()
            fired += 1
            if fired >= limit:
                raise RuntimeError("Scheduler did not settle; timers keep rescheduling")
        return fired
