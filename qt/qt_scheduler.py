from core.scheduler import Scheduler, TimerHandle
from qt.qt_compat import QtCore


class QtTimerHandle(TimerHandle):
    def __init__(self, timer: QtCore.QTimer):
        self._timer = timer

    def cancel(self):
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    @property
    def active(self):
        return self._timer is not None and self._timer.isActive()

    def _fired(self):
        if self._timer is not None:
            self._timer.deleteLater()
        self._timer = None


class QtScheduler(Scheduler):
    """Runs engine timers on the Qt event loop via single-shot QTimers."""

    def __init__(self, parent=None):
        self.parent = parent

    def call_later(self, delay_ms, callback):
        timer = QtCore.QTimer(self.parent)
        timer.setSingleShot(True)
        handle = QtTimerHandle(timer)

        def on_timeout():
            handle._fired()
            callback()

        timer.timeout.connect(on_timeout)
        timer.start(max(0, int(delay_ms)))
        return handle
