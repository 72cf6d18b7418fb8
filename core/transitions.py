"""Single-flight page-turn state machine.

Flat ("2d") mode:    idle -> turning -> [callback] -> idle
Layered ("3d") mode: idle -> lifting -> flipping -> [callback] -> settling -> idle

The completion callback always runs while the machine is still locked, so a
request arriving in the same tick never observes stale content with the lock
already released. Requests made while locked are dropped, not queued.
"""

import logging
from enum import Enum

log = logging.getLogger(__name__)

FLAT_TURN_MS = 600
LIFT_MS = 200
FLIP_MS = 500
SETTLE_MS = 50


class TransitionMode(str, Enum):
    FLAT = "2d"
    LAYERED = "3d"

    @classmethod
    def parse(cls, value, default=None):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            if default is not None:
                return default
            raise


class TransitionPhase(str, Enum):
    IDLE = "idle"
    TURNING = "turning"
    LIFTING = "lifting"
    FLIPPING = "flipping"
    SETTLING = "settling"


class Direction(str, Enum):
    FORWARD = "next"
    BACKWARD = "prev"


NEXT_PHASE = {
    TransitionMode.FLAT: {
        TransitionPhase.IDLE: TransitionPhase.TURNING,
        TransitionPhase.TURNING: TransitionPhase.IDLE,
    },
    TransitionMode.LAYERED: {
        TransitionPhase.IDLE: TransitionPhase.LIFTING,
        TransitionPhase.LIFTING: TransitionPhase.FLIPPING,
        TransitionPhase.FLIPPING: TransitionPhase.SETTLING,
        TransitionPhase.SETTLING: TransitionPhase.IDLE,
    },
}

# Phase whose exit runs the completion callback.
CALLBACK_PHASE = {
    TransitionMode.FLAT: TransitionPhase.TURNING,
    TransitionMode.LAYERED: TransitionPhase.FLIPPING,
}

PHASE_DURATION_MS = {
    TransitionPhase.TURNING: FLAT_TURN_MS,
    TransitionPhase.LIFTING: LIFT_MS,
    TransitionPhase.FLIPPING: FLIP_MS,
    TransitionPhase.SETTLING: SETTLE_MS,
}


class TransitionStateMachine:
    def __init__(self, scheduler, mode=TransitionMode.FLAT, on_phase_changed=None, on_mode_changed=None):
        self.scheduler = scheduler
        self.mode = TransitionMode(mode)
        self.phase = TransitionPhase.IDLE
        self.direction = None
        self.on_phase_changed = on_phase_changed
        self.on_mode_changed = on_mode_changed
        self._on_complete = None
        self._timer = None
        self._step_token = 0

    @property
    def locked(self):
        return self.phase is not TransitionPhase.IDLE

    def request(self, direction, on_complete):
        """Start a transition; returns False if one is already in flight."""
        if self.locked:
            log.debug("Transition %s dropped: %s in progress", Direction(direction).value, self.phase.value)
            return False
        self.direction = Direction(direction)
        self._on_complete = on_complete
        self._enter(NEXT_PHASE[self.mode][TransitionPhase.IDLE])
        return True

    def advance(self):
        """Run one phase step immediately; a no-op while idle."""
        if not self.locked:
            return
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        leaving = self.phase
        target = NEXT_PHASE[self.mode][leaving]
        if leaving is CALLBACK_PHASE[self.mode]:
            callback, self._on_complete = self._on_complete, None
            if callback is not None:
                try:
                    callback()
                except Exception:
                    log.exception("Page-turn completion failed; returning to idle")
                    target = TransitionPhase.IDLE
        self._enter(target)

    def run_to_idle(self):
        while self.locked:
            self.advance()

    def set_mode(self, mode):
        """Switch presentation mode; only allowed while idle."""
        mode = TransitionMode(mode)
        if self.locked:
            log.debug("Mode switch to %s refused during %s", mode.value, self.phase.value)
            return False
        changed = mode is not self.mode
        self.mode = mode
        self.phase = TransitionPhase.IDLE
        if changed and self.on_mode_changed:
            self.on_mode_changed(mode)
        return True

    def _enter(self, phase):
        self.phase = phase
        self._step_token += 1
        if phase is TransitionPhase.IDLE:
            direction, self.direction = self.direction, None
            self._on_complete = None
        else:
            direction = self.direction
            token = self._step_token
            self._timer = self.scheduler.call_later(
                PHASE_DURATION_MS[phase], lambda: self._on_timer(token)
            )
        if self.on_phase_changed:
            self.on_phase_changed(phase, direction)

    def _on_timer(self, token):
        if token != self._step_token:
            return
        self._timer = None
        self.advance()
