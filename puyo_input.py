"""Held-key handling: DAS/ARR auto-shift and soft drop, issued straight to the engine"""
from dataclasses import dataclass

from puyo_config import CONFIG


@dataclass
class HeldKeys:
    left: bool = False
    right: bool = False
    down: bool = False


class ShiftRepeat:
    """Auto-shift timer for one horizontal direction at a time."""

    def __init__(self):
        self.reset()

    def reset(self):
        self.direction = 0
        self.held_ms = 0
        self.since_repeat = 0
        self.fired = False

    def update(self, dt: int, left: bool, right: bool) -> int:
        """Returns -1/0/+1: the column shift due this frame."""
        direction = (1 if right else 0) - (1 if left else 0)
        if direction != self.direction:
            self.reset()
            self.direction = direction
        if not self.direction:
            return 0
        self.held_ms += dt
        if not self.fired:
            self.fired = True
            return self.direction
        if self.held_ms < CONFIG["DAS_MS"]:
            return 0
        if CONFIG["ARR_MS"] == 0:
            return self.direction
        self.since_repeat += dt
        if self.since_repeat < CONFIG["ARR_MS"]:
            return 0
        self.since_repeat = 0
        return self.direction


class InputController:
    """Turns the held-key state into engine commands once per frame."""

    def __init__(self, engine):
        self.engine = engine
        self.shift = ShiftRepeat()

    def reset(self):
        self.shift.reset()
        self.engine.set_fall_multiplier(1)

    def update(self, dt: int, keys: HeldKeys) -> int:
        """Applies soft drop and auto-shift; returns the shift that actually happened."""
        self.engine.set_fall_multiplier(CONFIG["FAST_FALL_MULT"] if keys.down else 1)
        step = self.shift.update(dt, keys.left, keys.right)
        if step < 0 and self.engine.move_left():
            return -1
        if step > 0 and self.engine.move_right():
            return 1
        return 0
