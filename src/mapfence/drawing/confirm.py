"""Two-step confirmation for destructive actions.

The first press arms the action; a second press while armed executes it.
Losing focus disarms, and so does an optional timeout.

States:
- DISARMED: pressing arms
- ARMED: pressing confirms and returns to DISARMED
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class ConfirmState(Enum):
    """Confirmation states."""

    DISARMED = "disarmed"
    ARMED = "armed"


@dataclass
class ConfirmAction:
    """Arm-then-confirm state machine.

    Usage:
        confirm = ConfirmAction()
        if confirm.press():
            delete()  # only on the second press

    Attributes:
        timeout_seconds: Seconds an armed action stays armed; 0 disables
            the timeout so only ``blur`` disarms.
        clock: Monotonic time source.
    """

    timeout_seconds: float = 0.0
    clock: Callable[[], float] = time.monotonic

    _state: ConfirmState = field(default=ConfirmState.DISARMED, init=False)
    _armed_at: float | None = field(default=None, init=False)

    @property
    def state(self) -> ConfirmState:
        """Current state, applying any elapsed timeout."""
        if (
            self._state == ConfirmState.ARMED
            and self.timeout_seconds > 0
            and self._armed_at is not None
            and self.clock() - self._armed_at >= self.timeout_seconds
        ):
            self.disarm()
        return self._state

    @property
    def is_armed(self) -> bool:
        return self.state == ConfirmState.ARMED

    def press(self) -> bool:
        """Handle a press. Returns True when the action should run now."""
        if self.state == ConfirmState.ARMED:
            self.disarm()
            return True
        self._state = ConfirmState.ARMED
        self._armed_at = self.clock()
        return False

    def blur(self) -> None:
        """Focus left the control."""
        self.disarm()

    def disarm(self) -> None:
        self._state = ConfirmState.DISARMED
        self._armed_at = None
