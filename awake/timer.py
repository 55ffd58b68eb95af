"""Fixed-duration keep-awake countdown"""

import math
import time
from typing import Callable, Optional

from .inhibitor import SleepInhibitor
from .session import trap_signals, keep_awake
from .errors import ArgumentError, Interrupted
from .config import config
from . import ui


class CountdownTimer:
    """Keeps the system awake for a number of minutes"""

    def __init__(
        self,
        inhibitor: Optional[SleepInhibitor] = None,
        interval_seconds: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic
    ):
        self.inhibitor = inhibitor or SleepInhibitor(reason="Timer running")
        self.interval_seconds = interval_seconds or config.timer_interval_seconds
        self._sleep = sleep
        self._clock = clock

    def run(self, minutes: int, prevent_display_sleep: bool = False) -> int:
        """
        Keep the system awake for `minutes` minutes

        Returns:
            Number of progress reports printed

        Raises:
            ArgumentError: minutes is not positive
            Interrupted: a termination signal arrived before the timer ran out
        """
        if minutes <= 0:
            raise ArgumentError(f"Minutes must be a positive number, got {minutes}")

        with trap_signals() as trap:
            with keep_awake(self.inhibitor, prevent_display_sleep, trap):
                ui.print_info(f"Preventing sleep for {minutes} minutes")
                try:
                    return self._countdown(minutes * 60)
                except Interrupted as e:
                    ui.print_warning(f"{e}, stopping")
                    raise

    def _countdown(self, total_seconds: float) -> int:
        deadline = self._clock() + total_seconds
        reports = 0

        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                ui.print_event("Timer completed")
                return reports

            ui.print_event(f"{minutes_left(remaining)} minutes remaining")
            reports += 1
            self._sleep(min(self.interval_seconds, remaining))


def minutes_left(remaining_seconds: float) -> int:
    """Whole minutes left, rounded up so the last minute reads as 1"""
    return max(1, math.ceil(remaining_seconds / 60))
