"""Liveness polling for a monitored process"""

import time
from typing import Callable, Optional

from .models import MonitorTarget
from .processes import ProcessQuery, process_query


TickCallback = Callable[[MonitorTarget, int, float], None]
ExitCallback = Callable[[MonitorTarget, float], None]


class ProcessMonitor:
    """Polls a process at a fixed interval until it exits"""

    def __init__(
        self,
        query: Optional[ProcessQuery] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic
    ):
        self.query = query or process_query
        self._sleep = sleep
        self._clock = clock

    def watch(
        self,
        target: MonitorTarget,
        interval_seconds: int,
        on_tick: TickCallback,
        on_exit: ExitCallback
    ) -> int:
        """
        Block until the target process exits

        Liveness is checked again after every sleep and a tick is only
        reported for a process that is still there. A pid that never
        existed gives no ticks.

        Args:
            target: Process to watch
            interval_seconds: Seconds between checks
            on_tick: Called as on_tick(target, ticks, elapsed_seconds) while alive
            on_exit: Called once as on_exit(target, elapsed_seconds) when gone

        Returns:
            Number of ticks reported
        """
        started = self._clock()
        ticks = 0

        alive = self.query.is_alive(target.pid)
        while alive:
            self._sleep(interval_seconds)
            alive = self.query.is_alive(target.pid)
            if alive:
                ticks += 1
                on_tick(target, ticks, self._clock() - started)

        on_exit(target, self._clock() - started)
        return ticks
