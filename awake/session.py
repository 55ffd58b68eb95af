"""Keep-awake session: resolve a target, inhibit sleep, wait for it to exit"""

import signal
from contextlib import contextmanager
from typing import Optional

from .models import MonitorTarget, InhibitorHandle
from .processes import ProcessQuery, process_query
from .selector import ProcessSelector, is_numeric
from .inhibitor import SleepInhibitor
from .monitor import ProcessMonitor
from .errors import Interrupted, ProcessNotRunning
from .config import config
from . import ui


TRAPPED_SIGNALS = ('SIGINT', 'SIGTERM', 'SIGHUP')


class SignalTrap:
    """
    Turns termination signals into Interrupted exceptions

    Only the first signal raises; later ones are ignored so cleanup can
    finish. Inside hold() a signal is remembered and raised on release.
    """

    def __init__(self):
        self.signum: Optional[int] = None
        self._held = False
        self._pending = False
        self._previous = {}

    def install(self):
        for name in TRAPPED_SIGNALS:
            signum = getattr(signal, name, None)
            if signum is not None:
                self._previous[signum] = signal.signal(signum, self._handle)

    def restore(self):
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous = {}

    @contextmanager
    def hold(self):
        """Defer signals until the block finishes"""
        self._held = True
        try:
            yield
        finally:
            self._held = False
        if self._pending:
            self._pending = False
            raise Interrupted(self.signum)

    def _handle(self, signum, frame):
        if self.signum is not None:
            return
        self.signum = signum
        if self._held:
            self._pending = True
        else:
            raise Interrupted(signum)


@contextmanager
def trap_signals():
    """Install the signal trap for the duration of the block"""
    trap = SignalTrap()
    trap.install()
    try:
        yield trap
    finally:
        trap.restore()


@contextmanager
def keep_awake(inhibitor: SleepInhibitor, prevent_display_sleep: bool, trap: Optional[SignalTrap] = None):
    """
    Hold a sleep inhibitor for the duration of the block

    The inhibitor is stopped on every way out of the block, including
    Interrupted raised by a signal.
    """
    handle: Optional[InhibitorHandle] = None
    try:
        if trap is not None:
            with trap.hold():
                handle = inhibitor.start(prevent_display_sleep)
        else:
            handle = inhibitor.start(prevent_display_sleep)
        yield handle
    finally:
        if handle is not None:
            if trap is not None:
                with trap.hold():
                    _release(inhibitor, handle)
            else:
                _release(inhibitor, handle)


def _release(inhibitor: SleepInhibitor, handle: InhibitorHandle):
    inhibitor.stop(handle)
    ui.print_success("System sleep behavior restored")


class MonitorSession:
    """Keeps the system awake while a single target process runs"""

    def __init__(
        self,
        query: Optional[ProcessQuery] = None,
        selector: Optional[ProcessSelector] = None,
        inhibitor: Optional[SleepInhibitor] = None,
        monitor: Optional[ProcessMonitor] = None,
        interval_seconds: Optional[int] = None
    ):
        self.query = query or process_query
        self.selector = selector or ProcessSelector(self.query)
        self.inhibitor = inhibitor or SleepInhibitor(reason="Waiting for a process to exit")
        self.monitor = monitor or ProcessMonitor(self.query)
        self.interval_seconds = interval_seconds or config.poll_interval_seconds

    def resolve_pid(self, argument: str) -> int:
        """
        Turn a pid or search term into a pid

        Digit-only arguments are used as-is and never searched for.
        """
        argument = argument.strip()
        if is_numeric(argument):
            return int(argument)

        return self.selector.resolve(argument).pid

    def resolve_target(self, argument: str) -> MonitorTarget:
        """
        Resolve an argument to a target that is running right now

        Raises:
            NoMatch: search term matched nothing
            ProcessNotRunning: the pid is not alive
        """
        pid = self.resolve_pid(argument)

        if not self.query.is_alive(pid):
            raise ProcessNotRunning(pid)

        return MonitorTarget(pid=pid, name=self.query.name_of(pid))

    def run(self, argument: str, prevent_display_sleep: bool = False) -> int:
        """
        Keep the system awake until the target process exits

        Args:
            argument: Pid or search term
            prevent_display_sleep: Also keep the display on

        Returns:
            Number of ticks reported while the target ran

        Raises:
            Interrupted: a termination signal arrived while monitoring
        """
        target = self.resolve_target(argument)

        with trap_signals() as trap:
            with keep_awake(self.inhibitor, prevent_display_sleep, trap):
                ui.print_info(f"Monitoring process {target.display_name()}, preventing sleep")
                try:
                    return self.monitor.watch(
                        target,
                        self.interval_seconds,
                        on_tick=self._report_tick,
                        on_exit=self._report_exit
                    )
                except Interrupted as e:
                    ui.print_warning(f"{e}, stopping")
                    raise

    def _report_tick(self, target: MonitorTarget, ticks: int, elapsed: float):
        ui.print_event(f"Process {target.display_name()} is still running ({ui.format_elapsed(elapsed)} elapsed)")

    def _report_exit(self, target: MonitorTarget, elapsed: float):
        ui.print_event(f"Process {target.display_name()} has exited")
