"""Error types raised while resolving, monitoring and keeping the system awake"""

import signal
from typing import Optional


class AmericanoError(Exception):
    """Base error; exit_code is what the CLI exits with"""

    exit_code = 1


class NoMatch(AmericanoError):
    """A search term matched no running process"""

    def __init__(self, term: str):
        super().__init__(f"No process found matching '{term}'")
        self.term = term


class InvalidSelection(AmericanoError):
    """A numeric choice outside the presented range"""

    def __init__(self, choice: Optional[str], count: int, message: Optional[str] = None):
        super().__init__(message or f"Invalid selection. Please enter a number between 1 and {count}")
        self.choice = choice
        self.count = count


class SelectionExhausted(InvalidSelection):
    """Input closed before a process was selected"""

    def __init__(self, count: int):
        super().__init__(None, count, "No selection made (input closed)")


class SelectionCancelled(AmericanoError):
    """User cancelled the selection prompt"""

    exit_code = 0

    def __init__(self):
        super().__init__("Selection cancelled")


class ProcessNotRunning(AmericanoError):
    def __init__(self, pid: int):
        super().__init__(f"Process {pid} is not running")
        self.pid = pid


class InhibitorStopFailure(AmericanoError):
    """The sleep inhibitor had already exited when we tried to stop it"""

    def __init__(self, pid: int):
        super().__init__(f"Failed to stop PID {pid}, it may have already exited")
        self.pid = pid


class InhibitorUnavailable(AmericanoError):
    """No way to prevent sleep on this system"""


class ArgumentError(AmericanoError):
    exit_code = 2


class Interrupted(AmericanoError):
    """A termination signal arrived while keeping the system awake"""

    def __init__(self, signum: int):
        try:
            name = signal.Signals(signum).name
        except ValueError:
            name = f"signal {signum}"
        super().__init__(f"Interrupted by {name}")
        self.signum = signum
        self.exit_code = 128 + signum
