"""Data models for processes, monitor targets and inhibitor handles"""

import subprocess
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ProcessRef:
    """Snapshot of one running process, as shown in the selection table"""
    pid: int
    uid: int
    ppid: int
    cpu: str
    start_time: str
    terminal: str
    cpu_time: str
    command: str

    def table_row(self, index: int) -> list:
        """Columns for the numbered selection table"""
        return [
            f"{index})",
            str(self.uid),
            str(self.pid),
            str(self.ppid),
            self.cpu,
            self.start_time,
            self.terminal,
            self.cpu_time,
            self.command,
        ]


@dataclass(frozen=True)
class MonitorTarget:
    """A resolved process that is being watched"""
    pid: int
    name: str

    def display_name(self) -> str:
        return f"{self.pid} ({self.name})"


@dataclass
class InhibitorHandle:
    """Tracks the background process that keeps the system awake"""
    pid: Optional[int]
    prevents_display_sleep: bool
    process: Optional[subprocess.Popen] = field(default=None, repr=False, compare=False)

    @property
    def active(self) -> bool:
        return self.pid is not None

    def clear(self):
        """Forget the background process (after it has been stopped)"""
        self.pid = None
        self.process = None
