"""Process table queries: search by command line, liveness and names"""

import os
import re
import time
from datetime import datetime
from typing import List, Optional, Set

import psutil

from .models import ProcessRef
from .errors import NoMatch, ProcessNotRunning
from .config import config


PROCESS_ATTRS = ['pid', 'ppid', 'uids', 'name', 'cmdline', 'create_time', 'terminal', 'cpu_times']


class ProcessQuery:
    """Looks up running processes through psutil"""

    def __init__(self, ignore_case: Optional[bool] = None):
        self.ignore_case = config.ignore_case if ignore_case is None else ignore_case

    def search(self, term: str) -> List[ProcessRef]:
        """
        Find processes whose full command line matches a search term

        The term is a regular expression searched anywhere in the command
        line, arguments included, like `pgrep -f`. Terms that do not compile
        are matched literally. americano itself and its parents are skipped.

        Args:
            term: Search term

        Returns:
            Matching processes in process table order

        Raises:
            NoMatch: nothing matched
        """
        pattern = self._compile(term)
        excluded = self._own_lineage()
        matches = []

        for proc in psutil.process_iter(PROCESS_ATTRS, ad_value=None):
            try:
                info = proc.info
                if info['pid'] in excluded:
                    continue

                command = self._command_line(info)
                if not pattern.search(command):
                    continue

                matches.append(self._to_ref(info, command))
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue

        if not matches:
            raise NoMatch(term)

        return matches

    def is_alive(self, pid: int) -> bool:
        """Check whether a pid names a running (non-zombie) process"""
        if pid <= 0:
            return False

        try:
            return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            # It exists, we just may not inspect it
            return True

    def name_of(self, pid: int) -> str:
        """Short command name of a process"""
        try:
            return psutil.Process(pid).name()
        except psutil.NoSuchProcess:
            raise ProcessNotRunning(pid)
        except psutil.AccessDenied:
            return "?"

    def _compile(self, term: str):
        flags = re.IGNORECASE if self.ignore_case else 0
        try:
            return re.compile(term, flags)
        except re.error:
            return re.compile(re.escape(term), flags)

    def _own_lineage(self) -> Set[int]:
        """Our own pid and our ancestors, whose command lines contain the term"""
        pids = {os.getpid()}
        try:
            pids.update(parent.pid for parent in psutil.Process().parents())
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            pids.add(os.getppid())
        return pids

    @staticmethod
    def _command_line(info: dict) -> str:
        cmdline = info.get('cmdline')
        if cmdline:
            return " ".join(cmdline)
        return info.get('name') or ""

    def _to_ref(self, info: dict, command: str) -> ProcessRef:
        uids = info.get('uids')
        return ProcessRef(
            pid=info['pid'],
            uid=uids.real if uids is not None else -1,
            ppid=info.get('ppid') or 0,
            cpu=format_cpu_percent(info.get('cpu_times'), info.get('create_time')),
            start_time=format_start_time(info.get('create_time')),
            terminal=format_terminal(info.get('terminal')),
            cpu_time=format_cpu_time(info.get('cpu_times')),
            command=command
        )


def format_cpu_percent(cpu_times, create_time: Optional[float], now: Optional[float] = None) -> str:
    """Average CPU utilisation over the process lifetime, like the ps C column"""
    if cpu_times is None or not create_time:
        return "-"

    wall = (now or time.time()) - create_time
    if wall <= 0:
        return "0"

    return str(int(round((cpu_times.user + cpu_times.system) / wall * 100)))


def format_start_time(create_time: Optional[float], today: Optional[datetime] = None) -> str:
    """HH:MM for processes started today, MonDD otherwise"""
    if not create_time:
        return "-"

    started = datetime.fromtimestamp(create_time)
    today = today or datetime.now()

    if started.date() == today.date():
        return started.strftime('%H:%M')
    return started.strftime('%b%d')


def format_terminal(terminal: Optional[str]) -> str:
    if not terminal:
        return "??"
    if terminal.startswith('/dev/'):
        return terminal[len('/dev/'):]
    return terminal


def format_cpu_time(cpu_times) -> str:
    """Accumulated CPU time as M:SS.ss"""
    if cpu_times is None:
        return "-"

    total = cpu_times.user + cpu_times.system
    minutes, seconds = divmod(total, 60)
    return f"{int(minutes)}:{seconds:05.2f}"


# Global process query instance
process_query = ProcessQuery()
