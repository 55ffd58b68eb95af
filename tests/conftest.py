"""Shared fixtures: fake process tables, inhibitors and subprocesses."""

import re
import subprocess
from types import SimpleNamespace

import pytest

from awake import inhibitor as inhibitor_module
from awake.errors import NoMatch
from awake.models import InhibitorHandle, ProcessRef


def make_ref(pid, command, uid=501, ppid=1):
    return ProcessRef(
        pid=pid,
        uid=uid,
        ppid=ppid,
        cpu="0",
        start_time="10:15",
        terminal="ttys001",
        cpu_time="0:00.12",
        command=command,
    )


class FakeProcessQuery:
    """In-memory process table.

    `alive` maps a pid to a bool or to a list of successive answers; a list
    that runs out reads as "exited".
    """

    def __init__(self, processes=(), alive=None, names=None):
        self.processes = list(processes)
        self.alive = dict(alive or {})
        self.names = dict(names or {})
        self.searches = []
        self.liveness_checks = []

    def search(self, term):
        self.searches.append(term)
        matches = [p for p in self.processes if re.search(term, p.command)]
        if not matches:
            raise NoMatch(term)
        return matches

    def is_alive(self, pid):
        self.liveness_checks.append(pid)
        state = self.alive.get(pid, False)
        if isinstance(state, list):
            return state.pop(0) if state else False
        return state

    def name_of(self, pid):
        return self.names.get(pid, "proc")


class FakeInhibitor:
    """Records start/stop calls instead of launching anything."""

    def __init__(self, *args, **kwargs):
        self.events = []
        self.handles = []

    def start(self, prevent_display_sleep=False):
        handle = InhibitorHandle(pid=9999, prevents_display_sleep=prevent_display_sleep)
        self.handles.append(handle)
        self.events.append(("start", prevent_display_sleep))
        return handle

    def stop(self, handle):
        if not handle.active:
            return False
        self.events.append(("stop", handle.pid))
        handle.clear()
        return True


def scripted(*answers):
    """Build an `ask` callable that replays answers; exceptions are raised.

    Once the script runs out it behaves like closed input (EOFError).
    """
    queue = list(answers)
    prompts = []

    def ask(count):
        prompts.append(count)
        if not queue:
            raise EOFError
        answer = queue.pop(0)
        if isinstance(answer, BaseException) or (isinstance(answer, type) and issubclass(answer, BaseException)):
            raise answer
        return answer

    ask.prompts = prompts
    return ask


class FakePopen:
    instances = []

    def __init__(self, cmd, **kwargs):
        self.cmd = cmd
        self.kwargs = kwargs
        self.pid = 4242 + len(FakePopen.instances)
        self.returncode = None
        self.hang = False
        self.killed = False
        self.wait_timeouts = []
        FakePopen.instances.append(self)

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        self.wait_timeouts.append(timeout)
        if self.hang and not self.killed:
            raise subprocess.TimeoutExpired(self.cmd, timeout)
        self.returncode = -15
        return self.returncode

    def kill(self):
        self.killed = True


@pytest.fixture
def fake_query():
    return FakeProcessQuery()


@pytest.fixture
def fake_inhibitor():
    return FakeInhibitor()


@pytest.fixture
def darwin_tools(monkeypatch):
    """Pretend to be on macOS with caffeinate installed; record signals sent."""
    FakePopen.instances = []
    kills = []

    def fake_kill(pid, signum):
        kills.append((pid, signum))

    monkeypatch.setattr(inhibitor_module.platform, "system", lambda: "Darwin")
    monkeypatch.setattr(inhibitor_module.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(inhibitor_module.subprocess, "Popen", FakePopen)
    monkeypatch.setattr(inhibitor_module.os, "kill", fake_kill)

    return SimpleNamespace(popens=FakePopen.instances, kills=kills)
