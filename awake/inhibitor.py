"""Starts and stops the background process that keeps the system awake"""

import os
import signal
import shutil
import platform
import subprocess
from typing import List, Optional

from .models import InhibitorHandle
from .errors import InhibitorStopFailure, InhibitorUnavailable
from .config import config
from . import ui


class SleepInhibitor:
    """
    Prevents the OS from going to sleep while something runs.
    Supports macOS (caffeinate) and Linux (systemd-inhibit).
    """

    def __init__(self, stop_timeout: Optional[float] = None, reason: str = "Keeping the system awake"):
        self.stop_timeout = config.stop_timeout_seconds if stop_timeout is None else stop_timeout
        self.reason = reason

    def build_command(self, prevent_display_sleep: bool) -> List[str]:
        """Command line for the current platform"""
        system = platform.system()

        if system == "Darwin":
            # -i idle sleep, -m disk sleep, -s sleep on AC power, -d display sleep
            flags = "-imsd" if prevent_display_sleep else "-ims"
            return ["caffeinate", flags]

        if system == "Linux":
            what = "sleep:idle" if prevent_display_sleep else "sleep"
            # The lock is held for as long as 'sleep infinity' runs
            return [
                "systemd-inhibit",
                f"--what={what}",
                "--who=americano",
                f"--why={self.reason}",
                "--mode=block",
                "sleep", "infinity"
            ]

        raise InhibitorUnavailable(f"Sleep prevention is not supported on {system or 'this platform'}")

    def start(self, prevent_display_sleep: bool = False) -> InhibitorHandle:
        """
        Start the keep-awake process in the background

        Args:
            prevent_display_sleep: Also keep the display on

        Returns:
            Handle to pass to stop()

        Raises:
            InhibitorUnavailable: no inhibitor tool could be started
        """
        cmd = self.build_command(prevent_display_sleep)

        if shutil.which(cmd[0]) is None:
            raise InhibitorUnavailable(f"Sleep inhibitor tool not found: {cmd[0]}")

        try:
            # A new session keeps Ctrl+C in the terminal from reaching it; we stop it ourselves
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True
            )
        except OSError as e:
            raise InhibitorUnavailable(f"Could not start sleep inhibitor: {e}")

        handle = InhibitorHandle(
            pid=process.pid,
            prevents_display_sleep=prevent_display_sleep,
            process=process
        )

        if prevent_display_sleep:
            ui.print_info(f"Preventing system and display sleep ({cmd[0]} PID={handle.pid})")
        else:
            ui.print_info(f"Preventing system sleep, allowing display sleep ({cmd[0]} PID={handle.pid})")

        return handle

    def stop(self, handle: InhibitorHandle) -> bool:
        """
        Stop the keep-awake process

        Safe to call more than once: a handle that was already stopped is
        left alone. A process that exited on its own is reported, not raised.

        Returns:
            True if a running inhibitor was terminated
        """
        if not handle.active:
            return False

        pid = handle.pid
        try:
            self._terminate(handle)
        except InhibitorStopFailure as e:
            ui.print_warning(str(e))
            return False
        finally:
            handle.clear()

        ui.print_info(f"Sleep prevention stopped (killed PID={pid})")
        return True

    def _terminate(self, handle: InhibitorHandle):
        process = handle.process

        if process is not None and process.poll() is not None:
            raise InhibitorStopFailure(handle.pid)

        try:
            os.kill(handle.pid, signal.SIGTERM)
        except ProcessLookupError:
            raise InhibitorStopFailure(handle.pid)

        if process is None:
            return

        try:
            process.wait(timeout=self.stop_timeout)
        except subprocess.TimeoutExpired:
            # If it refuses to die, kill it forcefully
            process.kill()
            process.wait()
