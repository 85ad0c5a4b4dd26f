from __future__ import annotations

import logging
import subprocess
import time
from typing import Callable, Protocol

from wbedit.errors import InternalError

LOGGER = logging.getLogger(__name__)

# Waybar reloads both config and style on SIGUSR2.
RELOAD_SIGNAL = "SIGUSR2"
STOP_SIGNAL = "SIGTERM"
WAYBAR_PROCESS = "waybar"
RESTART_DELAY = 0.5


class ProcessProbe(Protocol):
    def pids(self, name: str, *, exact: bool = False) -> list[int]: ...

    def is_running(self, name: str, *, exact: bool = False) -> bool: ...


class ProcessSignaler(Protocol):
    def signal(self, name: str, signal: str) -> None: ...

    def spawn(self, command: list[str]) -> None: ...


def _run(command: list[str]) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(command, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise InternalError(f"Failed to execute {command[0]} command: {exc}") from exc


class SubprocessBackend:
    """Probe and signal processes through pgrep/pkill."""

    def pids(self, name: str, *, exact: bool = False) -> list[int]:
        command = ["pgrep", "-x", name] if exact else ["pgrep", name]
        result = _run(command)
        # pgrep exits 1 when nothing matched
        if result.returncode != 0:
            return []
        pids: list[int] = []
        for line in result.stdout.splitlines():
            line = line.strip()
            if line.isdigit():
                pids.append(int(line))
        return pids

    def is_running(self, name: str, *, exact: bool = False) -> bool:
        command = ["pgrep", "-x", name] if exact else ["pgrep", name]
        return _run(command).returncode == 0

    def signal(self, name: str, signal: str) -> None:
        result = _run(["pkill", f"-{signal}", name])
        if result.returncode == 0:
            return
        stderr = result.stderr.strip()
        # Exit 1 with no output only means nothing matched.
        if stderr:
            raise InternalError(f"Failed to send {signal} to {name}: {stderr}")

    def spawn(self, command: list[str]) -> None:
        try:
            subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise InternalError(f"Failed to start {command[0]}: {exc}") from exc


class WaybarController:
    """Reload, start and stop Waybar through injected process capabilities."""

    def __init__(
        self,
        probe: ProcessProbe | None = None,
        signaler: ProcessSignaler | None = None,
        *,
        process_name: str = WAYBAR_PROCESS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        backend = SubprocessBackend()
        self.probe: ProcessProbe = probe if probe is not None else backend
        self.signaler: ProcessSignaler = signaler if signaler is not None else backend
        self.process_name = process_name
        self._sleep = sleep

    def is_running(self) -> bool:
        return self.probe.is_running(self.process_name)

    def pids(self) -> list[int]:
        return self.probe.pids(self.process_name)

    def reload(self) -> bool:
        """Send the reload signal. Returns False when Waybar is not running."""

        if not self.is_running():
            LOGGER.info("%s is not running; nothing to reload", self.process_name)
            return False
        self.signaler.signal(self.process_name, RELOAD_SIGNAL)
        LOGGER.info("Sent %s to %s", RELOAD_SIGNAL, self.process_name)
        return True

    def start(self) -> bool:
        if self.is_running():
            return False
        self.signaler.spawn([self.process_name])
        LOGGER.info("Started %s", self.process_name)
        return True

    def stop(self) -> bool:
        if not self.is_running():
            return False
        self.signaler.signal(self.process_name, STOP_SIGNAL)
        LOGGER.info("Stopped %s", self.process_name)
        return True

    def restart(self) -> None:
        self.stop()
        self._sleep(RESTART_DELAY)
        self.start()
