from __future__ import annotations

import logging
import os
import subprocess
from enum import Enum
from typing import Mapping

from wbedit.errors import InternalError
from wbedit.process import ProcessProbe, SubprocessBackend
from wbedit.schema.models import CompositorInfo

LOGGER = logging.getLogger(__name__)


class Compositor(str, Enum):
    HYPRLAND = "hyprland"
    SWAY = "sway"
    RIVER = "river"
    DWL = "dwl"
    NIRI = "niri"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> Compositor:
        """Case-insensitive lookup; anything unrecognised is UNKNOWN."""

        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    def is_known(self) -> bool:
        return self is not Compositor.UNKNOWN

    @property
    def process_name(self) -> str | None:
        """Executable / process name, which is not always the lowercase value."""

        if self is Compositor.UNKNOWN:
            return None
        if self is Compositor.HYPRLAND:
            return "Hyprland"
        return self.value


def is_wayland_session(environ: Mapping[str, str] | None = None) -> bool:
    environ = os.environ if environ is None else environ
    return "WAYLAND_DISPLAY" in environ


def detect_from_processes(probe: ProcessProbe) -> Compositor:
    """Match running processes by exact name; UNKNOWN if the probe fails."""

    for compositor in Compositor:
        name = compositor.process_name
        if name is None:
            continue
        try:
            running = probe.is_running(name, exact=True)
        except InternalError as exc:
            LOGGER.debug("Process lookup unavailable: %s", exc)
            return Compositor.UNKNOWN
        if running:
            return compositor
    return Compositor.UNKNOWN


def detect_compositor(
    environ: Mapping[str, str] | None = None,
    probe: ProcessProbe | None = None,
) -> Compositor:
    """Detect the running Wayland compositor.

    Checks, in order: XDG_CURRENT_DESKTOP, WAYLAND_COMPOSITOR, then the
    process list. Outside a Wayland session the answer is always UNKNOWN.
    """

    environ = os.environ if environ is None else environ
    if not is_wayland_session(environ):
        return Compositor.UNKNOWN

    for var in ("XDG_CURRENT_DESKTOP", "WAYLAND_COMPOSITOR"):
        value = environ.get(var)
        if value:
            compositor = Compositor.from_name(value)
            if compositor.is_known():
                LOGGER.debug("Compositor %s from %s", compositor, var)
                return compositor

    return detect_from_processes(probe if probe is not None else SubprocessBackend())


def compositor_version(compositor: Compositor) -> str | None:
    """First line of `<compositor> --version`, or None if unavailable."""

    command = compositor.process_name
    if command is None:
        return None
    try:
        result = subprocess.run(
            [command, "--version"], capture_output=True, text=True, check=False
        )
    except OSError as exc:
        LOGGER.debug("Could not query %s version: %s", command, exc)
        return None
    if result.returncode != 0:
        return None
    lines = result.stdout.splitlines()
    return lines[0].strip() if lines else None


def compositor_info(
    environ: Mapping[str, str] | None = None,
    probe: ProcessProbe | None = None,
) -> CompositorInfo:
    compositor = detect_compositor(environ, probe)
    return CompositorInfo(
        name=str(compositor),
        version=compositor_version(compositor),
        session_type="wayland" if is_wayland_session(environ) else "x11",
    )


def is_compositor_running(
    name: str,
    environ: Mapping[str, str] | None = None,
    probe: ProcessProbe | None = None,
) -> bool:
    return Compositor.from_name(name) == detect_compositor(environ, probe)
