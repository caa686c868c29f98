"""
Answers whether the OS window hosting this session has input focus.

Each backend has one FocusProbe. The oracle is the single place where a
failed probe becomes "not focused".
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from backends import BackendKind
from errors import ProbeFailure
from probes import DEFAULT_TIMEOUT, Runner, run_probe

logger = logging.getLogger(__name__)

# Only compiles against the pre-3 iTerm2 scripting dictionary
CANARY_SCRIPT = "is-iterm2-pre3.applescript"

FOCUS_SCRIPTS = {
    BackendKind.ITERM2: "is-iterm2-active.applescript",
    BackendKind.ITERM2_LEGACY_DIALECT: "is-iterm2-3-active.applescript",
    BackendKind.APPLE_TERMINAL: "is-apple-terminal-active.applescript",
}


class FocusProbe(ABC):
    """Asks whether the window hosting a target currently has focus."""

    def __init__(self, runner: Runner = run_probe, timeout: float = DEFAULT_TIMEOUT):
        self.runner = runner
        self.timeout = timeout

    @abstractmethod
    def is_focused(self, target: str) -> bool:
        """Return the focus state, raising ProbeFailure if it is unknown."""


class AppleScriptProbe(FocusProbe):
    """Runs an osascript probe that prints "true" or "false" for a TTY."""

    def __init__(self, script: Path, runner: Runner = run_probe, timeout: float = DEFAULT_TIMEOUT):
        super().__init__(runner, timeout)
        self.script = script

    def is_focused(self, target: str) -> bool:
        args = ["osascript", str(self.script), target]
        answer = self.runner(args, self.timeout).stdout.strip()
        if answer == "true":
            return True
        if answer == "false":
            return False
        raise ProbeFailure(args, f"unexpected output {answer!r}")


class XdotoolProbe(FocusProbe):
    """Compares the active X11 window id with the session's window id."""

    def is_focused(self, target: str) -> bool:
        args = ["xdotool", "getactivewindow"]
        active = self.runner(args, self.timeout).stdout.strip()
        if not active:
            raise ProbeFailure(args, "no active window reported")
        return active == target


class FocusOracle:
    """Window-level focus answers for a resolved backend.

    Holds the iTerm2 dialect once it has been detected, so the canary runs
    at most once per invocation.
    """

    def __init__(self, resources_dir: Path, runner: Runner = run_probe, timeout: float = DEFAULT_TIMEOUT):
        self.resources_dir = Path(resources_dir)
        self.runner = runner
        self.timeout = timeout
        self._iterm2_dialect: Optional[BackendKind] = None

    def detect_dialect(self, backend: BackendKind) -> BackendKind:
        """Downgrade ITERM2 to ITERM2_LEGACY_DIALECT when the canary fails.

        A failing canary means a 3.x iTerm2. Other backends pass through.
        """
        if backend is not BackendKind.ITERM2:
            return backend

        if self._iterm2_dialect is None:
            canary = ["osascript", str(self.resources_dir / CANARY_SCRIPT)]
            try:
                self.runner(canary, self.timeout)
                self._iterm2_dialect = BackendKind.ITERM2
            except ProbeFailure as e:
                logger.debug(f"iTerm2 canary failed, using 3.x dictionary: {e.reason}")
                self._iterm2_dialect = BackendKind.ITERM2_LEGACY_DIALECT

        return self._iterm2_dialect

    def probe_for(self, backend: BackendKind) -> FocusProbe:
        if backend is BackendKind.XDOTOOL:
            return XdotoolProbe(self.runner, self.timeout)
        return AppleScriptProbe(self.resources_dir / FOCUS_SCRIPTS[backend], self.runner, self.timeout)

    def is_window_focused(self, backend: BackendKind, target: Optional[str]) -> bool:
        """Whether the window hosting target has focus; False on any failure."""
        backend = self.detect_dialect(backend)

        if not target:
            logger.warning(f"No probe target for backend {backend.value}")
            return False

        try:
            focused = self.probe_for(backend).is_focused(target)
        except ProbeFailure as e:
            logger.warning(f"Focus probe failed: {e}")
            return False

        logger.debug(f"Window focused ({backend.value}): {focused}")
        return focused
